"""
FastAPI dependencies for request handlers.
"""

from functools import lru_cache

from fastapi import Depends

from yardsale.config import AppSettings, get_settings
from yardsale.db import get_pg_pool
from yardsale.services.search import PostgresSalesRepository, SalesRepository, SearchOrchestrator


@lru_cache
def get_app_settings() -> AppSettings:
    return get_settings()


def get_sales_repository(settings: AppSettings = Depends(get_app_settings)) -> SalesRepository:
    return PostgresSalesRepository(get_pg_pool(), settings.database)


def get_search_orchestrator(
    repository: SalesRepository = Depends(get_sales_repository),
    settings: AppSettings = Depends(get_app_settings),
) -> SearchOrchestrator:
    return SearchOrchestrator(repository, settings.search)
