"""Data models for Yard Sale Finder"""

from .sale import PrivacyMode, SaleRecord, SaleStatus
from .search import Center, DateWindowInfo, SearchQuery, SearchResponse, SearchResultRow

__all__ = [
    "PrivacyMode",
    "SaleRecord",
    "SaleStatus",
    "Center",
    "DateWindowInfo",
    "SearchQuery",
    "SearchResponse",
    "SearchResultRow",
]
