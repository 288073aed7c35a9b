"""
Search routes for yard sales.
"""

import logging
import time
import uuid

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from yardsale.config import AppSettings
from yardsale.dependencies import get_app_settings, get_search_orchestrator
from yardsale.services.search import SearchOrchestrator, build_search_response, parse_search_params

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/sales")
async def search_sales(
    request: Request,
    orchestrator: SearchOrchestrator = Depends(get_search_orchestrator),
    settings: AppSettings = Depends(get_app_settings),
):
    """
    Search published sales around a point.

    1. Parses and clamps the query parameters
    2. Runs the spatial search, or the bounding-box fallback if the
       spatial procedure is unavailable (response carries degraded=true)
    3. Returns one page of rows ordered by distance, start time and id,
       with nextCursor when more pages may exist

    Invalid location, date range or query text produce a 400; any other
    failure a 500.
    """
    start_time = time.time()
    log = logging.LoggerAdapter(logger, {"request_id": uuid.uuid4().hex[:12]})

    query = parse_search_params(request.query_params, settings.search)
    log.info(
        f"Sales search lat={query.lat} lng={query.lng} distanceKm={query.radius_km} "
        f"dateRange={query.date_range} categories={','.join(query.categories)} "
        f"limit={query.limit} cursor={'yes' if query.cursor else 'no'}"
    )

    outcome = await orchestrator.search(query, log=log)

    response = build_search_response(query, outcome, (time.time() - start_time) * 1000)
    return JSONResponse(content=response.to_payload())
