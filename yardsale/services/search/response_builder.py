"""Search response assembly."""

from yardsale.models import Center, DateWindowInfo, SearchQuery, SearchResponse
from .search_orchestrator import SearchOutcome


def build_search_response(query: SearchQuery, outcome: SearchOutcome, duration_ms: float) -> SearchResponse:
    """
    Assemble the endpoint payload for a finished search.

    degraded is only set when the fallback path served the request and
    date_window only when a window was applied.
    """
    window = outcome.date_window
    date_window = None
    if window is not None:
        date_window = DateWindowInfo(
            start=window.start,
            end=window.end,
            label=window.label,
            display=window.display,
        )

    return SearchResponse(
        data=outcome.rows,
        center=Center(lat=query.lat, lng=query.lng),
        distance_km=query.radius_km,
        count=len(outcome.rows),
        duration_ms=round(duration_ms, 2),
        next_cursor=outcome.next_cursor,
        degraded=True if outcome.degraded else None,
        date_window=date_window,
    )
