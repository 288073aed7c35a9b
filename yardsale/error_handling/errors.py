"""
Exception taxonomy for the sales search pipeline.

Terminal errors carry the HTTP status they map to. Recoverable errors
(SpatialQueryUnavailable, CursorDecodeError) are caught inside the search
orchestrator and never reach the client.
"""


class SearchError(Exception):
    """Base class for search pipeline errors."""

    status_code = 500
    code = "search_error"

    def __init__(self, message: str, detail: str = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class InvalidLocation(SearchError):
    """Missing or unparseable lat/lng."""

    status_code = 400
    code = "invalid_location"


class InvalidDateRange(SearchError):
    """Explicit date bounds that are malformed, incomplete or inverted."""

    status_code = 400
    code = "invalid_date_range"


class QueryTooLong(SearchError):
    """Free-text query over the length limit."""

    status_code = 400
    code = "query_too_long"


class SpatialQueryUnavailable(SearchError):
    """The spatial search procedure failed or timed out."""

    status_code = 503
    code = "spatial_query_unavailable"


class PersistenceError(SearchError):
    """The bounding-box fallback query failed."""

    status_code = 500
    code = "persistence_error"


class CursorDecodeError(SearchError):
    """A pagination cursor could not be decoded."""

    status_code = 400
    code = "invalid_cursor"


class InternalError(SearchError):
    """Unexpected failure outside the recoverable paths."""

    status_code = 500
    code = "internal_error"
