"""Search services"""

from .cursor import CursorKey, decode_cursor, encode_cursor
from .normalizer import SearchPath, normalize_row, normalize_rows
from .query_parser import parse_search_params
from .repository import PostgresSalesRepository, SalesRepository
from .response_builder import build_search_response
from .search_orchestrator import SearchOrchestrator, SearchOutcome

__all__ = [
    "CursorKey",
    "decode_cursor",
    "encode_cursor",
    "SearchPath",
    "normalize_row",
    "normalize_rows",
    "parse_search_params",
    "PostgresSalesRepository",
    "SalesRepository",
    "build_search_response",
    "SearchOrchestrator",
    "SearchOutcome",
]
