"""
Error handling module for the sales search API.

Provides the error taxonomy and the handler that renders it.
"""

from .error_handler import ErrorHandler, register_exception_handlers
from .errors import (
    CursorDecodeError,
    InternalError,
    InvalidDateRange,
    InvalidLocation,
    PersistenceError,
    QueryTooLong,
    SearchError,
    SpatialQueryUnavailable,
)

__all__ = [
    'ErrorHandler',
    'register_exception_handlers',
    'CursorDecodeError',
    'InternalError',
    'InvalidDateRange',
    'InvalidLocation',
    'PersistenceError',
    'QueryTooLong',
    'SearchError',
    'SpatialQueryUnavailable',
]
