"""
Error handler for the sales search API.

Logs failures with diagnostic context and renders the error taxonomy as
JSON responses.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .errors import InternalError, SearchError


# Configure logging
logger = logging.getLogger(__name__)

GENERIC_SERVER_MESSAGE = "Failed to search sales"


class ErrorHandler:
    """
    Turns exceptions into client-facing error payloads.

    Client errors (4xx) echo their message. Server errors (5xx) use a
    generic message, and the underlying detail is attached only when
    include_detail is set (non-production environments).

    Attributes:
        include_detail: Whether 5xx payloads carry a detail field
    """

    def __init__(self, include_detail: bool = False):
        self.include_detail = include_detail

    def to_payload(self, error: Exception) -> Dict[str, Any]:
        """
        Build the JSON body for an error.

        Args:
            error: Exception raised while serving the request

        Returns:
            Dictionary with ok, error, code and optionally detail
        """
        search_error = self._as_search_error(error)

        if search_error.status_code < 500:
            return {
                'ok': False,
                'error': search_error.message,
                'code': search_error.code,
            }

        payload = {
            'ok': False,
            'error': GENERIC_SERVER_MESSAGE,
            'code': search_error.code,
        }
        if self.include_detail:
            payload['detail'] = search_error.detail or str(error)
        return payload

    def to_response(self, error: Exception, operation_name: str = "request") -> JSONResponse:
        search_error = self._as_search_error(error)
        self._log_error(operation_name, error, search_error.status_code)
        return JSONResponse(
            status_code=search_error.status_code,
            content=self.to_payload(error),
        )

    def _as_search_error(self, error: Exception) -> SearchError:
        if isinstance(error, SearchError):
            return error
        return InternalError(GENERIC_SERVER_MESSAGE, detail=f"{type(error).__name__}: {error}")

    def _log_error(
        self,
        operation_name: str,
        error: Exception,
        status_code: int,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log error with timestamp, context, and diagnostic data.

        Args:
            operation_name: Name of the operation that failed
            error: The exception that occurred
            status_code: HTTP status the error maps to
            context: Extra request context
        """
        details = {
            'timestamp': datetime.now().isoformat(),
            'operation': operation_name,
            'status_code': status_code,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'context': context or {},
        }

        if status_code >= 500:
            logger.error(
                f"Operation failed: {operation_name} | "
                f"Status: {status_code} | "
                f"Error: {type(error).__name__}: {str(error)}",
                exc_info=error,
            )
        else:
            logger.info(
                f"Rejected request: {operation_name} | "
                f"Status: {status_code} | "
                f"Error: {type(error).__name__}: {str(error)}"
            )
        logger.debug(f"Full error context: {details}")


def register_exception_handlers(app: FastAPI, handler: ErrorHandler) -> None:
    """Route SearchError and unexpected exceptions through handler."""

    @app.exception_handler(SearchError)
    async def _search_error(request: Request, exc: SearchError):
        return handler.to_response(exc, operation_name=request.url.path)

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception):
        return handler.to_response(exc, operation_name=request.url.path)
