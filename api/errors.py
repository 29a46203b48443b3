"""
============================================================================
FILE: errors.py
LOCATION: api/errors.py
============================================================================

PURPOSE:
    RPC error type and the FastAPI exception handlers that render every
    failure in one JSON envelope.

ROLE IN PROJECT:
    Procedures raise RpcError with a symbolic code; handlers registered in
    main.py translate it, request validation failures, slowapi rejections
    and unexpected exceptions into:

        {"error": {"code": ..., "message": ..., "httpStatus": ...,
                   "fieldErrors": {...} | null}}

KEY COMPONENTS:
    - RpcError: Exception carrying an RPC error code
    - ERROR_STATUS: Code -> HTTP status table
    - register_exception_handlers(app): Wire handlers into the app

DEPENDENCIES:
    - External: fastapi, slowapi
    - Internal: logging_config.py
============================================================================
"""

from typing import Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from api.logging_config import get_logger

logger = get_logger("errors")


ERROR_STATUS = {
    "BAD_REQUEST": status.HTTP_400_BAD_REQUEST,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "TOO_MANY_REQUESTS": status.HTTP_429_TOO_MANY_REQUESTS,
    "INTERNAL_SERVER_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class RpcError(Exception):
    """Error raised by an RPC procedure."""

    def __init__(
        self,
        code: str,
        message: Optional[str] = None,
        field_errors: Optional[Dict[str, List[str]]] = None,
    ):
        if code not in ERROR_STATUS:
            raise ValueError(f"Unknown RPC error code: {code}")
        self.code = code
        self.message = message or code
        self.field_errors = field_errors
        super().__init__(self.message)

    @property
    def http_status(self) -> int:
        return ERROR_STATUS[self.code]

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "httpStatus": self.http_status,
            "fieldErrors": self.field_errors,
        }


def error_response(error: RpcError, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=error.http_status,
        content={"error": error.to_dict()},
        headers=headers,
    )


def _field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """Group pydantic errors by the last location segment (the field)."""
    grouped: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = loc[-1] if loc else "body"
        message = err.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        grouped.setdefault(field, []).append(message)
    return grouped


def register_exception_handlers(app: FastAPI) -> None:
    """Register the RPC error envelope handlers on the app."""

    @app.exception_handler(RpcError)
    async def handle_rpc_error(request: Request, exc: RpcError):
        if exc.http_status >= 500:
            logger.error(f"{request.url.path} failed: {exc.code} {exc.message}")
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        field_errors = _field_errors(exc)
        first = next(iter(field_errors.values()), ["Invalid input"])[0]
        return error_response(RpcError("BAD_REQUEST", first, field_errors))

    @app.exception_handler(RateLimitExceeded)
    def handle_rate_limit(request: Request, exc: RateLimitExceeded):
        # Sync: SlowAPIMiddleware calls this handler without awaiting it
        logger.info(f"Client rate limit hit on {request.url.path}: {exc.detail}")
        return error_response(
            RpcError("TOO_MANY_REQUESTS", f"Rate limit exceeded: {exc.detail}"),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error(
            f"An unhandled exception occurred on {request.url.path}: {exc}",
            exc_info=True,
        )
        return error_response(
            RpcError("INTERNAL_SERVER_ERROR", "An unexpected error occurred."),
        )
