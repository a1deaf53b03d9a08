"""Map domain exceptions onto HTTP responses.

Every error body has the shape ``{"error": "<message>"}``.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backoffice.domain.exceptions import (
    DomainException,
    DuplicateOrderNumberError,
    EntityNotFoundError,
    InvalidStatusError,
    StockUpdateConflict,
    ValidationError,
)

logger = structlog.get_logger(__name__)

# Most specific first; the first isinstance match wins.
STATUS_CODES: list[tuple[type[DomainException], int]] = [
    (EntityNotFoundError, 404),
    (StockUpdateConflict, 409),
    (DuplicateOrderNumberError, 409),
    (InvalidStatusError, 400),
    (ValidationError, 400),
]


def status_for(exc: DomainException) -> int:
    for exc_type, code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return 400


def install_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(DomainException)
    async def domain_error(request: Request, exc: DomainException) -> JSONResponse:
        code = status_for(exc)
        logger.info(
            "Request rejected",
            path=request.url.path,
            status=code,
            error=type(exc).__name__,
            message=str(exc),
        )
        return JSONResponse(status_code=code, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error", path=request.url.path, exc_info=exc)
        body = {"error": "Server error"}
        if request.app.state.settings.is_development:
            body["detail"] = str(exc)
        return JSONResponse(status_code=500, content=body)
