"""
forgeclaw_portal.api.errors

Exception handlers registered on the app.

Responsibilities:
- Map Northflank boundary failures to HTTP statuses.
- Log and mask unexpected errors.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)

from forgeclaw_portal.northflank.errors import (
    BuildNotReadyError,
    NorthflankError,
    SubdomainTakenError,
)
from forgeclaw_portal.observability.logging import get_logger

log = get_logger(__name__)


def error_body(message: str) -> dict[str, str]:
    # `detail` is FastAPI's convention; the signup frontend reads `error`.
    return {"detail": message, "error": message}


async def northflank_error_handler(request: Request, exc: NorthflankError) -> JSONResponse:
    if isinstance(exc, BuildNotReadyError | SubdomainTakenError):
        return JSONResponse(status_code=HTTP_409_CONFLICT, content=error_body(exc.message))
    log.error("northflank_request_failed", error=exc.message)
    return JSONResponse(status_code=HTTP_502_BAD_GATEWAY, content=error_body(exc.message))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("api_error", error=str(exc))
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error"),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NorthflankError, northflank_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
