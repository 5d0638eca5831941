"""API assembly helpers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ..core.errors import AuthError, ValidationError
from .routers import ALL_ROUTERS

log = logging.getLogger(__name__)


async def _auth_error(request: Request, exc: AuthError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


async def _request_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # never echo the submitted body back
    log.info("rejected malformed body on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"success": False, "error": ValidationError.default_message},
    )


async def _database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    log.exception("database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


def register_routes(app: FastAPI) -> None:
    """Attach all application routers and the JSON error handlers."""

    app.add_exception_handler(AuthError, _auth_error)
    app.add_exception_handler(RequestValidationError, _request_error)
    app.add_exception_handler(SQLAlchemyError, _database_error)
    for router in ALL_ROUTERS:
        app.include_router(router)


__all__ = ["register_routes"]
