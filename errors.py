"""
Error taxonomy shared by the stores, the search/analytics layer and the routes.

Every error carries the HTTP status it maps to; `register_error_handlers`
renders them as ``{"detail": message}`` the same way the API has always
reported failures.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class HushMapError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(HushMapError):
    """Malformed or out-of-range input, rejected before touching the store."""
    status_code = 400


class AuthenticationError(HushMapError):
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class AuthorizationError(HushMapError):
    status_code = 403


class NotFoundError(HushMapError):
    status_code = 404


class InternalError(HushMapError):
    """Store unavailability or unexpected failure. The message is generic."""
    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


def register_error_handlers(app: FastAPI):
    @app.exception_handler(HushMapError)
    async def handle_hushmap_error(request: Request, exc: HushMapError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
            headers=headers,
        )

    @app.exception_handler(SQLAlchemyError)
    async def handle_store_error(request: Request, exc: SQLAlchemyError):
        logger.error("Store error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
        return JSONResponse(
            status_code=400,
            content={"detail": message, "errors": jsonable_encoder(errors)},
        )
