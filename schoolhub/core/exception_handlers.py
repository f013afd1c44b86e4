"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to the failure envelope {"success": false, "message", "error"?}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from schoolhub.core.config import get_settings
from schoolhub.domain.exceptions import SchoolHubException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "INVALID_STATE_TRANSITION": 400,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "TENANT_MISMATCH": 403,
    "SYSTEM_ROLE_PROTECTED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "CONFLICT": 409,
    "ROLE_IN_USE": 409,
    "SQL_NOT_CONFIGURED": 503,
}


def _schoolhub_exception_handler(
    request: Request, exc: SchoolHubException
) -> JSONResponse:
    """Return JSON from SchoolHubException.to_dict() with the mapped status code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.error("%s: %s", exc.error_code, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with field-level validation errors."""
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": "Request validation failed",
            "error": "VALIDATION_ERROR",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return the failure envelope for Starlette HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include the error text only in development or debug mode."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    content: dict[str, Any] = {"success": False, "message": "Internal server error"}
    if settings.expose_error_details:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: SchoolHubException (and subclasses), RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(SchoolHubException, _schoolhub_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
