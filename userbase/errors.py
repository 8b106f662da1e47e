"""Error types and exception handlers.

Every error leaves the API in the same envelope::

    {"statusCode": 404, "error": "Not Found", "message": "User doesn't exist"}

Routes and services raise the ``HTTPException`` subclasses below. Request
validation failures (pydantic) are turned into a 400 with a short,
field-oriented message instead of FastAPI's default 422 list.
"""
import logging
import re
from http import HTTPStatus
from typing import Any, Iterable

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR = "An internal server error occurred"
UNAUTHENTICATED = "Unauthenticated User"
UNAUTHORIZED = "You are not authorized for this action."
USER_NOT_FOUND = "User doesn't exist"


class BadRequest(HTTPException):
    def __init__(self, message: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


class Unauthorized(HTTPException):
    def __init__(self, message: str = UNAUTHENTICATED):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=message)


class Forbidden(HTTPException):
    def __init__(self, message: str):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=message)


class NotFound(HTTPException):
    def __init__(self, message: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=message)


class Conflict(HTTPException):
    def __init__(self, message: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=message)


class InternalServerError(HTTPException):
    def __init__(self, message: str = INTERNAL_SERVER_ERROR):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


def error_body(status_code: int, message: str) -> dict:
    """Build the error envelope for a status code."""
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        phrase = "Error"
    return {"statusCode": status_code, "error": phrase, "message": message}


# =============================================================================
# Validation messages
# =============================================================================

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _field_label(loc: Iterable[Any]) -> str:
    names = [str(part) for part in loc if str(part) not in _LOCATION_PREFIXES]
    return names[-1] if names else "value"


def describe_error(error: dict) -> str:
    """Turn one pydantic error dict into a readable message.

    Examples:
        >>> describe_error({"type": "missing", "loc": ("body", "firstName"), "msg": ""})
        '"firstName" is required'
    """
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}
    field = _field_label(error.get("loc", ()))
    label = f'"{field}"'

    if error_type == "missing":
        return f"{label} is required"
    if error_type in ("literal_error", "enum"):
        choices = re.findall(r"'([^']*)'", str(ctx.get("expected", "")))
        return f"{label} must be one of [{', '.join(choices)}]"
    if error_type.startswith("url"):
        return f"{label} must be a valid uri"
    if error_type in ("int_parsing", "int_type", "int_from_float", "float_parsing", "float_type"):
        return f"{label} must be a number"
    if error_type == "string_type":
        return f"{label} must be a string"
    if error_type in ("bool_parsing", "bool_type"):
        return f"{label} must be a boolean"
    if error_type in ("dict_type", "model_type", "model_attributes_type"):
        return f"{label} must be of type object"
    if error_type == "string_too_short":
        if ctx.get("min_length") == 1:
            return f"{label} is not allowed to be empty"
        return f"{label} length must be at least {ctx.get('min_length')} characters long"
    if error_type == "string_too_long":
        return f"{label} length must be less than or equal to {ctx.get('max_length')} characters long"
    if error_type == "greater_than_equal":
        return f"{label} must be greater than or equal to {ctx.get('ge')}"
    if error_type == "less_than_equal":
        return f"{label} must be less than or equal to {ctx.get('le')}"
    if error_type == "greater_than":
        return f"{label} must be greater than {ctx.get('gt')}"
    if error_type == "less_than":
        return f"{label} must be less than {ctx.get('lt')}"
    if error_type == "extra_forbidden":
        return f"{label} is not allowed"

    # Custom errors (PydanticCustomError) carry their final message
    return error.get("msg", "Invalid request")


def first_error_message(errors: list[dict]) -> str:
    """Message for the first error only, the way clients expect one line."""
    if not errors:
        return "Invalid request"
    return describe_error(errors[0])


# =============================================================================
# Exception handlers
# =============================================================================

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render any HTTPException in the error envelope."""
    headers = getattr(exc, "headers", None)
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed",
            request.method,
            request.url.path,
            extra={"context": {"status": exc.status_code}}
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, str(exc.detail)),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Render FastAPI request validation failures as a 400."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(status.HTTP_400_BAD_REQUEST, first_error_message(exc.errors())),
    )


async def validation_error_handler(request: Request, exc: ValidationError):
    """Render pydantic errors raised while validating inside a route."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(status.HTTP_400_BAD_REQUEST, first_error_message(exc.errors())),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all for unexpected errors; the client only sees the generic 500."""
    logger.exception(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_SERVER_ERROR),
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
