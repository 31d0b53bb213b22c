"""Exception handlers producing the {success, message} error body"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tax_gateway.api.rate_limit import RateLimitExceeded
from tax_gateway.api.v1.schemas import FIELD_LABELS
from tax_gateway.api.dependencies import get_request_id

GENERIC_VALIDATION_MESSAGE = "Invalid request body!"


def validation_error_message(exc: RequestValidationError) -> str:
    """Translate the first pydantic error into a client-facing message"""
    errors = exc.errors()
    if not errors:
        return GENERIC_VALIDATION_MESSAGE

    error = errors[0]
    error_type = error.get("type")
    loc = error.get("loc", ())
    field = loc[-1] if len(loc) > 1 else None

    if error_type == "json_invalid":
        return "Request body must be valid JSON!"
    if error_type == "value_error":
        return str(error["ctx"]["error"])
    if error_type == "less_than_equal":
        return "Input values exceed reasonable limits!"

    label = FIELD_LABELS.get(field)
    if label is None:
        return GENERIC_VALIDATION_MESSAGE
    if error_type == "greater_than_equal":
        return f"{label} must be a non-negative number!"
    if field == "monthlyGrossIncome":
        return "Monthly gross income is required and must be a valid number!"
    return f"{label} must be a valid number!"


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = validation_error_message(exc)
    logging.warning(f"Rejected request: {message}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=400, content={"success": False, "message": message})


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def handle_rate_limit(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"success": False, "message": exc.message, "retryAfter": exc.retry_after},
        headers={"Retry-After": str(exc.retry_after)},
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logging.error(f"Unexpected error: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=500, content={"success": False, "message": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RateLimitExceeded, handle_rate_limit)
    app.add_exception_handler(Exception, handle_unexpected_error)
