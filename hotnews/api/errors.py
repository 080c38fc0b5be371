"""Error payloads and exception handlers for the news API.

Failures while serving a query never expose upstream detail: storage and
service errors become a generic, retryable 503.
"""

from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hotnews.core.exceptions import HotNewsError
from hotnews.core.logging import get_logger

logger = get_logger(__name__)

ERROR_CODE_BY_STATUS: dict[int, str] = {
    400: "bad_request",
    404: "not_found",
    422: "validation_error",
    500: "internal_error",
    503: "service_unavailable",
}

FETCH_FAILED_MESSAGE = "Failed to fetch news"


class ErrorResponse(BaseModel):
    """Standardized error response payload."""

    error: str
    message: str
    retryable: bool | None = None


def build_http_error(status_code: int, error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=ErrorResponse(error=error, message=message).model_dump(exclude_none=True),
    )


def _status_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTPExceptions as ErrorResponse payloads."""
    detail = exc.detail
    if isinstance(detail, dict) and "error" in detail and "message" in detail:
        payload = ErrorResponse.model_validate(detail).model_dump(exclude_none=True)
    else:
        payload = ErrorResponse(
            error=ERROR_CODE_BY_STATUS.get(exc.status_code, "error"),
            message=str(detail) if detail else _status_phrase(exc.status_code),
        ).model_dump(exclude_none=True)
    return JSONResponse(
        status_code=exc.status_code,
        content=payload,
        headers=getattr(exc, "headers", None),
    )


async def service_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map storage/service failures to a retryable 503."""
    context: dict[str, Any] = exc.to_dict() if isinstance(exc, HotNewsError) else {}
    logger.error(
        "News query failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
        context=context.get("context"),
    )
    payload = ErrorResponse(
        error="service_unavailable",
        message=FETCH_FAILED_MESSAGE,
        retryable=True,
    )
    return JSONResponse(status_code=HTTPStatus.SERVICE_UNAVAILABLE, content=payload.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(HotNewsError, service_unavailable_handler)
    app.add_exception_handler(SQLAlchemyError, service_unavailable_handler)


__all__ = [
    "ErrorResponse",
    "build_http_error",
    "register_exception_handlers",
]
