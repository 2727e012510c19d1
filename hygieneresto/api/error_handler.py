"""Error envelope for every API response: ``{"message": ..., "status": ...}``."""

from typing import Any

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

# Status code to message fallback when an exception carries no detail
_STATUS_MESSAGES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    500: "Internal Server Error",
}


def _field_name(loc: tuple[Any, ...] | list[Any]) -> str:
    # Drop the "body" / "query" source prefix FastAPI adds
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    # Only handle HTTPException, otherwise re-raise
    if not isinstance(exc, StarletteHTTPException):
        raise exc

    if isinstance(exc.detail, str) and exc.detail:
        message = exc.detail
    else:
        message = _STATUS_MESSAGES.get(exc.status_code, "HTTP Error")

    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message, "status": exc.status_code},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: Exception) -> Response:
    """Render request validation failures as 400 with one line per invalid field."""
    if not isinstance(exc, RequestValidationError):
        raise exc

    errors = [
        {"field": _field_name(error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    message = "; ".join(
        f"{error['field']}: {error['message']}" if error["field"] else error["message"]
        for error in errors
    )
    logger.debug(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": message or "Invalid request.",
            "status": status.HTTP_400_BAD_REQUEST,
            "errors": errors,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
