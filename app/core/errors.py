import math
from collections.abc import Mapping, Sequence
from typing import Any,  cast
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_422_UNPROCESSABLE_CONTENT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from app.core.logging import get_logger


class ErrorBody(BaseModel):
    """Structured error body."""
    type: str
    message: str
    details: dict[str, object] | None = None


class ErrorEnvelope(BaseModel):
    error: ErrorBody
    meta: dict[str, object]


def _build_meta(request: Request) -> dict[str, object]:
    """Collect metadata for error responses."""
    return {
        "request_id": getattr(request.state, "correlation_id", "-"),
        "path": request.url.path,
        "method": request.method,
    }

def _finite_json(value: object) -> object:
    """JSON responses refuse inf/nan; echo them back as strings."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {k: _finite_json(v) for k, v in cast(dict[object, object], value).items()}
    if isinstance(value, (list, tuple)):
        return [_finite_json(v) for v in cast(list[object], value)]
    return value


def _serialize_validation_errors(errors: Sequence[Mapping[Any, Any]]) -> list[dict[str, object]]:
    """Serialize validation errors, handling non-serializable objects in context."""

    serialized_errors: list[dict[str, object]] = []

    for error in errors:
        serialized_error: dict[str, object] = dict(error)

        if "ctx" in serialized_error and isinstance(serialized_error["ctx"], dict):
            ctx: dict[str, object] = cast(dict[str, object], serialized_error["ctx"]).copy()

            if "error" in ctx:
                ctx["error"] = str(ctx["error"])
            serialized_error["ctx"] = ctx
        if "input" in serialized_error:
            serialized_error["input"] = _finite_json(serialized_error["input"])
        serialized_errors.append(serialized_error)
    return serialized_errors


def _error_type_for(status_code: int) -> str:
    if status_code == 404:
        return "not_found"
    if status_code == 405:
        return "method_not_allowed"
    return "http_error"


def register_exception_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("HTTP error", extra={"status_code": exc.status_code})
        if isinstance(exc.detail, dict):
            message = str(exc.detail) if len(str(exc.detail)) < 200 else "Request failed"
            details = cast(dict[str, object], exc.detail)
        else:
            message = exc.detail or "HTTP error"
            details = None

        body = ErrorEnvelope(
            error=ErrorBody(type=_error_type_for(exc.status_code), message=message, details=details),
            meta=_build_meta(request),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.info("Validation error")
        body = ErrorEnvelope(
            error=ErrorBody(
                type="validation_error",
                message="Invalid request payload",
                details={"errors": _serialize_validation_errors(exc.errors())},
            ),
            meta=_build_meta(request),
        )
        return JSONResponse(
            status_code=HTTP_422_UNPROCESSABLE_CONTENT, content=body.model_dump()
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.error("Catalog storage error", extra={"error": str(exc)})
        body = ErrorEnvelope(
            error=ErrorBody(type="storage_error", message="Catalog storage failure"),
            meta=_build_meta(request),
        )
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump()
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.exception("Unhandled server error", exc_info=exc)
        body = ErrorEnvelope(
            error=ErrorBody(type="server_error", message="Internal Server Error"),
            meta=_build_meta(request),
        )
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump()
        )
