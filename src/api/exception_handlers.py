"""Exception handlers for the FastAPI application."""

import traceback
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.exceptions import AppException, ErrorCode

logger = structlog.get_logger()


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle custom application exceptions."""
        logger.warning(
            "app_exception",
            error_code=exc.error_code.value,
            message=exc.message,
        )
        content: dict[str, Any] = {
            "success": False,
            "error_code": exc.error_code.value,
            "message": exc.message,
        }
        if exc.errors:
            content["errors"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle HTTP exceptions from FastAPI/Starlette, including unmatched routes."""
        if exc.status_code == 404 and exc.detail == "Not Found":
            error_code, message = ErrorCode.ROUTE_NOT_FOUND, "Route not found"
        else:
            error_code, message = ErrorCode.HTTP_ERROR, str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error_code": error_code.value,
                "message": message,
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed request bodies with the same shape as field validation."""
        logger.info("validation_error", errors=exc.errors())
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error_code": ErrorCode.VALIDATION_ERROR.value,
                "message": "Validation failed",
                "errors": [
                    {
                        "field": ".".join(str(x) for x in error["loc"] if x != "body") or "body",
                        "message": error["msg"],
                    }
                    for error in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
            exc_info=True,
        )

        content: dict[str, Any] = {
            "success": False,
            "error_code": ErrorCode.INTERNAL_ERROR.value,
            "message": "Internal server error",
            "request_id": request_id,
        }
        if not settings.is_production:
            content["error"] = str(exc)
            content["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)

        return JSONResponse(status_code=500, content=content)
