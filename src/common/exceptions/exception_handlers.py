# File: common/exceptions/exception_handlers.py

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from common.logging.logger import log_error
from common.schemas.standard_response import ErrorResponse


def register_exception_handlers(app: FastAPI):
    """
    Register global exception handlers for all expected error types.
    Every error leaves the API in the standard envelope.
    """

    def build_error_response(status_code: int, message: str, errors=None, headers=None):
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse.from_exception(message, errors).model_dump(mode="json"),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles Pydantic validation errors (e.g., missing fields, wrong types, etc.)
        """
        errors = {}
        for err in exc.errors():
            loc = err.get("loc", [])
            field = str(loc[-1]) if loc else "field"
            errors.setdefault(field, []).append(err.get("msg", "Invalid input."))

        log_error("Validation error", extra={
            "path": request.url.path,
            "method": request.method,
            "errors": errors
        })

        return build_error_response(HTTP_400_BAD_REQUEST, "Validation failed", errors=errors)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """
        Handles all HTTP exceptions (including custom ones).
        """
        log_error("HTTPException caught", extra={
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.status_code,
            "detail": str(exc.detail),
        })

        return build_error_response(
            status_code=exc.status_code,
            message=str(exc.detail),
            errors=getattr(exc, "errors", None),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Handles uncaught general exceptions.
        """
        log_error("Unhandled exception", extra={
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
        }, exc_info=True)

        return build_error_response(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            message="Internal server error occurred."
        )
