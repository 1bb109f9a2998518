"""API error taxonomy and the FastAPI handlers that render it"""
from typing import Any, Dict, Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Error rendered to the caller as JSON {error, message, ...}"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        error: Optional[str] = None,
        status_code: Optional[int] = None,
        **extra: Any,
    ):
        super().__init__(message or error or self.error)
        self.message = message
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.message is not None:
            body["message"] = self.message
        body.update({key: value for key, value in self.extra.items() if value is not None})
        return body


class ValidationError(APIError):
    """Malformed or missing input; raised before any side effect"""
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation Error"


class NotFoundError(APIError):
    """Referenced record is absent or not owned by the caller"""
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"


class ExternalServiceError(APIError):
    """AI provider failure; always carries a fallback result"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "AI service error"

    def __init__(
        self,
        message: Optional[str] = None,
        error: Optional[str] = None,
        error_type: Optional[str] = None,
        details: Optional[str] = None,
        fallback: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error=error, errorType=error_type, details=details, fallback=fallback)
        self.error_type = error_type
        self.details = details
        self.fallback = fallback


class PersistenceError(APIError):
    """Store read or write failed"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Database error"


def invalid_id_error() -> ValidationError:
    return ValidationError("The provided ID is not valid", error="Invalid ID format")


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(item) for item in err.get("loc", ()) if item != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts)


def register_exception_handlers(app: FastAPI, debug: bool = False):
    """Install JSON renderers for every error the API can produce"""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.error} ({exc.message})")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": ValidationError.error, "message": _describe_validation_errors(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={
                    "error": "Route not found",
                    "message": f"Cannot {request.method} {request.url.path}",
                },
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    async def database_error_handler(request: Request, exc: Exception):
        logger.exception(f"Database error on {request.method} {request.url.path}")
        error = PersistenceError("The operation could not be completed")
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    # Drivers such as asyncpg surface an unreachable server as a bare OSError
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(OSError, database_error_handler)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        content = {"error": "Internal Server Error"}
        if debug:
            content["message"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)
