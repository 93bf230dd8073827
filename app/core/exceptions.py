"""Application exception classes and handlers."""

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.schemas.response_schema import error_response

logger = structlog.get_logger()


class AppException(Exception):
    """Base application exception.

    ``status_code`` is the logical status reported in the error body. Expected
    failures are still delivered with HTTP 200 so clients render the body.
    """

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


# --- Validation (400) ---


class ValidationFailedError(AppException):
    """Input rejected before reaching storage."""

    def __init__(self, message: str = "Invalid request") -> None:
        super().__init__(message=message, code="VALIDATION_ERROR", status_code=400)


# --- Not Found (404) ---


class ChatNotFoundError(AppException):
    """Chat does not exist."""

    def __init__(self) -> None:
        super().__init__(
            message="Chat not found",
            code="CHAT_NOT_FOUND",
            status_code=404,
        )


# --- Upstream (502) ---


class UpstreamServiceError(AppException):
    """A remote service (MCP tool server, LLM provider) failed."""

    def __init__(self, message: str = "Upstream service error") -> None:
        super().__init__(message=message, code="UPSTREAM_ERROR", status_code=502)


# --- Storage (503) ---


class StorageError(AppException):
    """The database could not complete a write."""

    def __init__(self, message: str = "Storage unavailable") -> None:
        super().__init__(message=message, code="STORAGE_ERROR", status_code=503)


# --- Exception Handlers ---


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Central exception handler for AppException."""
    logger.warning(
        "Request failed",
        path=request.url.path,
        code=exc.code,
        status=exc.status_code,
    )
    return JSONResponse(
        status_code=200,
        content=error_response(exc.status_code, exc.message, exc.code),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request body/query validation failures as expected errors."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=200,
        content=error_response(400, details or "Invalid request", "VALIDATION_ERROR"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; the only path that yields HTTP 500."""
    logger.error("Unhandled exception", path=request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=error_response(500, "Internal server error", "INTERNAL_ERROR"),
    )
