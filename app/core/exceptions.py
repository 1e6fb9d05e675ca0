"""Application exception classes and handlers."""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


# --- Not Found (404) ---


class ChatNotFoundError(AppException):
    """Chat record not found in the requested collection."""

    def __init__(self, chat_id: str, collection: str = "history") -> None:
        super().__init__(
            message=f"Chat '{chat_id}' not found in {collection}",
            code="CHAT_NOT_FOUND",
            status_code=404,
        )


# --- Service Unavailable (503) ---


class StoreNotReadyError(AppException):
    """Chat record store has not been initialized."""

    def __init__(self) -> None:
        super().__init__(
            message="Chat store not initialized",
            code="STORE_NOT_READY",
            status_code=503,
        )


# --- Persistence (internal) ---


class PersistenceError(AppException):
    """A write to the key/value storage failed."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(
            message=f"Failed to persist '{key}'",
            code="PERSISTENCE_ERROR",
            status_code=500,
        )


# --- Exception Handlers ---


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Central exception handler for AppException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {
                "code": exc.code,
                "message": exc.message,
            },
        },
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation errors in the AppException shape."""
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(loc) for loc in first.get("loc", ()) if loc != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": f"{field}: {message}" if field else message,
            },
        },
    )
