"""Unified API response schemas."""

from typing import Generic, TypeVar

from pydantic import BaseModel

from app.schemas.action_schema import ActionResult, Notification

T = TypeVar("T")


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope rendered by the AppException handler."""

    success: bool = False
    error: ErrorDetail


class ApiResponse(BaseModel, Generic[T]):
    """Success response with status, message, and data (no code field)."""

    status: int = 200
    message: str = "Success"
    data: T | None = None


def success_response(data: T, status: int = 200, message: str = "Success") -> dict:
    """Build a success response dict for returning from endpoints."""
    return {"status": status, "message": message, "data": data}


def action_response(result: ActionResult, notifications: list[Notification]) -> dict:
    """Success envelope for a list action, carrying its status cycle."""
    return success_response(
        result.with_notifications(notifications),
        message=result.message,
    )
