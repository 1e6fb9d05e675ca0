"""Schemas for user-triggered mutations and their status cycle."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

NotificationStyle = Literal["animated", "success", "failure"]


class Notification(BaseModel):
    """One phase of a transient status notification."""

    model_config = ConfigDict(frozen=True)

    style: NotificationStyle
    title: str


class ActionResult(BaseModel):
    """Outcome of a user action on a chat list.

    ``performed`` is False when the user declined the confirmation prompt;
    ``confirmation_prompt`` then holds the question that was asked.
    """

    model_config = ConfigDict(frozen=True)

    performed: bool
    confirmation_prompt: str | None = None
    notifications: list[Notification] = Field(default_factory=list)
    affected: int = 0

    @property
    def message(self) -> str:
        """Envelope message for API responses."""
        return "Success" if self.performed else "Confirmation required"

    def with_notifications(self, notifications: list[Notification]) -> "ActionResult":
        return self.model_copy(update={"notifications": list(notifications)})
