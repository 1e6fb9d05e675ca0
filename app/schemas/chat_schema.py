"""Chat record schemas."""

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat()


def parse_timestamp(value: str | None) -> datetime:
    """Parse an ISO-8601 timestamp for ordering.

    Missing or unparseable values become the Unix epoch; naive values are
    read as UTC.
    """
    if not value:
        return EPOCH
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class Chat(BaseModel):
    """One question/answer exchange.

    Fields written by other producers are kept as extras so that a record
    survives load and rewrite unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str = Field(..., min_length=1)
    question: str = Field(..., min_length=1)
    answer: str = ""
    created_at: str | None = None

    @field_validator("answer", mode="before")
    @classmethod
    def answer_none_as_empty(cls, v: str | None) -> str:
        return "" if v is None else v

    def matches(self, search_text: str) -> bool:
        """Case-insensitive substring match on question or answer."""
        if search_text == "":
            return True
        needle = search_text.casefold()
        return needle in self.question.casefold() or needle in self.answer.casefold()


class SavedChat(Chat):
    """A Chat copy stamped with the moment it was saved."""

    saved_at: str

    @classmethod
    def from_chat(cls, chat: Chat, saved_at: str | None = None) -> "SavedChat":
        """Copy every field of ``chat`` and stamp ``saved_at``."""
        data = chat.model_dump(exclude={"saved_at"})
        return cls(**data, saved_at=saved_at or utc_now_iso())


class ChatCreate(BaseModel):
    """Request body for appending a chat to history."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), min_length=1)
    question: str = Field(..., min_length=1, max_length=4000)
    answer: str = ""
    created_at: str | None = Field(default_factory=utc_now_iso)

    def to_chat(self) -> Chat:
        return Chat(**self.model_dump())


class AddChatResponse(BaseModel):
    """Result of appending a chat to history."""

    model_config = ConfigDict(frozen=True)

    added: bool
    chat: Chat
