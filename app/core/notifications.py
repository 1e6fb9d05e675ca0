"""Status notifications and confirmation prompts for user actions."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Protocol

import structlog

from app.schemas.action_schema import Notification, NotificationStyle

logger = structlog.get_logger()


class Notifier(Protocol):
    """Three-phase status cycle: begin, then succeed or fail."""

    async def begin(self, message: str) -> None: ...

    async def succeed(self, message: str) -> None: ...

    async def fail(self, message: str) -> None: ...


class Confirmer(Protocol):
    """Asks the user before a destructive action."""

    async def confirm(self, prompt: str) -> bool: ...


class LogNotifier:
    """Notifier that writes every phase to the structured log."""

    async def begin(self, message: str) -> None:
        logger.info(message, phase="begin")

    async def succeed(self, message: str) -> None:
        logger.info(message, phase="success")

    async def fail(self, message: str) -> None:
        logger.warning(message, phase="failure")


class RecordingNotifier:
    """Notifier that keeps the phases of a single request in order."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def _record(self, style: NotificationStyle, message: str) -> None:
        self.notifications.append(Notification(style=style, title=message))

    async def begin(self, message: str) -> None:
        self._record("animated", message)

    async def succeed(self, message: str) -> None:
        self._record("success", message)

    async def fail(self, message: str) -> None:
        self._record("failure", message)


class StaticConfirmer:
    """Confirmer whose answer was given up front (e.g. ``?confirm=true``)."""

    def __init__(self, confirmed: bool) -> None:
        self._confirmed = confirmed
        self.prompts: list[str] = []

    async def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self._confirmed


@asynccontextmanager
async def status_cycle(
    notifier: Notifier,
    pending: str,
    done: str,
    failed: str = "Something went wrong",
) -> AsyncGenerator[None, None]:
    """Wrap a mutation in begin → succeed, or begin → fail on error.

    Exceptions raised inside the block are re-raised after ``fail``.
    """
    await notifier.begin(pending)
    try:
        yield
    except Exception:
        await notifier.fail(failed)
        raise
    await notifier.succeed(done)
