"""User-triggered mutations on the chat collections."""

from collections.abc import Callable

import structlog

from app.core.notifications import Confirmer, Notifier, status_cycle
from app.repositories.chat_store import ChatRecordStore
from app.schemas.action_schema import ActionResult
from app.schemas.chat_schema import Chat

logger = structlog.get_logger()

REMOVE_FROM_HISTORY_PROMPT = (
    "Are you sure you want to remove this answer from your history?"
)
CLEAR_HISTORY_PROMPT = "Are you sure you want to clear your history?"
UNSAVE_PROMPT = "Are you sure you want to remove this answer from your collection?"
CLEAR_SAVED_PROMPT = (
    "Are you sure you want to remove all your saved answer from your collection?"
)


class ChatActions:
    """Confirms, announces and applies list actions against the store.

    Destructive actions ask the confirmer first; a declined prompt changes
    nothing and sends no notification. The status cycle covers the in-memory
    mutation only; a failed background write is reported through the store's
    own notifier.
    """

    def __init__(
        self,
        store: ChatRecordStore,
        notifier: Notifier,
        confirmer: Confirmer,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._confirmer = confirmer

    async def _run(
        self,
        mutation: Callable[[], int],
        pending: str,
        done: str,
        prompt: str | None = None,
    ) -> ActionResult:
        if prompt is not None and not await self._confirmer.confirm(prompt):
            return ActionResult(performed=False, confirmation_prompt=prompt)

        async with status_cycle(self._notifier, pending, done):
            affected = mutation()
        return ActionResult(
            performed=True, confirmation_prompt=prompt, affected=affected
        )

    async def remove_from_history(self, chat_id: str) -> ActionResult:
        result = await self._run(
            lambda: self._store.remove_from_history(chat_id),
            pending="Removing answer...",
            done="Answer removed!",
            prompt=REMOVE_FROM_HISTORY_PROMPT,
        )
        if result.performed:
            logger.info("Chat removed from history", chat_id=chat_id)
        return result

    async def clear_history(self) -> ActionResult:
        result = await self._run(
            self._store.clear_history,
            pending="Clearing history...",
            done="History cleared!",
            prompt=CLEAR_HISTORY_PROMPT,
        )
        if result.performed:
            logger.info("History cleared", count=result.affected)
        return result

    async def save_chat(self, chat: Chat) -> ActionResult:
        def save() -> int:
            self._store.save_chat(chat)
            return 1

        result = await self._run(
            save, pending="Saving your answer...", done="Answer saved!"
        )
        logger.info("Chat saved", chat_id=chat.id)
        return result

    async def unsave_chat(self, chat_id: str) -> ActionResult:
        result = await self._run(
            lambda: self._store.unsave_chat(chat_id),
            pending="Unsaving your answer...",
            done="Answer unsaved!",
            prompt=UNSAVE_PROMPT,
        )
        if result.performed:
            logger.info("Chat unsaved", chat_id=chat_id, count=result.affected)
        return result

    async def clear_saved(self) -> ActionResult:
        return await self._run(
            self._store.clear_saved,
            pending="Removing all answers...",
            done="All answers removed!",
            prompt=CLEAR_SAVED_PROMPT,
        )
