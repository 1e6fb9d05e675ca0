"""Chat record store: the history and saved collections and their persistence."""

import asyncio
import json
from collections.abc import Callable
from typing import Literal, TypeVar

import structlog
from pydantic import ValidationError

from app.core.exceptions import PersistenceError
from app.core.notifications import LogNotifier, Notifier
from app.core.storage import KeyValueStorage
from app.repositories.write_queue import KeyWriteQueue
from app.schemas.chat_schema import Chat, SavedChat, utc_now_iso

logger = structlog.get_logger()

Collection = Literal["history", "saved"]
HISTORY: Collection = "history"
SAVED: Collection = "saved"

Subscriber = Callable[[Collection], None]
ChatT = TypeVar("ChatT", bound=Chat)


def parse_collection(raw: str | None, model: type[ChatT]) -> list[ChatT]:
    """Decode a persisted JSON array into records.

    Absent or malformed values give an empty list. Elements that fail
    validation are dropped and the rest are kept.
    """
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Discarding malformed collection", model=model.__name__)
        return []
    if not isinstance(data, list):
        logger.warning("Discarding non-array collection", model=model.__name__)
        return []

    records: list[ChatT] = []
    for item in data:
        try:
            records.append(model.model_validate(item))
        except ValidationError:
            logger.warning("Dropping invalid record", model=model.__name__)
    return records


def dump_collection(records: list[ChatT]) -> str:
    """Encode records as a JSON array, extras included.

    An absent ``created_at`` is left out rather than written as null.
    """
    return json.dumps(
        [
            record.model_dump(
                exclude={"created_at"} if record.created_at is None else None
            )
            for record in records
        ],
        ensure_ascii=False,
    )


class ChatRecordStore:
    """Single owner of the ``history`` and ``saved`` collections.

    Mutations update memory synchronously, notify subscribers, then schedule
    a full-collection write on that collection's sequential write queue.
    Writes requested before a collection has finished loading are held back
    until the load has merged in the persisted entries.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        history_key: str = "history",
        saved_key: str = "savedChats",
        notifier: Notifier | None = None,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self._storage = storage
        self._keys: dict[Collection, str] = {HISTORY: history_key, SAVED: saved_key}
        self._notifier = notifier or LogNotifier()
        self._clock = clock

        self._history: list[Chat] = []
        self._saved: list[SavedChat] = []
        self._revisions: dict[Collection, int] = {HISTORY: 0, SAVED: 0}
        self._loaded: set[Collection] = set()
        self._deferred: set[Collection] = set()
        self._subscribers: list[Subscriber] = []
        self._load_task: asyncio.Future[list[None]] | None = None
        self._queues: dict[Collection, KeyWriteQueue] = {
            name: KeyWriteQueue(key, on_error=self._on_write_error)
            for name, key in self._keys.items()
        }

    # --- Read access ---

    @property
    def history(self) -> tuple[Chat, ...]:
        return tuple(self._history)

    @property
    def saved(self) -> tuple[SavedChat, ...]:
        return tuple(self._saved)

    def snapshot(self, collection: Collection) -> tuple[Chat, ...]:
        """Current in-memory contents of ``collection``."""
        return self.history if collection == HISTORY else self.saved

    def revision(self, collection: Collection) -> int:
        """Counter bumped on every change to ``collection``."""
        return self._revisions[collection]

    def is_loaded(self, collection: Collection) -> bool:
        return collection in self._loaded

    def storage_key(self, collection: Collection) -> str:
        return self._keys[collection]

    def find_in_history(self, chat_id: str) -> Chat | None:
        """First history entry with ``chat_id``, or None."""
        return next((chat for chat in self._history if chat.id == chat_id), None)

    # --- Subscription ---

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback(collection)`` after every change.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # --- Loading ---

    async def load(self) -> None:
        """Read both collections from storage.

        Concurrent calls share one attempt. Once a collection has loaded it
        is never read again; a collection whose read failed is retried on
        the next call.
        """
        if self._load_task is None or (
            self._load_task.done() and len(self._loaded) < len(self._keys)
        ):
            self._load_task = asyncio.gather(
                *(
                    self._load_collection(collection)
                    for collection in self._keys
                    if collection not in self._loaded
                )
            )
        await asyncio.shield(self._load_task)

    async def _load_collection(self, collection: Collection) -> None:
        key = self._keys[collection]
        try:
            raw = await self._storage.get(key)
        except Exception:
            logger.exception("Failed to read collection", key=key)
            await self._notifier.fail(f"Failed to load {collection}")
            return

        if collection == HISTORY:
            loaded_history = parse_collection(raw, Chat)
            self._history = [*self._history, *loaded_history]
            count = len(loaded_history)
        else:
            loaded_saved = parse_collection(raw, SavedChat)
            self._saved = [*self._saved, *loaded_saved]
            count = len(loaded_saved)

        self._loaded.add(collection)
        logger.info("Collection loaded", key=key, count=count)
        self._changed(collection)
        if collection in self._deferred:
            self._deferred.discard(collection)
            self._schedule_write(collection)

    # --- History mutations ---

    def add_to_history(self, chat: Chat) -> bool:
        """Append ``chat`` unless its id is already present."""
        if any(existing.id == chat.id for existing in self._history):
            return False
        self._history.append(chat)
        self._commit(HISTORY)
        return True

    def remove_from_history(self, chat_id: str) -> int:
        """Remove history entries with ``chat_id``; returns how many."""
        before = len(self._history)
        self._history = [chat for chat in self._history if chat.id != chat_id]
        removed = before - len(self._history)
        if removed:
            self._commit(HISTORY)
        return removed

    def clear_history(self) -> int:
        removed = len(self._history)
        self._history = []
        self._commit(HISTORY)
        return removed

    # --- Saved mutations ---

    def save_chat(self, chat: Chat) -> SavedChat:
        """Append a copy of ``chat`` stamped with the current time.

        Saving an id that is already saved adds another entry; the list views
        keep only the most recent one.
        """
        saved = SavedChat.from_chat(chat, saved_at=self._clock())
        self._saved.append(saved)
        self._commit(SAVED)
        return saved

    def unsave_chat(self, chat_id: str) -> int:
        """Remove every saved entry with ``chat_id``; returns how many."""
        before = len(self._saved)
        self._saved = [chat for chat in self._saved if chat.id != chat_id]
        removed = before - len(self._saved)
        if removed:
            self._commit(SAVED)
        return removed

    def clear_saved(self) -> int:
        removed = len(self._saved)
        self._saved = []
        self._commit(SAVED)
        return removed

    # --- Persistence ---

    def _changed(self, collection: Collection) -> None:
        self._revisions[collection] += 1
        for callback in list(self._subscribers):
            callback(collection)

    def _commit(self, collection: Collection) -> None:
        self._changed(collection)
        self._schedule_write(collection)

    def _schedule_write(self, collection: Collection) -> None:
        self._queues[collection].submit(lambda: self._write(collection))

    async def _write(self, collection: Collection) -> None:
        if collection not in self._loaded:
            self._deferred.add(collection)
            return
        key = self._keys[collection]
        if collection == HISTORY:
            payload = dump_collection(self._history)
        else:
            payload = dump_collection(self._saved)
        try:
            await self._storage.set(key, payload)
        except Exception as exc:
            raise PersistenceError(key) from exc

    async def _on_write_error(self, key: str, exc: Exception) -> None:
        name = next((name for name, k in self._keys.items() if k == key), key)
        await self._notifier.fail(f"Failed to persist {name}")

    async def drain(self) -> None:
        """Wait until every scheduled write has been attempted."""
        for queue in self._queues.values():
            await queue.join()

    async def close(self) -> None:
        """Drain pending writes and stop the write workers."""
        for queue in self._queues.values():
            await queue.close()
