"""Chat record store lifecycle management."""

import structlog

from app.core.config import settings
from app.core.exceptions import StoreNotReadyError
from app.core.notifications import LogNotifier
from app.core.storage import KeyValueStorage
from app.repositories.chat_store import ChatRecordStore
from app.services.view_models import HistoryViewModel, SavedViewModel

logger = structlog.get_logger()

chat_store: ChatRecordStore | None = None
history_view: HistoryViewModel | None = None
saved_view: SavedViewModel | None = None


async def init_chat_store(storage: KeyValueStorage) -> ChatRecordStore:
    """Create the process-wide store, load it and attach the list views."""
    global chat_store, history_view, saved_view  # noqa: PLW0603
    store = ChatRecordStore(
        storage,
        history_key=settings.storage.history_storage_key,
        saved_key=settings.storage.saved_storage_key,
        notifier=LogNotifier(),
    )
    chat_store = store
    history_view = HistoryViewModel(store)
    saved_view = SavedViewModel(store)
    await store.load()
    logger.info(
        "Chat store ready",
        history=len(store.history),
        saved=len(store.saved),
    )
    return store


async def close_chat_store() -> None:
    """Flush pending writes and release the store."""
    global chat_store, history_view, saved_view  # noqa: PLW0603
    for view in (history_view, saved_view):
        if view is not None:
            view.close()
    if chat_store is not None:
        await chat_store.close()
    chat_store = None
    history_view = None
    saved_view = None


def get_chat_store() -> ChatRecordStore:
    if chat_store is None:
        raise StoreNotReadyError()
    return chat_store


def get_history_view() -> HistoryViewModel:
    if history_view is None:
        raise StoreNotReadyError()
    return history_view


def get_saved_view() -> SavedViewModel:
    if saved_view is None:
        raise StoreNotReadyError()
    return saved_view
