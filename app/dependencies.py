"""Global dependencies for the application."""

from fastapi import Depends, Query

from app.core.chat_store import get_chat_store
from app.core.notifications import RecordingNotifier, StaticConfirmer
from app.repositories.chat_store import ChatRecordStore
from app.services.chat_actions import ChatActions


def get_notifier() -> RecordingNotifier:
    """Per-request notifier; FastAPI reuses it within one request."""
    return RecordingNotifier()


def get_confirmer(
    confirm: bool = Query(
        default=False,
        description="Confirm a destructive action",
    ),
) -> StaticConfirmer:
    return StaticConfirmer(confirm)


def get_chat_actions(
    store: ChatRecordStore = Depends(get_chat_store),
    notifier: RecordingNotifier = Depends(get_notifier),
    confirmer: StaticConfirmer = Depends(get_confirmer),
) -> ChatActions:
    """Get ChatActions bound to the store and this request's notifier."""
    return ChatActions(store=store, notifier=notifier, confirmer=confirmer)
