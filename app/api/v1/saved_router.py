"""Saved answers API router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.core.chat_store import get_chat_store, get_saved_view
from app.core.notifications import RecordingNotifier
from app.dependencies import get_chat_actions, get_notifier
from app.repositories.chat_store import ChatRecordStore
from app.schemas.action_schema import ActionResult
from app.schemas.response_schema import (
    ApiResponse,
    action_response,
    success_response,
)
from app.schemas.view_schema import ChatListView
from app.services.chat_actions import ChatActions
from app.services.view_models import SavedViewModel

router = APIRouter(prefix="/api/v1/saved", tags=["saved"])

StoreDep = Annotated[ChatRecordStore, Depends(get_chat_store)]
SavedViewDep = Annotated[SavedViewModel, Depends(get_saved_view)]
ChatActionsDep = Annotated[ChatActions, Depends(get_chat_actions)]
NotifierDep = Annotated[RecordingNotifier, Depends(get_notifier)]


@router.get("", response_model=ApiResponse[ChatListView])
async def get_saved(
    view: SavedViewDep,
    store: StoreDep,
    search: str | None = Query(default=None, max_length=200),
    selected: str | None = Query(default=None),
) -> dict:
    """Render the saved list, one entry per chat, latest save first."""
    await store.load()
    if search is not None:
        view.search_text = search
    if selected is not None:
        view.select(selected or None)
    return success_response(view.render())


@router.delete("/{chat_id}", response_model=ApiResponse[ActionResult])
async def unsave_chat(
    chat_id: str,
    actions: ChatActionsDep,
    notifier: NotifierDep,
) -> dict:
    """Remove every saved copy of a chat (requires ``confirm=true``)."""
    result = await actions.unsave_chat(chat_id)
    return action_response(result, notifier.notifications)


@router.delete("", response_model=ApiResponse[ActionResult])
async def clear_saved(actions: ChatActionsDep, notifier: NotifierDep) -> dict:
    """Remove every saved answer (requires ``confirm=true``)."""
    result = await actions.clear_saved()
    return action_response(result, notifier.notifications)
