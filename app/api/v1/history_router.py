"""History list API router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.core.chat_store import get_chat_store, get_history_view
from app.core.exceptions import ChatNotFoundError
from app.core.notifications import RecordingNotifier
from app.dependencies import get_chat_actions, get_notifier
from app.repositories.chat_store import ChatRecordStore
from app.schemas.action_schema import ActionResult
from app.schemas.chat_schema import AddChatResponse, ChatCreate
from app.schemas.response_schema import (
    ApiResponse,
    ErrorResponse,
    action_response,
    success_response,
)
from app.schemas.view_schema import ChatListView
from app.services.chat_actions import ChatActions
from app.services.view_models import HistoryViewModel

router = APIRouter(prefix="/api/v1/history", tags=["history"])

StoreDep = Annotated[ChatRecordStore, Depends(get_chat_store)]
HistoryViewDep = Annotated[HistoryViewModel, Depends(get_history_view)]
ChatActionsDep = Annotated[ChatActions, Depends(get_chat_actions)]
NotifierDep = Annotated[RecordingNotifier, Depends(get_notifier)]


@router.get("", response_model=ApiResponse[ChatListView])
async def get_history(
    view: HistoryViewDep,
    store: StoreDep,
    search: str | None = Query(default=None, max_length=200),
    selected: str | None = Query(default=None),
) -> dict:
    """Render the history list, updating search text and selection if given."""
    await store.load()
    if search is not None:
        view.search_text = search
    if selected is not None:
        view.select(selected or None)
    return success_response(view.render())


@router.post(
    "",
    response_model=ApiResponse[AddChatResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_to_history(request: ChatCreate, store: StoreDep) -> dict:
    """Append a chat produced by the answering flow."""
    chat = request.to_chat()
    added = store.add_to_history(chat)
    return success_response(
        AddChatResponse(added=added, chat=chat),
        status=201,
        message="Chat added" if added else "Chat already in history",
    )


@router.post(
    "/{chat_id}/save",
    response_model=ApiResponse[ActionResult],
    responses={404: {"model": ErrorResponse}},
)
async def save_chat(
    chat_id: str,
    store: StoreDep,
    actions: ChatActionsDep,
    notifier: NotifierDep,
) -> dict:
    """Copy a history entry into the saved collection."""
    chat = store.find_in_history(chat_id)
    if chat is None:
        raise ChatNotFoundError(chat_id)
    result = await actions.save_chat(chat)
    return action_response(result, notifier.notifications)


@router.delete("/{chat_id}", response_model=ApiResponse[ActionResult])
async def remove_from_history(
    chat_id: str,
    actions: ChatActionsDep,
    notifier: NotifierDep,
) -> dict:
    """Remove one entry from history (requires ``confirm=true``)."""
    result = await actions.remove_from_history(chat_id)
    return action_response(result, notifier.notifications)


@router.delete("", response_model=ApiResponse[ActionResult])
async def clear_history(actions: ChatActionsDep, notifier: NotifierDep) -> dict:
    """Remove every history entry (requires ``confirm=true``)."""
    result = await actions.clear_history()
    return action_response(result, notifier.notifications)
