"""Derived list projections for the History and Saved views."""

from collections.abc import Iterable, Sequence
from typing import Generic, TypeVar

from app.repositories.chat_store import HISTORY, SAVED, ChatRecordStore, Collection
from app.schemas.chat_schema import Chat, SavedChat, parse_timestamp
from app.schemas.view_schema import (
    ActionDescriptor,
    ChatListView,
    EmptyView,
    ListItem,
    ListSection,
)
from app.services.chat_actions import (
    CLEAR_HISTORY_PROMPT,
    CLEAR_SAVED_PROMPT,
    REMOVE_FROM_HISTORY_PROMPT,
    UNSAVE_PROMPT,
)

ChatT = TypeVar("ChatT", bound=Chat)

CLEAR_SHORTCUT = "cmd+shift+delete"

_COPY_ACTIONS = (
    ActionDescriptor(id="copy_answer", title="Copy Answer", section="Copy"),
    ActionDescriptor(id="copy_question", title="Copy Question", section="Copy"),
)
_SPEAK_ACTION = ActionDescriptor(id="speak", title="Speak", section="Output")
_SNIPPET_ACTION = ActionDescriptor(
    id="save_as_snippet", title="Save as Snippet", section="Save"
)


def sort_newest_first(chats: Iterable[ChatT], field: str) -> list[ChatT]:
    """Order by ``field`` descending; missing timestamps sort as oldest."""
    return sorted(
        chats,
        key=lambda chat: parse_timestamp(getattr(chat, field, None)),
        reverse=True,
    )


def dedupe_by_id(chats: Iterable[ChatT]) -> list[ChatT]:
    """Keep the first entry seen for each id."""
    seen: set[str] = set()
    unique: list[ChatT] = []
    for chat in chats:
        if chat.id not in seen:
            seen.add(chat.id)
            unique.append(chat)
    return unique


def filter_by_search(chats: Iterable[ChatT], search_text: str) -> list[ChatT]:
    return [chat for chat in chats if chat.matches(search_text)]


def format_accessory(timestamp: str | None) -> str:
    return parse_timestamp(timestamp).date().isoformat()


class ChatListViewModel(Generic[ChatT]):
    """Read-only projection of one store collection plus search and selection.

    The projection is recomputed lazily: any change to the collection or to
    the search text drops the cached result.
    """

    collection: Collection
    timestamp_field: str
    dedupe: bool = False

    navigation_title = "Saved Answers"
    search_bar_placeholder: str
    section_title: str
    empty_view: EmptyView

    def __init__(self, store: ChatRecordStore) -> None:
        self._store = store
        self._search_text = ""
        self._selected_id: str | None = None
        self._cache: list[ChatT] | None = None
        self._unsubscribe = store.subscribe(self._on_store_change)

    def _on_store_change(self, collection: Collection) -> None:
        if collection == self.collection:
            self._cache = None

    def close(self) -> None:
        self._unsubscribe()

    @property
    def search_text(self) -> str:
        return self._search_text

    @search_text.setter
    def search_text(self, value: str) -> None:
        if value != self._search_text:
            self._search_text = value
            self._cache = None

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    def select(self, chat_id: str | None) -> None:
        """Track ``chat_id`` as the selection, even if it is filtered out."""
        self._selected_id = chat_id

    @property
    def is_loading(self) -> bool:
        return not self._store.is_loaded(self.collection)

    def _source(self) -> Sequence[ChatT]:
        return self._store.snapshot(self.collection)  # type: ignore[return-value]

    @property
    def items(self) -> list[ChatT]:
        """Sorted, optionally deduplicated, filtered entries."""
        if self._cache is None:
            entries = sort_newest_first(self._source(), self.timestamp_field)
            if self.dedupe:
                entries = dedupe_by_id(entries)
            self._cache = filter_by_search(entries, self._search_text)
        return list(self._cache)

    @property
    def selected(self) -> ChatT | None:
        """The selected entry if it is part of the filtered result."""
        return next(
            (chat for chat in self.items if chat.id == self._selected_id), None
        )

    def actions_for(self, chat: ChatT) -> list[ActionDescriptor]:
        raise NotImplementedError

    def render(self) -> ChatListView:
        items = self.items
        has_entries = len(self._source()) > 0
        section = None
        if has_entries:
            section = ListSection(
                title=self.section_title,
                subtitle=f"{len(items):,}",
                items=[
                    ListItem(
                        id=chat.id,
                        title=chat.question,
                        accessory=format_accessory(chat.created_at),
                        detail=chat,
                        actions=(
                            self.actions_for(chat)
                            if chat.id == self._selected_id
                            else []
                        ),
                    )
                    for chat in items
                ],
            )
        return ChatListView(
            navigation_title=self.navigation_title,
            search_bar_placeholder=self.search_bar_placeholder,
            search_text=self._search_text,
            selected_id=self._selected_id,
            is_loading=self.is_loading,
            is_showing_detail=len(items) > 0,
            empty_view=None if has_entries else self.empty_view,
            section=section,
        )


class HistoryViewModel(ChatListViewModel[Chat]):
    """All past chats, newest ``created_at`` first."""

    collection = HISTORY
    timestamp_field = "created_at"

    search_bar_placeholder = "Search history..."
    section_title = "Recent"
    empty_view = EmptyView(
        title="No history",
        description="Your recent questions will be showed up here",
    )

    def actions_for(self, chat: Chat) -> list[ActionDescriptor]:
        return [
            *_COPY_ACTIONS,
            ActionDescriptor(id="save", title="Save Answer", section="Save"),
            _SNIPPET_ACTION,
            _SPEAK_ACTION,
            ActionDescriptor(
                id="remove",
                title="Remove Answer",
                section="Delete",
                destructive=True,
                confirmation_prompt=REMOVE_FROM_HISTORY_PROMPT,
            ),
            ActionDescriptor(
                id="clear",
                title="Clear History",
                section="Delete",
                shortcut=CLEAR_SHORTCUT,
                destructive=True,
                confirmation_prompt=CLEAR_HISTORY_PROMPT,
            ),
        ]


class SavedViewModel(ChatListViewModel[SavedChat]):
    """Pinned chats, most recent save first, one entry per id."""

    collection = SAVED
    timestamp_field = "saved_at"
    dedupe = True

    search_bar_placeholder = "Search saved answers/questions..."
    section_title = "Saved"
    empty_view = EmptyView(
        title="No saved answers",
        description="Save generated question with ⌘ + S shortcut",
    )

    def actions_for(self, chat: SavedChat) -> list[ActionDescriptor]:
        return [
            *_COPY_ACTIONS,
            _SNIPPET_ACTION,
            _SPEAK_ACTION,
            ActionDescriptor(
                id="unsave",
                title="Remove Answer",
                section="Delete",
                destructive=True,
                confirmation_prompt=UNSAVE_PROMPT,
            ),
            ActionDescriptor(
                id="clear",
                title="Remove All Answer",
                section="Delete",
                shortcut=CLEAR_SHORTCUT,
                destructive=True,
                confirmation_prompt=CLEAR_SAVED_PROMPT,
            ),
        ]
