"""List view schemas for the History and Saved views."""

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.chat_schema import Chat, SavedChat


class ActionDescriptor(BaseModel):
    """An action offered on the selected list item."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    section: str
    shortcut: str | None = None
    destructive: bool = False
    confirmation_prompt: str | None = None


class ListItem(BaseModel):
    """Single row with its detail pane."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    accessory: str
    detail: SavedChat | Chat
    actions: list[ActionDescriptor] = Field(default_factory=list)


class ListSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    subtitle: str
    items: list[ListItem]


class EmptyView(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    icon: str = "stars"


class ChatListView(BaseModel):
    """Everything a client needs to draw one list view.

    ``empty_view`` is set only when the underlying collection is empty;
    otherwise ``section`` holds the filtered entries.
    """

    model_config = ConfigDict(frozen=True)

    navigation_title: str
    search_bar_placeholder: str
    search_text: str
    selected_id: str | None
    is_loading: bool
    is_showing_detail: bool
    empty_view: EmptyView | None = None
    section: ListSection | None = None
