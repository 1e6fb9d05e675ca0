"""Unit tests for the History and Saved view-models."""

from app.core.storage import RedisStorage
from app.repositories.chat_store import ChatRecordStore
from app.schemas.chat_schema import Chat, SavedChat
from app.services.view_models import (
    HistoryViewModel,
    SavedViewModel,
    dedupe_by_id,
    filter_by_search,
    format_accessory,
    sort_newest_first,
)
from tests.conftest import make_chat, sequential_clock


def _saved(chat_id: str, saved_at: str, question: str = "Q") -> SavedChat:
    return SavedChat(id=chat_id, question=question, answer="A", saved_at=saved_at)


class TestProjectionHelpers:
    """Tests for sort, dedupe and filter."""

    def test_sort_missing_timestamp_is_oldest(self) -> None:
        chats = [
            make_chat("jan", created_at="2023-01-01"),
            make_chat("none", created_at=None),
            make_chat("jun", created_at="2023-06-01"),
        ]
        ordered = sort_newest_first(chats, "created_at")
        assert [c.id for c in ordered] == ["jun", "jan", "none"]

    def test_sort_mixes_naive_and_aware(self) -> None:
        chats = [
            make_chat("naive", created_at="2023-06-01"),
            make_chat("aware", created_at="2023-06-02T00:00:00+00:00"),
        ]
        ordered = sort_newest_first(chats, "created_at")
        assert [c.id for c in ordered] == ["aware", "naive"]

    def test_dedupe_keeps_first(self) -> None:
        chats = [_saved("1", "2024-02-01"), _saved("2", "x"), _saved("1", "2024-01-01")]
        unique = dedupe_by_id(chats)
        assert [(c.id, c.saved_at) for c in unique] == [("1", "2024-02-01"), ("2", "x")]

    def test_filter_by_question_or_answer(self) -> None:
        chats = [
            Chat(id="1", question="What is Rust?", answer=""),
            Chat(id="2", question="Cooking pasta", answer="mentions rust removal"),
            Chat(id="3", question="Gardening", answer="Water daily"),
        ]
        assert [c.id for c in filter_by_search(chats, "rUsT")] == ["1", "2"]
        assert len(filter_by_search(chats, "")) == 3

    def test_format_accessory(self) -> None:
        assert format_accessory("2023-06-01T23:00:00+00:00") == "2023-06-01"
        assert format_accessory(None) == "1970-01-01"


class TestHistoryViewModel:
    """Tests for the History projection."""

    async def test_orders_by_created_at(self, store: ChatRecordStore) -> None:
        store.add_to_history(make_chat("jan", created_at="2023-01-01"))
        store.add_to_history(make_chat("none", created_at=None))
        store.add_to_history(make_chat("jun", created_at="2023-06-01"))
        view = HistoryViewModel(store)

        assert [c.id for c in view.items] == ["jun", "jan", "none"]
        view.close()

    async def test_does_not_reorder_store(self, store: ChatRecordStore) -> None:
        store.add_to_history(make_chat("old", created_at="2020-01-01"))
        store.add_to_history(make_chat("new", created_at="2024-01-01"))
        view = HistoryViewModel(store)
        _ = view.items
        assert [c.id for c in store.history] == ["old", "new"]
        view.close()

    async def test_history_not_deduplicated(self, storage: RedisStorage) -> None:
        await storage.set(
            "history",
            '[{"id": "1", "question": "A"}, {"id": "1", "question": "B"}]',
        )
        chat_store = ChatRecordStore(storage)
        await chat_store.load()
        view = HistoryViewModel(chat_store)
        assert len(view.items) == 2
        view.close()
        await chat_store.close()

    async def test_recomputes_after_mutation(self, store: ChatRecordStore) -> None:
        view = HistoryViewModel(store)
        assert view.items == []
        store.add_to_history(make_chat("1"))
        assert [c.id for c in view.items] == ["1"]
        store.remove_from_history("1")
        assert view.items == []
        view.close()

    async def test_recomputes_after_search_change(self, store: ChatRecordStore) -> None:
        store.add_to_history(Chat(id="1", question="What is Rust?"))
        store.add_to_history(
            Chat(id="2", question="Cooking pasta", answer="rust removal")
        )
        store.add_to_history(Chat(id="3", question="Gardening"))
        view = HistoryViewModel(store)

        view.search_text = "RUST"
        assert {c.id for c in view.items} == {"1", "2"}
        view.search_text = ""
        assert len(view.items) == 3
        view.close()

    async def test_closed_view_ignores_changes(self, store: ChatRecordStore) -> None:
        view = HistoryViewModel(store)
        _ = view.items
        view.close()
        store.add_to_history(make_chat("1"))
        assert view.items == []


class TestSavedViewModel:
    """Tests for the Saved projection."""

    async def test_duplicate_save_shows_latest_once(
        self, storage: RedisStorage
    ) -> None:
        chat_store = ChatRecordStore(
            storage,
            clock=sequential_clock(
                "2024-01-01T00:00:00+00:00", "2024-02-01T00:00:00+00:00"
            ),
        )
        await chat_store.load()
        chat = make_chat("1")
        chat_store.save_chat(chat)
        chat_store.save_chat(chat)
        view = SavedViewModel(chat_store)

        assert len(chat_store.saved) == 2
        assert len(view.items) == 1
        assert view.items[0].saved_at == "2024-02-01T00:00:00+00:00"
        view.close()
        await chat_store.close()

    async def test_orders_by_saved_at(self, storage: RedisStorage) -> None:
        chat_store = ChatRecordStore(
            storage,
            clock=sequential_clock("2024-05-01T00:00:00+00:00", "2024-03-01"),
        )
        await chat_store.load()
        chat_store.save_chat(make_chat("later", created_at="2020-01-01"))
        chat_store.save_chat(make_chat("earlier", created_at="2025-01-01"))
        view = SavedViewModel(chat_store)

        assert [c.id for c in view.items] == ["later", "earlier"]
        view.close()
        await chat_store.close()

    async def test_unsave_removes_from_view(self, store: ChatRecordStore) -> None:
        store.save_chat(make_chat("1"))
        store.save_chat(make_chat("1"))
        view = SavedViewModel(store)
        store.unsave_chat("1")
        assert [c for c in view.items if c.id == "1"] == []
        view.close()


class TestSelection:
    async def test_select_filtered_out_id(self, store: ChatRecordStore) -> None:
        store.add_to_history(Chat(id="1", question="Python"))
        view = HistoryViewModel(store)
        view.search_text = "rust"
        view.select("1")

        assert view.selected_id == "1"
        assert view.selected is None
        view.close()

    async def test_actions_only_on_selected(self, store: ChatRecordStore) -> None:
        store.add_to_history(make_chat("1", created_at="2024-01-01"))
        store.add_to_history(make_chat("2", created_at="2023-01-01"))
        view = HistoryViewModel(store)
        view.select("2")

        rendered = view.render()
        assert rendered.section is not None
        actions = {item.id: item.actions for item in rendered.section.items}
        assert actions["1"] == []
        assert "remove" in [a.id for a in actions["2"]]
        view.close()


class TestRender:
    async def test_empty_history(self, store: ChatRecordStore) -> None:
        view = HistoryViewModel(store)
        rendered = view.render()

        assert rendered.is_loading is False
        assert rendered.is_showing_detail is False
        assert rendered.section is None
        assert rendered.empty_view is not None
        assert rendered.empty_view.title == "No history"
        view.close()

    async def test_search_without_matches_keeps_section(
        self, store: ChatRecordStore
    ) -> None:
        store.add_to_history(make_chat("1"))
        view = HistoryViewModel(store)
        view.search_text = "zzz"
        rendered = view.render()

        assert rendered.empty_view is None
        assert rendered.section is not None
        assert rendered.section.subtitle == "0"
        assert rendered.is_showing_detail is False
        view.close()

    async def test_section_metadata(self, store: ChatRecordStore) -> None:
        store.add_to_history(make_chat("1", created_at="2023-06-01T08:00:00+00:00"))
        view = HistoryViewModel(store)
        rendered = view.render()

        assert rendered.search_bar_placeholder == "Search history..."
        assert rendered.section is not None
        assert rendered.section.title == "Recent"
        assert rendered.section.subtitle == "1"
        assert rendered.section.items[0].accessory == "2023-06-01"
        assert rendered.is_showing_detail is True
        view.close()

    async def test_saved_actions_include_clear_shortcut(
        self, store: ChatRecordStore
    ) -> None:
        store.save_chat(make_chat("1"))
        view = SavedViewModel(store)
        view.select("1")
        rendered = view.render()

        assert rendered.section is not None
        item = rendered.section.items[0]
        clear = next(a for a in item.actions if a.id == "clear")
        assert clear.shortcut == "cmd+shift+delete"
        assert clear.destructive is True
        assert clear.title == "Remove All Answer"
        assert isinstance(item.detail, SavedChat)
        view.close()

    async def test_loading_until_store_loaded(self, storage: RedisStorage) -> None:
        chat_store = ChatRecordStore(storage)
        view = SavedViewModel(chat_store)
        assert view.render().is_loading is True
        await chat_store.load()
        assert view.render().is_loading is False
        view.close()
