"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Callable, Iterator

import fakeredis.aioredis
import pytest
from httpx import ASGITransport, AsyncClient

from app.core.chat_store import close_chat_store, init_chat_store
from app.core.notifications import RecordingNotifier
from app.core.storage import RedisStorage
from app.repositories.chat_store import ChatRecordStore
from app.schemas.chat_schema import Chat

HISTORY_KEY = "history"
SAVED_KEY = "savedChats"


# --- Test Redis (fakeredis) ---


@pytest.fixture
def fake_redis() -> fakeredis.aioredis.FakeRedis:
    """Create a fresh fake Redis client."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest.fixture
def storage(fake_redis: fakeredis.aioredis.FakeRedis) -> RedisStorage:
    return RedisStorage(fake_redis)


class FailingStorage:
    """KeyValueStorage whose writes always fail."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data = dict(initial or {})
        self.attempts: list[str] = []

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.attempts.append(key)
        raise ConnectionError("storage unavailable")


class FlakyStorage:
    """In-memory KeyValueStorage whose first reads of some keys fail."""

    def __init__(
        self,
        initial: dict[str, str] | None = None,
        failing_reads: dict[str, int] | None = None,
    ) -> None:
        self.data = dict(initial or {})
        self.failing_reads = dict(failing_reads or {})

    async def get(self, key: str) -> str | None:
        if self.failing_reads.get(key, 0) > 0:
            self.failing_reads[key] -= 1
            raise ConnectionError("read timed out")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value


# --- Store helpers ---


def make_chat(
    chat_id: str = "chat-1",
    question: str = "What is Python?",
    answer: str = "A programming language.",
    created_at: str | None = "2023-01-01T00:00:00+00:00",
) -> Chat:
    return Chat(id=chat_id, question=question, answer=answer, created_at=created_at)


def sequential_clock(*stamps: str) -> Callable[[], str]:
    """Clock returning the given timestamps in order."""
    it: Iterator[str] = iter(stamps)
    return lambda: next(it)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
async def store(
    storage: RedisStorage, notifier: RecordingNotifier
) -> AsyncGenerator[ChatRecordStore, None]:
    """Loaded store backed by fake Redis."""
    chat_store = ChatRecordStore(
        storage, history_key=HISTORY_KEY, saved_key=SAVED_KEY, notifier=notifier
    )
    await chat_store.load()
    yield chat_store
    await chat_store.close()


# --- App client fixtures ---


@pytest.fixture
async def app_store(
    fake_redis: fakeredis.aioredis.FakeRedis,
) -> AsyncGenerator[ChatRecordStore, None]:
    """Process-wide store as the lifespan would create it."""
    chat_store = await init_chat_store(RedisStorage(fake_redis))
    yield chat_store
    await close_chat_store()


@pytest.fixture
async def async_client(
    app_store: ChatRecordStore,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client for the API."""
    from app.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
