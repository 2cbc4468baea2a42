"""Shared test fixtures."""

from dataclasses import dataclass, field

import httpx
import pytest

from confsync.adapters.conference_api import ConferenceApi
from confsync.adapters.key_value_store import InMemoryKeyValueStore
from confsync.config import Settings
from confsync.domain.models import ConferenceData, Favorite, Session, Vote
from confsync.services.repository import ConferenceDataRepository


def http_error(status_code: int) -> httpx.HTTPStatusError:
    """Build the error httpx raises for a non-2xx response."""
    request = httpx.Request("POST", "https://api.test/votes")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(
        f"status {status_code}", request=request, response=response
    )


def make_session(session_id: str, title: str | None = None) -> Session:
    return Session(
        id=session_id,
        title=title or f"Session {session_id}",
        room="Hall A",
        speakers=("Speaker",),
    )


def sample_data() -> ConferenceData:
    return ConferenceData(
        sessions=[make_session("s1"), make_session("s2"), make_session("s3")],
        favorites=[Favorite(session_id="s2")],
        votes=[Vote(session_id="s1", rating=1)],
    )


@dataclass
class FakeConferenceApi(ConferenceApi):
    """Fake conference API recording calls and raising configured errors."""

    data: ConferenceData = field(default_factory=sample_data)
    error: Exception | None = None
    calls: list[tuple[str, object, str | None]] = field(default_factory=list)

    async def get_all(self, user_id: str | None) -> ConferenceData:
        self._record("get_all", None, user_id)
        return self.data

    async def verify_code(self, code: str) -> None:
        self._record("verify_code", code, None)

    async def post_vote(self, vote: Vote, user_id: str) -> None:
        self._record("post_vote", vote, user_id)

    async def delete_vote(self, vote: Vote, user_id: str) -> None:
        self._record("delete_vote", vote, user_id)

    async def post_favorite(self, favorite: Favorite, user_id: str) -> None:
        self._record("post_favorite", favorite, user_id)

    async def delete_favorite(self, favorite: Favorite, user_id: str) -> None:
        self._record("delete_favorite", favorite, user_id)

    def _record(self, name: str, payload: object, user_id: str | None) -> None:
        self.calls.append((name, payload, user_id))
        if self.error is not None:
            raise self.error


@dataclass
class FlakyKeyValueStore(InMemoryKeyValueStore):
    """In-memory store that fails writes to keys ending with a suffix."""

    failing_suffix: str | None = None

    def put_string(self, key: str, value: str) -> None:
        if self.failing_suffix is not None and key.endswith(self.failing_suffix):
            raise OSError(f"cannot write {key}")
        super().put_string(key, value)


@dataclass
class CountingListener:
    """Listener that counts invocations."""

    count: int = 0

    def __call__(self) -> None:
        self.count += 1


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        api_base_url="https://api.test",
        storage_path=tmp_path / "cache.json",
        cache_namespace="test",
    )


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def api() -> FakeConferenceApi:
    return FakeConferenceApi()


@pytest.fixture
def listener() -> CountingListener:
    return CountingListener()


@pytest.fixture
def repository(
    api: FakeConferenceApi,
    store: InMemoryKeyValueStore,
    listener: CountingListener,
) -> ConferenceDataRepository:
    repository = ConferenceDataRepository(api=api, store=store, namespace="test")
    repository.register_refresh_listener(listener)
    return repository
