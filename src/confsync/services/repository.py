"""Data repository synchronizing the conference service with the local cache."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from confsync.adapters.conference_api import ConferenceApi
from confsync.adapters.key_value_store import KeyValueStore
from confsync.config import cache_key
from confsync.domain.errors import (
    CannotDeleteVote,
    CannotFavorite,
    SessionNotFound,
    SyncFailed,
    Unauthorized,
    classify_verification_failure,
    classify_vote_failure,
    error_for_kind,
    status_code_from_exception,
)
from confsync.domain.models import Favorite, Session, SessionRating, Vote
from confsync.services.cache_binding import CachedField
from confsync.services.listeners import ListenerRegistry, RefreshListener

SESSIONS_KEY = "sessions"
FAVORITES_KEY = "favorites"
VOTES_KEY = "votes"
USER_ID_KEY = "userId"
PRIVACY_POLICY_ACCEPTED_KEY = "privacyPolicyAccepted"

T = TypeVar("T")

_logger = logging.getLogger(__name__)


class DataRepository(Protocol):
    """Cached conference data and the operations that change it."""

    @property
    def sessions(self) -> list[Session] | None:
        """Cached sessions, None before the first sync."""

    @property
    def favorites(self) -> list[Session] | None:
        """Cached favorite sessions."""

    @property
    def votes(self) -> list[Vote] | None:
        """Cached votes."""

    @property
    def user_id(self) -> str | None:
        """Verified voting code, None when logged out."""

    @property
    def logged_in(self) -> bool:
        """True when a user id is stored."""

    @property
    def privacy_policy_accepted(self) -> bool:
        """True once the privacy policy was accepted."""

    def register_refresh_listener(self, listener: RefreshListener) -> None:
        """Register a callback for cache changes."""

    async def update(self) -> None:
        """Refresh the cache from the service."""

    async def verify_and_set_code(self, code: str) -> None:
        """Verify a voting code and store it as the user id."""

    def accept_privacy_policy(self) -> None:
        """Record privacy policy acceptance."""

    def get_rating(self, session_id: str) -> SessionRating | None:
        """Return the cached rating for a session."""

    async def add_rating(self, session_id: str, rating: SessionRating) -> None:
        """Rate a session."""

    async def remove_rating(self, session_id: str) -> None:
        """Remove the rating of a session."""

    async def set_favorite(self, session_id: str, is_favorite: bool) -> None:
        """Mark or unmark a session as favorite."""


@dataclass
class ConferenceDataRepository(DataRepository):
    """Repository backed by a conference API and a key-value store.

    Remote calls complete before the cache is touched, and related cache fields
    are written without suspending in between. Every mutation of favorites or
    votes notifies listeners once when it finishes, whether it succeeded or not,
    so callers can leave a loading state.
    """

    api: ConferenceApi
    store: KeyValueStore
    namespace: str = "default"
    listeners: ListenerRegistry = field(default_factory=ListenerRegistry)
    _sessions: CachedField[list[Session]] = field(init=False, repr=False)
    _favorites: CachedField[list[Session]] = field(init=False, repr=False)
    _votes: CachedField[list[Vote]] = field(init=False, repr=False)
    _user_id: CachedField[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._sessions = CachedField(
            self.store, self._key(SESSIONS_KEY), list[Session]
        )
        self._favorites = CachedField(
            self.store, self._key(FAVORITES_KEY), list[Session]
        )
        self._votes = CachedField(self.store, self._key(VOTES_KEY), list[Vote])
        self._user_id = CachedField(self.store, self._key(USER_ID_KEY), str)

    @property
    def sessions(self) -> list[Session] | None:
        return _copy(self._sessions.get())

    @property
    def favorites(self) -> list[Session] | None:
        return _copy(self._favorites.get())

    @property
    def votes(self) -> list[Vote] | None:
        return _copy(self._votes.get())

    @property
    def user_id(self) -> str | None:
        return self._user_id.get()

    @property
    def logged_in(self) -> bool:
        return self._user_id.get() is not None

    @property
    def privacy_policy_accepted(self) -> bool:
        return self.store.get_boolean(self._key(PRIVACY_POLICY_ACCEPTED_KEY), False)

    def register_refresh_listener(self, listener: RefreshListener) -> None:
        """Register a callback invoked after cached state changes."""
        self.listeners.register(listener)

    async def update(self) -> None:
        """Fetch the full state and replace the cache when it changed."""
        try:
            data = await self.api.get_all(self._user_id.get())
        except Exception as exc:
            _logger.warning(
                "Sync failed (status=%s): %s", status_code_from_exception(exc), exc
            )
            raise SyncFailed() from exc

        new_sessions = data.all_sessions()
        new_favorites = data.favorite_sessions()
        new_votes = list(data.votes)
        if (
            new_sessions == self._sessions.get()
            and new_favorites == self._favorites.get()
            and new_votes == self._votes.get()
        ):
            _logger.debug("Sync returned unchanged data")
            return

        self._replace_snapshot(new_sessions, new_favorites, new_votes)
        _logger.info(
            "Synced %s sessions, %s favorites, %s votes",
            len(new_sessions),
            len(new_favorites),
            len(new_votes),
        )
        self.listeners.notify_all()

    def accept_privacy_policy(self) -> None:
        """Persist privacy policy acceptance."""
        self.store.put_boolean(self._key(PRIVACY_POLICY_ACCEPTED_KEY), True)

    async def verify_and_set_code(self, code: str) -> None:
        """Verify a voting code and keep it as the user id."""
        try:
            await self.api.verify_code(code)
        except Exception as exc:
            status_code = status_code_from_exception(exc)
            _logger.warning("Code verification failed (status=%s)", status_code)
            raise error_for_kind(classify_verification_failure(status_code)) from exc
        self._user_id.set(code)

    def get_rating(self, session_id: str) -> SessionRating | None:
        """Return the rating of the first cached vote for a session."""
        for vote in self._votes.get() or []:
            if vote.session_id == session_id:
                return SessionRating.from_value(vote.rating)
        return None

    def is_favorite(self, session_id: str) -> bool:
        """Return True when the session is among cached favorites."""
        favorites = self._favorites.get() or []
        return any(session.id == session_id for session in favorites)

    async def add_rating(self, session_id: str, rating: SessionRating) -> None:
        """Post a vote and append it to cached votes once confirmed.

        An existing vote for the same session is kept; the next sync replaces
        votes with the service's view.
        """
        user_id = self._require_user_id()
        vote = Vote(session_id=session_id, rating=rating.value)
        try:
            try:
                await self.api.post_vote(vote, user_id)
            except Exception as exc:
                status_code = status_code_from_exception(exc)
                _logger.warning(
                    "Posting vote for %s failed (status=%s)", session_id, status_code
                )
                raise error_for_kind(classify_vote_failure(status_code)) from exc
            self._votes.set([*(self._votes.get() or []), vote])
        finally:
            self.listeners.notify_all()

    async def remove_rating(self, session_id: str) -> None:
        """Delete a vote and drop it from cached votes once confirmed."""
        user_id = self._require_user_id()
        try:
            try:
                placeholder = Vote(session_id=session_id, rating=0)
                await self.api.delete_vote(placeholder, user_id)
            except Exception as exc:
                _logger.warning("Deleting vote for %s failed: %s", session_id, exc)
                raise CannotDeleteVote() from exc
            votes = self._votes.get()
            if votes is not None:
                self._votes.set(
                    [vote for vote in votes if vote.session_id != session_id]
                )
        finally:
            self.listeners.notify_all()

    async def set_favorite(self, session_id: str, is_favorite: bool) -> None:
        """Add or remove a favorite once the service confirms it."""
        user_id = self._require_user_id()
        favorite = Favorite(session_id=session_id)
        try:
            if is_favorite:
                await self._call_favorite_api(self.api.post_favorite, favorite, user_id)
                session = self._find_session(session_id)
                if session is None:
                    raise SessionNotFound()
                self._favorites.set([*(self._favorites.get() or []), session])
            else:
                await self._call_favorite_api(
                    self.api.delete_favorite, favorite, user_id
                )
                favorites = self._favorites.get()
                if favorites is not None:
                    self._favorites.set(
                        [session for session in favorites if session.id != session_id]
                    )
        finally:
            self.listeners.notify_all()

    async def _call_favorite_api(
        self,
        call: Callable[[Favorite, str], Awaitable[None]],
        favorite: Favorite,
        user_id: str,
    ) -> None:
        try:
            await call(favorite, user_id)
        except Exception as exc:
            _logger.warning(
                "Updating favorite %s failed (status=%s)",
                favorite.session_id,
                status_code_from_exception(exc),
            )
            raise CannotFavorite() from exc

    def _replace_snapshot(
        self,
        sessions: list[Session],
        favorites: list[Session],
        votes: list[Vote],
    ) -> None:
        """Write all three cached collections or roll back the ones written."""
        fields = (self._sessions, self._favorites, self._votes)
        previous = [cached.get() for cached in fields]
        written: list[tuple[CachedField, object]] = []
        try:
            for cached, value, old in zip(
                fields, (sessions, favorites, votes), previous, strict=True
            ):
                cached.set(value)
                written.append((cached, old))
        except Exception as exc:
            _logger.warning("Persisting synced data failed: %s", exc)
            for cached, old in reversed(written):
                try:
                    cached.set(old)
                except Exception:
                    _logger.exception("Failed to roll back cache entry %s", cached.key)
            raise SyncFailed("Failed to persist synchronized data") from exc

    def _find_session(self, session_id: str) -> Session | None:
        for session in self._sessions.get() or []:
            if session.id == session_id:
                return session
        return None

    def _require_user_id(self) -> str:
        user_id = self._user_id.get()
        if user_id is None:
            raise Unauthorized()
        return user_id

    def _key(self, name: str) -> str:
        return cache_key(self.namespace, name)


def _copy(values: list[T] | None) -> list[T] | None:
    return None if values is None else list(values)
