"""Domain models for the conference schedule."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    """Base for models exchanged with the service and stored in the cache."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class SessionRating(Enum):
    """Rating a user can give to a session."""

    BAD = -1
    OK = 0
    GOOD = 1

    @classmethod
    def from_value(cls, value: int) -> "SessionRating | None":
        """Return the rating for a wire code, or None for unknown codes."""
        try:
            return cls(value)
        except ValueError:
            return None


class Session(_WireModel):
    """A schedule entry echoed from the conference service."""

    id: str
    title: str
    description: str | None = None
    starts_at: str | None = None
    ends_at: str | None = None
    room: str | None = None
    speakers: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()


class Vote(_WireModel):
    """A user's rating of a session."""

    session_id: str
    rating: int


class Favorite(_WireModel):
    """Reference to a session the user has marked."""

    session_id: str


class ConferenceData(_WireModel):
    """Full state returned by the conference service."""

    sessions: list[Session] = Field(default_factory=list)
    favorites: list[Favorite] = Field(default_factory=list)
    votes: list[Vote] = Field(default_factory=list)

    def all_sessions(self) -> list[Session]:
        """Return every session in the schedule."""
        return list(self.sessions)

    def favorite_sessions(self) -> list[Session]:
        """Return favorited sessions in favorite order, skipping unknown ids."""
        by_id = {session.id: session for session in self.sessions}
        return [
            by_id[favorite.session_id]
            for favorite in self.favorites
            if favorite.session_id in by_id
        ]
