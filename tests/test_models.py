"""Tests for domain models."""

from confsync.domain.models import ConferenceData, Favorite, SessionRating, Vote
from tests.conftest import make_session


def test_favorite_sessions_follow_favorite_order_and_skip_unknown() -> None:
    data = ConferenceData(
        sessions=[make_session("s1"), make_session("s2")],
        favorites=[
            Favorite(session_id="s2"),
            Favorite(session_id="missing"),
            Favorite(session_id="s1"),
        ],
    )

    assert [session.id for session in data.favorite_sessions()] == ["s2", "s1"]


def test_conference_data_parses_camel_case() -> None:
    data = ConferenceData.model_validate(
        {
            "sessions": [
                {"id": "s1", "title": "Keynote", "startsAt": "2026-10-01T09:00"}
            ],
            "favorites": [{"sessionId": "s1"}],
            "votes": [{"sessionId": "s1", "rating": -1}],
        }
    )

    assert data.sessions[0].starts_at == "2026-10-01T09:00"
    assert data.votes == [Vote(session_id="s1", rating=-1)]


def test_session_rating_from_value() -> None:
    assert SessionRating.from_value(1) is SessionRating.GOOD
    assert SessionRating.from_value(-1) is SessionRating.BAD
    assert SessionRating.from_value(7) is None
