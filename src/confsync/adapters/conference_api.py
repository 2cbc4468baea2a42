"""Conference service API client."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

import httpx

from confsync.domain.models import ConferenceData, Favorite, Vote


class ConferenceApi(Protocol):
    """Interface for the remote conference service."""

    async def get_all(self, user_id: str | None) -> ConferenceData:
        """Fetch the full schedule state, personalized when user_id is set."""

    async def verify_code(self, code: str) -> None:
        """Verify a one-time voting code."""

    async def post_vote(self, vote: Vote, user_id: str) -> None:
        """Submit a vote."""

    async def delete_vote(self, vote: Vote, user_id: str) -> None:
        """Delete the vote for vote.session_id."""

    async def post_favorite(self, favorite: Favorite, user_id: str) -> None:
        """Mark a session as favorite."""

    async def delete_favorite(self, favorite: Favorite, user_id: str) -> None:
        """Unmark a favorite session."""


def _auth_headers(user_id: str | None) -> dict[str, str]:
    if user_id is None:
        return {}
    return {"Authorization": f"Bearer {user_id}"}


@dataclass
class HttpxConferenceApi(ConferenceApi):
    """HTTPX-backed conference service client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 10

    @classmethod
    def create(cls, base_url: str, timeout: float = 10) -> "HttpxConferenceApi":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def get_all(self, user_id: str | None) -> ConferenceData:
        """Fetch sessions, favorites and votes."""
        response = await self.http_client.get(
            f"{self.base_url}/all",
            headers=_auth_headers(user_id),
            timeout=self.timeout,
        )
        response.raise_for_status()
        return ConferenceData.model_validate_json(response.content)

    async def verify_code(self, code: str) -> None:
        """Verify a voting code; 406 means the code was rejected."""
        response = await self.http_client.get(
            f"{self.base_url}/verify/{quote(code, safe='')}", timeout=self.timeout
        )
        response.raise_for_status()

    async def post_vote(self, vote: Vote, user_id: str) -> None:
        """Submit a vote; 477 and 478 signal a closed voting window."""
        await self._send("POST", "votes", vote.model_dump(by_alias=True), user_id)

    async def delete_vote(self, vote: Vote, user_id: str) -> None:
        """Delete a vote."""
        await self._send("DELETE", "votes", vote.model_dump(by_alias=True), user_id)

    async def post_favorite(self, favorite: Favorite, user_id: str) -> None:
        """Add a favorite."""
        await self._send(
            "POST", "favorites", favorite.model_dump(by_alias=True), user_id
        )

    async def delete_favorite(self, favorite: Favorite, user_id: str) -> None:
        """Remove a favorite."""
        await self._send(
            "DELETE", "favorites", favorite.model_dump(by_alias=True), user_id
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _send(
        self, method: str, path: str, payload: dict[str, object], user_id: str
    ) -> None:
        response = await self.http_client.request(
            method,
            f"{self.base_url}/{path}",
            json=payload,
            headers=_auth_headers(user_id),
            timeout=self.timeout,
        )
        response.raise_for_status()
