"""HTTP client for the knowledge service that stores extracted facts.

All public methods fail soft: transport errors, timeouts, bad statuses and
malformed payloads are logged and turned into an empty result. Memory is an
enhancement for response generation, so a broken service must never break a
conversation turn.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote

import httpx

from .models import Fact

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

MEMORY_PATH = "/api/v2/sessions/{session_id}/memory"
HEALTH_PATH = "/api/v2/sessions-ordered"


class FactStoreClient:
    """Reads facts and summaries for a session from a Zep-style server.

    Example:
        client = FactStoreClient("http://localhost:8000", api_key="...")
        await client.check_connection()
        facts = await client.fetch_facts("session-42")
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Root URL of the knowledge service.
            api_key: Optional key sent as ``Authorization: Api-Key <key>``.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._available = True

    @property
    def available(self) -> bool:
        """Whether the service is considered reachable."""
        return self._available

    def mark_unavailable(self) -> None:
        """Stop issuing requests until the service is marked available again."""
        self._available = False

    def mark_available(self) -> None:
        """Resume issuing requests."""
        self._available = True

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Api-Key {self.api_key}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.timeout,
            transport=self._transport,
        )

    async def check_connection(self) -> bool:
        """Test the connection and record whether the service is available.

        Returns:
            The new availability flag.
        """
        try:
            async with self._client() as client:
                response = await client.get(HEALTH_PATH, params={"limit": 1})
        except httpx.TimeoutException:
            logger.warning("Connection test to %s timed out after %ss", self.base_url, self.timeout)
            self._available = False
            return False
        except httpx.HTTPError as e:
            logger.warning("Connection test to %s failed: %s", self.base_url, e)
            self._available = False
            return False

        self._available = response.is_success
        if not self._available:
            logger.warning(
                "Connection test to %s failed: HTTP %s", self.base_url, response.status_code
            )
        return self._available

    async def _fetch_memory(self, session_id: str) -> dict[str, Any] | None:
        """Fetch the raw memory payload for a session, or None on any failure."""
        if not self._available:
            logger.debug("Knowledge service unavailable, skipping fetch for %s", session_id)
            return None

        path = MEMORY_PATH.format(session_id=quote(session_id, safe=""))
        try:
            async with self._client() as client:
                response = await client.get(path)
        except httpx.TimeoutException:
            logger.warning(
                "Memory fetch for session %s timed out after %ss", session_id, self.timeout
            )
            return None
        except httpx.HTTPError as e:
            logger.warning("Memory fetch for session %s failed: %s", session_id, e)
            return None

        if not response.is_success:
            logger.warning(
                "Memory fetch for session %s failed: HTTP %s", session_id, response.status_code
            )
            return None

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Invalid JSON in memory response for session %s: %s", session_id, e)
            return None

        if not isinstance(data, dict):
            logger.warning("Unexpected memory response shape for session %s", session_id)
            return None

        return data

    async def fetch_facts(self, session_id: str) -> list[Fact]:
        """Fetch the facts the service holds for a session.

        Facts are returned in the order received. Entries that are not
        objects are skipped.

        Returns:
            List of facts, empty if the service is down or misbehaves.
        """
        data = await self._fetch_memory(session_id)
        if data is None:
            return []

        raw_facts = data.get("relevant_facts") or []
        if not isinstance(raw_facts, list):
            logger.warning("relevant_facts is not a list for session %s", session_id)
            return []

        facts = []
        for item in raw_facts:
            if isinstance(item, dict):
                facts.append(Fact.from_dict(item))
            else:
                logger.warning("Skipping invalid fact item: %r", item)

        logger.debug("Fetched %d facts for session %s", len(facts), session_id)
        return facts

    async def fetch_summary(self, session_id: str) -> str | None:
        """Fetch the rolling conversation summary for a session.

        Returns:
            Summary text, or None if absent or on any failure.
        """
        data = await self._fetch_memory(session_id)
        if data is None:
            return None

        summary = data.get("summary")
        if not isinstance(summary, dict):
            return None

        content = summary.get("content")
        if isinstance(content, str) and content.strip():
            return content
        return None
