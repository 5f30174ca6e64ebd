"""Memory manager: fetch, rank and fuse facts for a conversation turn."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from ..logging import get_logger
from .fuser import fuse_context
from .models import Fact
from .ranker import DEFAULT_MAX_FACTS, DEFAULT_MIN_RATING, rank_facts

if TYPE_CHECKING:
    from .client import FactStoreClient

logger = logging.getLogger(__name__)


class MemoryManager:
    """Orchestrates memory augmentation for response generation.

    This is the main interface for the memory system. It holds no
    per-turn state and can be shared by concurrent turns.
    """

    def __init__(
        self,
        client: FactStoreClient,
        max_facts: int = DEFAULT_MAX_FACTS,
        min_rating: float = DEFAULT_MIN_RATING,
    ) -> None:
        """Initialize the manager.

        Args:
            client: Client for the knowledge service.
            max_facts: Maximum number of facts fused into a context.
            min_rating: Rated facts at or below this score are dropped.
        """
        self.client = client
        self.max_facts = max_facts
        self.min_rating = min_rating

    async def load_facts(self, session_id: str) -> list[Fact]:
        """Fetch and rank the facts for a session."""
        facts = await self.client.fetch_facts(session_id)
        return rank_facts(facts, max_count=self.max_facts, min_rating=self.min_rating)

    async def augment_context(self, session_id: str, base_context: str) -> str:
        """Return ``base_context`` with the session's top facts appended.

        Args:
            session_id: Session whose facts should be used.
            base_context: Context assembled so far for the turn.

        Returns:
            The fused context, or ``base_context`` unchanged if no facts
            survive ranking.
        """
        start_time = time.time()
        facts = await self.client.fetch_facts(session_id)
        ranked = rank_facts(facts, max_count=self.max_facts, min_rating=self.min_rating)
        duration_ms = (time.time() - start_time) * 1000

        if ranked:
            logger.debug("Fusing %d facts into context for session %s", len(ranked), session_id)
        try:
            get_logger().log_facts_fused(
                session_id, len(facts), len(ranked), duration_ms=duration_ms
            )
        except OSError as e:
            logger.warning("Could not log facts_fused for session %s: %s", session_id, e)
        return fuse_context(base_context, ranked)

    async def load_summary(self, session_id: str) -> str | None:
        """Fetch the conversation summary for a session."""
        return await self.client.fetch_summary(session_id)
