"""Conversation agent: answers turns with memory-augmented context."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from ..logging import ErrorReporter, get_logger
from .base import Agent, AgentReply, ReplyStatus, Turn
from .prompt import DEFAULT_PERSONA, build_base_context

if TYPE_CHECKING:
    from ..llm import LLMClient
    from ..memory import MemoryManager

logger = logging.getLogger(__name__)

AGENT_TYPE = "conversation"


class ConversationAgent(Agent):
    """Generates replies with an LLM, fusing remembered facts into the context.

    The LLM is required at construction. The memory manager is a deferred
    collaborator that may be replaced; until it is attached, turns are
    answered from the unaugmented context.
    """

    def __init__(
        self,
        flow_id: str,
        llm: LLMClient,
        memory: MemoryManager | None = None,
        persona: str = DEFAULT_PERSONA,
        reporter: ErrorReporter | None = None,
    ) -> None:
        super().__init__(flow_id)
        if llm is None:
            raise ValueError("ConversationAgent requires an LLM client")
        self.llm = llm
        self.persona = persona
        self._memory = self._add_slot("memory", memory, replace=True)
        self._reporter = reporter

    @property
    def agent_type(self) -> str:
        return AGENT_TYPE

    @property
    def reporter(self) -> ErrorReporter:
        return self._reporter or get_logger()

    async def build_context(self, turn: Turn) -> str:
        """Assemble the system context for a turn, with memory when available."""
        context, _ = await self._assemble_context(turn)
        return context

    async def _assemble_context(self, turn: Turn) -> tuple[str, bool]:
        """Return the context and whether memory contributed to it.

        A memory failure is reported and the turn continues without it.
        """
        memory = self._memory.get()
        if memory is None:
            return build_base_context(self.persona, turn.context), False

        try:
            summary = await memory.load_summary(turn.session_id)
            base = build_base_context(self.persona, turn.context, summary)
            return await memory.augment_context(turn.session_id, base), True
        except Exception as e:
            self.reporter.report_error(
                "ConversationAgent.build_context", "Memory augmentation failed", e
            )
            return build_base_context(self.persona, turn.context), False

    async def process_turn(self, turn: Turn) -> AgentReply:
        """Answer a turn using the LLM."""
        start_time = time.time()
        context, augmented = await self._assemble_context(turn)

        try:
            response = await self.llm.complete(turn.message, system=context)
        except Exception as e:
            self.reporter.report_error(
                "ConversationAgent.process_turn", "LLM completion failed", e
            )
            return AgentReply(
                response="",
                status=ReplyStatus.ERROR,
                error=f"LLM completion failed: {e}",
            )

        duration_ms = (time.time() - start_time) * 1000
        logger.debug("Turn for session %s answered in %.1fms", turn.session_id, duration_ms)
        return AgentReply(
            response=response,
            metadata={
                "augmented": augmented,
                "duration_ms": duration_ms,
            },
        )
