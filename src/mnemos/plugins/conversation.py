"""Plugin for the conversation agent."""

from __future__ import annotations

import logging

from ..agent.base import AgentConstructionRequest
from ..agent.conversation import AGENT_TYPE, ConversationAgent
from ..agent.prompt import DEFAULT_PERSONA
from ..logging import ErrorReporter
from .base import AgentPlugin

logger = logging.getLogger(__name__)


class ConversationAgentPlugin(AgentPlugin):
    """Builds ConversationAgent instances.

    The LLM client is mandatory and cannot be deferred: without it no
    agent is built. Memory may be attached later.
    """

    def __init__(
        self,
        persona: str = DEFAULT_PERSONA,
        reporter: ErrorReporter | None = None,
    ) -> None:
        super().__init__(reporter=reporter)
        self.persona = persona

    @property
    def agent_type(self) -> str:
        return AGENT_TYPE

    def build(self, request: AgentConstructionRequest) -> ConversationAgent | None:
        collaborators = request.collaborators
        if collaborators.llm is None:
            logger.warning("No LLM client for flow %s; cannot build %s", request.flow_id, AGENT_TYPE)
            return None

        return ConversationAgent(
            request.flow_id,
            llm=collaborators.llm,
            memory=collaborators.memory,
            persona=self.persona,
            reporter=self._reporter,
        )
