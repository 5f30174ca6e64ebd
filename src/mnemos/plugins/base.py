"""Agent plugin contract.

A plugin knows how to build one agent type from an AgentConstructionRequest.
Construction failures never escape ``create_agent``: they are reported
through the error boundary and turned into None, which callers read as
"no agent available for this flow".
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from ..agent.base import Agent, AgentConstructionRequest
from ..logging import ErrorReporter, get_logger

logger = logging.getLogger(__name__)


class AgentPlugin(ABC):
    """Abstract base class for agent plugins.

    Plugins must implement:
    - agent_type property: Unique tag used as the registry key
    - build(): Construct the agent, or return None if a mandatory
      collaborator that cannot be deferred is missing
    """

    def __init__(self, reporter: ErrorReporter | None = None) -> None:
        self._reporter = reporter

    @property
    @abstractmethod
    def agent_type(self) -> str:
        """Unique type identifier."""
        ...

    @abstractmethod
    def build(self, request: AgentConstructionRequest) -> Agent | None:
        """Construct the agent. May raise; ``create_agent`` handles it."""
        ...

    @property
    def reporter(self) -> ErrorReporter:
        return self._reporter or get_logger()

    @property
    def operation_name(self) -> str:
        """Name used when reporting construction failures."""
        return f"{type(self).__name__}.create_agent"

    def create_agent(self, request: AgentConstructionRequest) -> Agent | None:
        """Create an agent for a flow.

        Returns:
            The agent (possibly awaiting deferred collaborators), or None
            if it could not be built.
        """
        try:
            agent = self.build(request)
            if agent is not None:
                self._register_with_conversation_manager(request, agent)
        except Exception as e:
            self.reporter.report_error(
                self.operation_name,
                f"Failed to create {self.agent_type} agent for flow {request.flow_id}",
                e,
            )
            return None

        if agent is None:
            logger.warning(
                "%s declined to build an agent for flow %s", self.agent_type, request.flow_id
            )
            return None

        try:
            get_logger().log_agent_created(
                self.agent_type, flow_id=request.flow_id, state=agent.state.value
            )
        except OSError as e:
            logger.warning("Could not log agent_created for flow %s: %s", request.flow_id, e)
        return agent

    def _register_with_conversation_manager(
        self, request: AgentConstructionRequest, agent: Agent
    ) -> None:
        manager: Any = request.collaborators.conversation_manager
        register = getattr(manager, "register_agent", None)
        if callable(register):
            register(request.flow_id, agent)
