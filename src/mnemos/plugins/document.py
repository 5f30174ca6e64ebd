"""Plugin for the document agent."""

from __future__ import annotations

from ..agent.base import AgentConstructionRequest
from ..agent.document import AGENT_TYPE, DocumentAgent
from ..logging import ErrorReporter
from .base import AgentPlugin


class DocumentAgentPlugin(AgentPlugin):
    """Builds DocumentAgent instances.

    Persistence is optional here: when the request carries none, the
    agent is created awaiting it and must receive
    ``agent.attach("persistence", store)`` before it can serve turns.
    """

    def __init__(
        self,
        required_fields: list[str] | None = None,
        reporter: ErrorReporter | None = None,
    ) -> None:
        super().__init__(reporter=reporter)
        self.required_fields = required_fields

    @property
    def agent_type(self) -> str:
        return AGENT_TYPE

    def build(self, request: AgentConstructionRequest) -> DocumentAgent:
        return DocumentAgent(
            request.flow_id,
            required_fields=self.required_fields,
            persistence=request.collaborators.persistence,
            reporter=self._reporter,
        )
