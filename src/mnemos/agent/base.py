"""Base interfaces for agents.

This module defines the core abstractions:
- Collaborators: Optional dependencies offered to an agent at construction
- AgentConstructionRequest: What a plugin receives when asked for an agent
- Turn: One conversation turn handed to an agent
- AgentReply: Outcome of processing a turn
- Agent: Abstract base class for all agent implementations
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from .deferred import DeferredSlot, SlotState


@dataclass
class Collaborators:
    """Named, optional dependencies available when an agent is built.

    Any of them may be None. Each agent decides which ones it needs
    immediately and which ones it can receive later through ``attach``.
    """

    conversation_manager: Any | None = None
    tool_manager: Any | None = None
    prompt_manager: Any | None = None
    persistence: Any | None = None
    memory: Any | None = None
    llm: Any | None = None

    def get(self, name: str) -> Any | None:
        """Look up a collaborator by field name."""
        if name not in self.names():
            raise KeyError(f"Unknown collaborator: {name}")
        return getattr(self, name)

    @classmethod
    def names(cls) -> list[str]:
        """All collaborator names."""
        return [f.name for f in fields(cls)]


@dataclass
class AgentConstructionRequest:
    """Input to ``AgentPlugin.create_agent``."""

    flow_id: str
    collaborators: Collaborators = field(default_factory=Collaborators)

    def __post_init__(self) -> None:
        if not self.flow_id or not self.flow_id.strip():
            raise ValueError("flow_id cannot be empty")


@dataclass
class Turn:
    """A single conversation turn routed to an agent."""

    session_id: str
    user_id: str
    message: str
    context: str = ""


class ReplyStatus(Enum):
    """Outcome categories for an agent reply."""

    OK = "ok"
    NOT_READY = "not_ready"
    ERROR = "error"


@dataclass
class AgentReply:
    """Result from processing a turn.

    Attributes:
        response: Text for the user (empty when not OK).
        status: Outcome category.
        error: Diagnostic message when status is not OK.
        metadata: Additional structured data about the turn.
    """

    response: str
    status: ReplyStatus = ReplyStatus.OK
    error: str | None = None
    metadata: dict[str, Any] | None = None

    @property
    def success(self) -> bool:
        return self.status is ReplyStatus.OK

    @classmethod
    def not_ready(cls, missing: list[str]) -> "AgentReply":
        """Reply for a turn that arrived before required collaborators."""
        return cls(
            response="",
            status=ReplyStatus.NOT_READY,
            error=f"Waiting for collaborators: {', '.join(missing)}",
            metadata={"missing": missing},
        )


class Agent(ABC):
    """Abstract base class for all agents.

    Agents must implement:
    - agent_type property: Tag of the plugin that builds them
    - process_turn(): Handle one conversation turn

    Collaborators that may arrive after construction live in deferred
    slots registered with ``_add_slot``. The agent is READY only when
    every slot is filled.
    """

    def __init__(self, flow_id: str) -> None:
        self.flow_id = flow_id
        self._slots: dict[str, DeferredSlot[Any]] = {}

    def _add_slot(self, name: str, value: Any | None = None, *, replace: bool = False) -> DeferredSlot[Any]:
        slot: DeferredSlot[Any] = DeferredSlot(name, value, replace=replace)
        self._slots[name] = slot
        return slot

    @property
    @abstractmethod
    def agent_type(self) -> str:
        """Type tag of this agent."""
        ...

    @property
    def state(self) -> SlotState:
        """READY if every deferred collaborator is attached."""
        if all(slot.ready for slot in self._slots.values()):
            return SlotState.READY
        return SlotState.AWAITING_COLLABORATOR

    @property
    def slot_names(self) -> list[str]:
        """Names of collaborators this agent accepts after construction."""
        return list(self._slots)

    def missing_collaborators(self) -> list[str]:
        """Names of deferred collaborators not yet attached."""
        return [name for name, slot in self._slots.items() if not slot.ready]

    def attach(self, name: str, collaborator: Any) -> bool:
        """Attach a deferred collaborator by name.

        Returns:
            True if stored, False if the slot's policy ignored it.

        Raises:
            KeyError: If this agent has no slot called ``name``.
        """
        slot = self._slots.get(name)
        if slot is None:
            raise KeyError(f"{self.agent_type} has no deferred collaborator '{name}'")
        return slot.attach(collaborator)

    @abstractmethod
    async def process_turn(self, turn: Turn) -> AgentReply:
        """Process one conversation turn."""
        ...

    async def cleanup(self) -> None:
        """Release per-session state. Default does nothing."""
        return None
