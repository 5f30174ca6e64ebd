"""Agents and the deferred-collaborator mechanism."""

from .base import Agent, AgentConstructionRequest, AgentReply, Collaborators, ReplyStatus, Turn
from .conversation import ConversationAgent
from .deferred import CollaboratorNotReady, DeferredSlot, SlotState
from .document import DocumentAgent
from .prompt import build_base_context

__all__ = [
    "Agent",
    "AgentConstructionRequest",
    "AgentReply",
    "CollaboratorNotReady",
    "Collaborators",
    "ConversationAgent",
    "DeferredSlot",
    "DocumentAgent",
    "ReplyStatus",
    "SlotState",
    "Turn",
    "build_base_context",
]
