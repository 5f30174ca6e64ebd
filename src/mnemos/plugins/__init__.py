"""Agent plugins and the registry that builds agents by type."""

from .base import AgentPlugin
from .conversation import ConversationAgentPlugin
from .document import DocumentAgentPlugin
from .registry import ENTRY_POINT_GROUP, DuplicatePluginError, PluginRegistry, default_registry

__all__ = [
    "ENTRY_POINT_GROUP",
    "AgentPlugin",
    "ConversationAgentPlugin",
    "DocumentAgentPlugin",
    "DuplicatePluginError",
    "PluginRegistry",
    "default_registry",
]
