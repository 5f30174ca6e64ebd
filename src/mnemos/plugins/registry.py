"""Plugin registry for building agents by type."""

from __future__ import annotations

import logging
from importlib.metadata import entry_points

from ..agent.base import Agent, AgentConstructionRequest
from ..logging import ErrorReporter, get_logger
from .base import AgentPlugin

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "mnemos.agents"


class DuplicatePluginError(ValueError):
    """Raised when an agent type is registered twice."""

    def __init__(self, agent_type: str) -> None:
        super().__init__(f"Agent plugin '{agent_type}' already registered")
        self.agent_type = agent_type


class PluginRegistry:
    """Registry of agent plugins keyed by agent type."""

    def __init__(self, reporter: ErrorReporter | None = None) -> None:
        self._plugins: dict[str, AgentPlugin] = {}
        self._reporter = reporter

    @property
    def reporter(self) -> ErrorReporter:
        return self._reporter or get_logger()

    def register(self, plugin: AgentPlugin) -> None:
        """Register a plugin. Raises DuplicatePluginError on a repeated type."""
        if plugin.agent_type in self._plugins:
            raise DuplicatePluginError(plugin.agent_type)
        self._plugins[plugin.agent_type] = plugin
        logger.debug("Registered agent plugin %s", plugin.agent_type)

    def unregister(self, agent_type: str) -> None:
        """Unregister a plugin by type."""
        if agent_type in self._plugins:
            del self._plugins[agent_type]

    def get(self, agent_type: str) -> AgentPlugin | None:
        """Get a plugin by type."""
        return self._plugins.get(agent_type)

    def list_types(self) -> list[str]:
        """List all registered agent types."""
        return list(self._plugins.keys())

    def __contains__(self, agent_type: object) -> bool:
        return agent_type in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)

    def create_agent(self, agent_type: str, request: AgentConstructionRequest) -> Agent | None:
        """Build an agent of the given type.

        Returns:
            The agent, or None if the type is unknown or construction failed.
        """
        plugin = self._plugins.get(agent_type)
        if plugin is None:
            logger.warning("No agent plugin registered for type '%s'", agent_type)
            return None
        return plugin.create_agent(request)

    def load_entry_points(self, group: str = ENTRY_POINT_GROUP) -> list[str]:
        """Register plugins published by installed distributions.

        Each entry point may name an AgentPlugin subclass or instance.
        Entry points that fail to load are reported and skipped; a
        duplicate type still raises.

        Returns:
            Agent types registered by this call.
        """
        loaded: list[str] = []
        for ep in entry_points(group=group):
            try:
                target = ep.load()
                plugin = target() if isinstance(target, type) else target
                if not isinstance(plugin, AgentPlugin):
                    raise TypeError(f"{ep.value} is not an AgentPlugin")
            except Exception as e:
                self.reporter.report_error(
                    "PluginRegistry.load_entry_points",
                    f"Failed to load agent plugin entry point '{ep.name}'",
                    e,
                )
                continue

            self.register(plugin)
            loaded.append(plugin.agent_type)

        return loaded


def default_registry(reporter: ErrorReporter | None = None) -> PluginRegistry:
    """Create a registry with the built-in agent plugins."""
    from .conversation import ConversationAgentPlugin
    from .document import DocumentAgentPlugin

    registry = PluginRegistry(reporter=reporter)
    registry.register(DocumentAgentPlugin(reporter=reporter))
    registry.register(ConversationAgentPlugin(reporter=reporter))
    return registry
