"""Tests for agent base types."""

import pytest

from mnemos.agent import (
    Agent,
    AgentConstructionRequest,
    AgentReply,
    Collaborators,
    ReplyStatus,
    SlotState,
    Turn,
)


class EchoAgent(Agent):
    """Minimal agent with two deferred collaborators."""

    def __init__(self, flow_id: str, tools=None, prompts=None):
        super().__init__(flow_id)
        self._add_slot("tool_manager", tools)
        self._add_slot("prompt_manager", prompts, replace=True)

    @property
    def agent_type(self) -> str:
        return "echo"

    async def process_turn(self, turn: Turn) -> AgentReply:
        return AgentReply(response=turn.message)


class TestCollaborators:
    def test_all_optional(self):
        collaborators = Collaborators()
        for name in Collaborators.names():
            assert collaborators.get(name) is None

    def test_names(self):
        assert Collaborators.names() == [
            "conversation_manager",
            "tool_manager",
            "prompt_manager",
            "persistence",
            "memory",
            "llm",
        ]

    def test_get_unknown(self):
        with pytest.raises(KeyError):
            Collaborators().get("database")


class TestAgentConstructionRequest:
    def test_default_collaborators(self):
        request = AgentConstructionRequest(flow_id="flow-1")
        assert request.collaborators == Collaborators()

    @pytest.mark.parametrize("flow_id", ["", "   "])
    def test_empty_flow_id_rejected(self, flow_id):
        with pytest.raises(ValueError, match="flow_id"):
            AgentConstructionRequest(flow_id=flow_id)


class TestAgentReply:
    def test_defaults_to_ok(self):
        reply = AgentReply(response="hi")
        assert reply.status is ReplyStatus.OK
        assert reply.success is True

    def test_not_ready(self):
        reply = AgentReply.not_ready(["persistence"])
        assert reply.status is ReplyStatus.NOT_READY
        assert reply.success is False
        assert reply.response == ""
        assert "persistence" in reply.error
        assert reply.metadata == {"missing": ["persistence"]}


class TestAgent:
    """Tests for slot handling on the Agent base class."""

    def test_abstract(self):
        with pytest.raises(TypeError):
            Agent("flow-1")  # type: ignore[abstract]

    def test_awaiting_until_all_slots_filled(self):
        agent = EchoAgent("flow-1")
        assert agent.state is SlotState.AWAITING_COLLABORATOR
        assert agent.missing_collaborators() == ["tool_manager", "prompt_manager"]

        agent.attach("tool_manager", object())
        assert agent.state is SlotState.AWAITING_COLLABORATOR
        assert agent.missing_collaborators() == ["prompt_manager"]

        agent.attach("prompt_manager", object())
        assert agent.state is SlotState.READY
        assert agent.missing_collaborators() == []

    def test_no_slots_is_ready(self):
        class Plain(Agent):
            agent_type = "plain"

            async def process_turn(self, turn):
                return AgentReply(response="")

        assert Plain("flow-1").state is SlotState.READY

    def test_slot_names(self):
        assert EchoAgent("flow-1").slot_names == ["tool_manager", "prompt_manager"]

    def test_attach_unknown_slot(self):
        with pytest.raises(KeyError, match="database"):
            EchoAgent("flow-1").attach("database", object())

    def test_attach_respects_slot_policy(self):
        first, second = object(), object()
        agent = EchoAgent("flow-1", tools=first, prompts=first)

        assert agent.attach("tool_manager", second) is False
        assert agent.attach("prompt_manager", second) is True

    @pytest.mark.asyncio
    async def test_cleanup_default(self):
        assert await EchoAgent("flow-1").cleanup() is None
