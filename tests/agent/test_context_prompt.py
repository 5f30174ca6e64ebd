"""Tests for base context building."""

from mnemos.agent import build_base_context
from mnemos.agent.prompt import DEFAULT_PERSONA


def test_default_persona_first():
    """The persona opens the context."""
    context = build_base_context()
    assert context.startswith(DEFAULT_PERSONA)


def test_custom_persona():
    context = build_base_context("You help with tax forms.")
    assert context.startswith("You help with tax forms.")


def test_blank_persona_falls_back():
    assert build_base_context("   ").startswith(DEFAULT_PERSONA)


def test_turn_context_appended_last():
    context = build_base_context(turn_context="User is on mobile.")
    assert context.endswith("\n\nUser is on mobile.")


def test_summary_included():
    context = build_base_context(summary="They booked a flight.", turn_context="Extra")
    assert "Conversation summary:\nThey booked a flight." in context
    assert context.index("Conversation summary") < context.index("Extra")


def test_empty_optional_parts_skipped():
    context = build_base_context(turn_context="  ", summary="")
    assert "Conversation summary" not in context
    assert not context.endswith("\n")
