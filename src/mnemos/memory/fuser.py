"""Merging ranked facts into an assembled context string."""

from typing import Sequence

from .models import Fact

FACTS_HEADER = "Relevant facts from previous conversations:"


def format_facts_block(facts: Sequence[Fact]) -> str:
    """Render facts as a header followed by one bullet per fact.

    Returns an empty string if there are no facts.
    """
    if not facts:
        return ""

    lines = [FACTS_HEADER]
    lines.extend(f"- {fact.text}" for fact in facts)
    return "\n".join(lines)


def fuse_context(base_context: str, ranked_facts: Sequence[Fact]) -> str:
    """Append the facts block to ``base_context``.

    With no facts the base context is returned unchanged. Fusion is not
    idempotent: fusing the same facts twice appends the block twice.
    """
    if not ranked_facts:
        return base_context

    return f"{base_context}\n\n{format_facts_block(ranked_facts)}"
