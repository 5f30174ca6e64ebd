"""Base context builder for response generation."""

DEFAULT_PERSONA = "You are a helpful assistant in an ongoing conversation."

CONTEXT_BASE = """{persona}

Answer the user's latest message. Use what you know from earlier turns when it is relevant, and say so when you are unsure."""


def build_base_context(
    persona: str = DEFAULT_PERSONA,
    turn_context: str = "",
    summary: str | None = None,
) -> str:
    """Build the context that facts are later fused into.

    Args:
        persona: Opening instruction describing the assistant.
        turn_context: Extra context supplied with the turn (may be empty).
        summary: Optional summary of the conversation so far.

    Returns:
        Context string without any facts block.
    """
    context = CONTEXT_BASE.format(persona=persona.strip() or DEFAULT_PERSONA)

    if summary and summary.strip():
        context += "\n\nConversation summary:\n" + summary.strip()

    if turn_context.strip():
        context += "\n\n" + turn_context.strip()

    return context
