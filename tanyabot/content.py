"""Prompt assembly for text answers."""

from __future__ import annotations

PERSONA_SEPARATOR = "\n\n---\n\n"


def build_content(persona: str | None, reply_context: str | None, question: str) -> str:
    """Concatenate persona, replied text and question into one prompt.

    The persona is followed by a visible separator; the replied text by a
    blank line. Nothing is truncated or escaped.
    """
    combined = ""
    if persona:
        combined += persona + PERSONA_SEPARATOR
    if reply_context:
        combined += reply_context + "\n\n"
    combined += question
    return combined
