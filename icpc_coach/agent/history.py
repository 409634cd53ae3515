"""
Conversation History
====================

The caller sends the whole conversation with every request; nothing is
stored server-side. Before it reaches the model the history is cut down
to the last few (user, assistant) turns, plus the question currently
being answered.
"""

from typing import Literal

from pydantic import BaseModel

MAX_HISTORY_TURNS = 4


class ConversationMessage(BaseModel):
    """A single message in the conversation history."""
    role: Literal["user", "assistant"]
    content: str

    def to_dict(self) -> dict:
        """Convert to dictionary format for LLM API calls."""
        return {"role": self.role, "content": self.content}


def trim_history(
    messages: list[ConversationMessage],
    max_turns: int = MAX_HISTORY_TURNS
) -> list[ConversationMessage]:
    """
    Keep the most recent (user, assistant) turns and the final message.

    Args:
        messages: Full conversation, oldest first
        max_turns: Completed turns to keep

    Returns:
        Up to max_turns pairs followed by the last message, which is always
        kept even when it falls outside the window.
    """
    if not messages:
        return []

    pairs: list[tuple[ConversationMessage, ConversationMessage]] = []
    i = 0
    while i < len(messages) - 1:
        if messages[i].role == "user" and messages[i + 1].role == "assistant":
            pairs.append((messages[i], messages[i + 1]))
            i += 2
        else:
            i += 1

    recent = pairs[-max_turns:] if max_turns > 0 else []
    trimmed = [message for pair in recent for message in pair]

    last = messages[-1]
    if not trimmed or trimmed[-1] is not last:
        trimmed.append(last)
    return trimmed
