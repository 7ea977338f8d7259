"""Token estimation utilities for context compilation.

Uses a simple heuristic: ~4 characters per token. The compiler relies on two
properties only: the same text always gives the same count, and a longer text
never gives a smaller one.
"""

from __future__ import annotations

import json
import math

CHARS_PER_TOKEN = 4

# Role and formatting overhead added per message.
MESSAGE_TOKEN_OVERHEAD = 4


def estimate_tokens(text: str | None) -> int:
    """Estimate token count for a string using the ~4 chars/token heuristic."""
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def estimate_message_tokens(message: dict) -> int:
    """Estimate token count for a single message, including per-message overhead."""
    content = message.get("content")
    if isinstance(content, str):
        return MESSAGE_TOKEN_OVERHEAD + estimate_tokens(content)
    try:
        return MESSAGE_TOKEN_OVERHEAD + estimate_tokens(json.dumps(content))
    except (TypeError, ValueError):
        return MESSAGE_TOKEN_OVERHEAD


def estimate_messages_tokens(messages: list[dict]) -> int:
    """Estimate total token count for a list of messages."""
    total = 0
    for msg in messages:
        total += estimate_message_tokens(msg)
    return total
