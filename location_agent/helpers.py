from datetime import datetime
from typing import Any

from langchain_core.messages import BaseMessage


def get_today_str() -> str:
    """A simple utility function to get the current date in a human-readable string format."""
    # We format the date as "Day Mon Day, Year" (e.g., "Mon Dec 25, 2025").
    return datetime.now().strftime("%a %b %-d, %Y")


def message_text(message: BaseMessage) -> str:
    """Flatten a message's content to plain text, dropping non-text content blocks."""
    content: Any = message.content
    if isinstance(content, str):
        return content.strip()
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "\n".join(p for p in parts if p).strip()
