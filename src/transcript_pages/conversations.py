"""Group a flat log into conversations, one per user prompt."""

from dataclasses import dataclass
from typing import NamedTuple

from .parsing import extract_text_from_content


class MessageTuple(NamedTuple):
    kind: str
    message: object  # dict, or a JSON-encoded string
    timestamp: str


@dataclass(frozen=True)
class Conversation:
    """A user prompt and every message up to the next prompt."""

    user_text: str
    timestamp: str
    messages: tuple
    is_continuation: bool = False


def prompt_text(entry):
    """Return the prompt text if ``entry`` opens a conversation, else ""."""
    if entry.kind != "user":
        return ""
    return extract_text_from_content(entry.message.get("content", ""))


def build_conversations(entries):
    """Split log entries into conversations.

    A user entry with non-empty text starts a new conversation; everything
    else (assistant turns, tool-result replies) joins the current one.
    Entries before the first prompt are dropped. Entries without a message
    still join the open conversation; they render as nothing.
    """
    conversations = []
    current = None
    for entry in entries:
        msg = MessageTuple(entry.kind, entry.message, entry.timestamp)
        text = prompt_text(entry)
        if text:
            if current:
                conversations.append(_seal(current))
            current = {
                "user_text": text,
                "timestamp": entry.timestamp,
                "messages": [msg],
                "is_continuation": entry.is_continuation,
            }
        elif current:
            current["messages"].append(msg)
    if current:
        conversations.append(_seal(current))
    return conversations


def _seal(current):
    return Conversation(
        user_text=current["user_text"],
        timestamp=current["timestamp"],
        messages=tuple(current["messages"]),
        is_continuation=bool(current["is_continuation"]),
    )


def continuation_run(conversations, index):
    """Messages of ``conversations[index]`` plus any directly following continuations."""
    messages = list(conversations[index].messages)
    for conv in conversations[index + 1 :]:
        if not conv.is_continuation:
            break
        messages.extend(conv.messages)
    return messages
