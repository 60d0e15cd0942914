"""Per-conversation statistics: tool usage, git commits and long texts."""

import json
import re
from dataclasses import dataclass, field
from typing import NamedTuple

from .blocks import TextBlock, ToolResultBlock, ToolUseBlock, parse_blocks

# Regex to match git commit output: [branch hash] message
COMMIT_PATTERN = re.compile(r"\[[\w\-/]+ ([a-f0-9]{7,})\] (.+?)(?:\n|$)")

LONG_TEXT_THRESHOLD = 300  # characters

# Abbreviate common tool names
TOOL_ABBREVIATIONS = {
    "Bash": "bash",
    "Read": "read",
    "Write": "write",
    "Edit": "edit",
    "Glob": "glob",
    "Grep": "grep",
    "Task": "task",
    "TodoWrite": "todo",
    "WebFetch": "fetch",
    "WebSearch": "search",
}


class Commit(NamedTuple):
    hash: str
    message: str
    timestamp: str


@dataclass
class ConversationStats:
    tool_counts: dict = field(default_factory=dict)
    long_texts: list = field(default_factory=list)
    commits: list = field(default_factory=list)


def load_message(message):
    """Return a message mapping, decoding JSON strings; None if unusable."""
    if isinstance(message, str):
        if not message:
            return None
        try:
            message = json.loads(message)
        except json.JSONDecodeError:
            return None
    if not isinstance(message, dict):
        return None
    return message


def find_commits(text, timestamp="", pattern=COMMIT_PATTERN):
    """Return every commit marker in ``text`` as ``Commit`` tuples, in order.

    ``pattern`` must capture the hash and the message as groups 1 and 2.
    """
    return [
        Commit(match.group(1), match.group(2), timestamp)
        for match in pattern.finditer(text)
    ]


def analyze_conversation(messages, long_text_threshold=LONG_TEXT_THRESHOLD):
    """Analyze messages in a conversation to extract stats and long texts.

    ``messages`` is a sequence of ``(kind, message, timestamp)`` tuples.
    Only assistant text blocks count as long texts.
    """
    stats = ConversationStats()
    for kind, message, timestamp in messages:
        message_data = load_message(message)
        if message_data is None:
            continue
        for block in parse_blocks(message_data.get("content")):
            if isinstance(block, ToolUseBlock):
                stats.tool_counts[block.name] = stats.tool_counts.get(block.name, 0) + 1
            elif isinstance(block, ToolResultBlock):
                if isinstance(block.content, str):
                    stats.commits.extend(find_commits(block.content, timestamp))
            elif isinstance(block, TextBlock) and kind == "assistant":
                if len(block.text) >= long_text_threshold:
                    stats.long_texts.append(block.text)
    return stats


def merge_tool_counts(*tool_counts):
    """Sum several tool-count mappings."""
    merged = {}
    for counts in tool_counts:
        for tool, count in counts.items():
            merged[tool] = merged.get(tool, 0) + count
    return merged


def format_tool_stats(tool_counts):
    """Format tool counts into a concise summary string."""
    if not tool_counts:
        return ""
    parts = []
    for name, count in sorted(tool_counts.items(), key=lambda x: -x[1]):
        short_name = TOOL_ABBREVIATIONS.get(name, name.lower())
        parts.append(f"{count} {short_name}")
    return " · ".join(parts)


def is_tool_result_message(message_data):
    """Check if a message contains only tool_result blocks."""
    content = message_data.get("content", [])
    if not isinstance(content, list) or not content:
        return False
    return all(
        isinstance(block, dict) and block.get("type") == "tool_result"
        for block in content
    )
