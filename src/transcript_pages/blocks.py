"""Typed content blocks parsed from raw message content.

Every raw block maps to exactly one variant. Anything that is not a mapping,
or carries an unrecognised ``type``, becomes an ``UnknownBlock`` holding the
raw value so it can still be shown.
"""

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class TextBlock:
    text: str


@dataclass(frozen=True)
class ThinkingBlock:
    thinking: str


@dataclass(frozen=True)
class ImageBlock:
    media_type: str
    data: str


@dataclass(frozen=True)
class ToolUseBlock:
    name: str
    input: dict = field(default_factory=dict)
    id: str = ""


@dataclass(frozen=True)
class ToolResultBlock:
    content: Any = ""  # str, or a list of raw nested blocks
    tool_use_id: str = ""
    is_error: bool = False


@dataclass(frozen=True)
class UnknownBlock:
    raw: Any


ContentBlock = Union[
    TextBlock, ThinkingBlock, ImageBlock, ToolUseBlock, ToolResultBlock, UnknownBlock
]


def _str_field(block, key, default=""):
    value = block.get(key)
    return value if isinstance(value, str) else default


def _image_from(block):
    source = block.get("source")
    if not isinstance(source, dict):
        source = {}
    return ImageBlock(
        media_type=_str_field(source, "media_type", "image/png") or "image/png",
        data=_str_field(source, "data"),
    )


def parse_block(raw):
    """Return the typed variant for one raw content block."""
    if not isinstance(raw, dict):
        return UnknownBlock(raw)
    block_type = raw.get("type")
    if block_type == "text":
        return TextBlock(_str_field(raw, "text"))
    if block_type == "thinking":
        return ThinkingBlock(_str_field(raw, "thinking"))
    if block_type == "image":
        return _image_from(raw)
    if block_type == "tool_use":
        tool_input = raw.get("input")
        return ToolUseBlock(
            name=_str_field(raw, "name", "Unknown") or "Unknown",
            input=tool_input if isinstance(tool_input, dict) else {},
            id=_str_field(raw, "id"),
        )
    if block_type == "tool_result":
        content = raw.get("content", "")
        if content is None:
            content = ""
        return ToolResultBlock(
            content=content,
            tool_use_id=_str_field(raw, "tool_use_id"),
            is_error=bool(raw.get("is_error", False)),
        )
    return UnknownBlock(raw)


def parse_blocks(content):
    """Parse a content list; a non-list yields an empty list."""
    if not isinstance(content, list):
        return []
    return [parse_block(raw) for raw in content]


BLOCK_VARIANTS = (
    TextBlock,
    ThinkingBlock,
    ImageBlock,
    ToolUseBlock,
    ToolResultBlock,
    UnknownBlock,
)
