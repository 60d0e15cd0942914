"""Tests for typed content blocks."""

from transcript_pages.blocks import (
    ImageBlock,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    UnknownBlock,
    parse_block,
    parse_blocks,
)


class TestParseBlock:
    """Tests for the parse_block function."""

    def test_text_and_thinking(self):
        """Test that text and thinking blocks are parsed."""
        assert parse_block({"type": "text", "text": "hi"}) == TextBlock("hi")
        assert parse_block({"type": "thinking", "thinking": "hmm"}) == ThinkingBlock(
            "hmm"
        )

    def test_image(self):
        """Test that image blocks keep their media type and data."""
        block = parse_block(
            {
                "type": "image",
                "source": {"type": "base64", "media_type": "image/jpeg", "data": "QUJD"},
            }
        )
        assert block == ImageBlock("image/jpeg", "QUJD")

    def test_image_without_source_uses_defaults(self):
        """Test that an image block without a source gets defaults."""
        assert parse_block({"type": "image"}) == ImageBlock("image/png", "")

    def test_tool_use(self):
        """Test that tool_use blocks keep name, input and id."""
        block = parse_block(
            {"type": "tool_use", "id": "toolu_1", "name": "Read", "input": {"a": 1}}
        )
        assert block == ToolUseBlock("Read", {"a": 1}, "toolu_1")

    def test_tool_use_missing_fields(self):
        """Test that a tool_use block with missing fields still parses."""
        block = parse_block({"type": "tool_use", "input": "not a mapping"})
        assert block == ToolUseBlock("Unknown", {}, "")

    def test_tool_result(self):
        """Test that tool_result blocks keep content and error flag."""
        block = parse_block(
            {"type": "tool_result", "tool_use_id": "toolu_1", "content": "ok", "is_error": True}
        )
        assert block == ToolResultBlock("ok", "toolu_1", True)

    def test_tool_result_null_content(self):
        """Test that a null tool result content becomes an empty string."""
        block = parse_block({"type": "tool_result", "content": None})
        assert block.content == ""
        assert block.is_error is False

    def test_unknown_type_and_non_mappings(self):
        """Test that unknown and malformed blocks become UnknownBlock."""
        raw = {"type": "server_tool_use", "name": "web"}
        assert parse_block(raw) == UnknownBlock(raw)
        assert parse_block("plain") == UnknownBlock("plain")
        assert parse_block(None) == UnknownBlock(None)


class TestParseBlocks:
    """Tests for the parse_blocks function."""

    def test_non_list_yields_nothing(self):
        """Test that non-list content yields no blocks."""
        assert parse_blocks("text content") == []
        assert parse_blocks(None) == []

    def test_preserves_order(self):
        """Test that block order is preserved."""
        blocks = parse_blocks(
            [{"type": "text", "text": "a"}, {"type": "thinking", "thinking": "b"}]
        )
        assert blocks == [TextBlock("a"), ThinkingBlock("b")]
