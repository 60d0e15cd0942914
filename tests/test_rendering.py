"""Tests for rendering content blocks and messages to HTML."""

import json
import re

import pytest

from transcript_pages.blocks import ToolResultBlock
from transcript_pages.rendering import (
    RenderContext,
    classify_message,
    format_json,
    is_json_like,
    make_msg_id,
    render_commit_text,
    render_content_block,
    render_markdown_text,
    render_message,
)

IMAGE_ITEM = {
    "type": "image",
    "source": {"type": "base64", "media_type": "image/png", "data": "iVBORw0KGgo="},
}


def tool_use(name, tool_input, tool_id="toolu_1"):
    return {"type": "tool_use", "id": tool_id, "name": name, "input": tool_input}


class TestHelpers:
    """Tests for the small rendering helpers."""

    def test_make_msg_id(self):
        """Test the message anchor id."""
        assert make_msg_id("2025-01-01T10:00:00.000Z") == "msg-2025-01-01T10-00-00-000Z"

    def test_format_json_pretty_prints(self):
        """Test that JSON is pretty printed and escaped."""
        assert format_json({"a": 1}) == '<pre class="json">{\n  &quot;a&quot;: 1\n}</pre>'

    def test_format_json_falls_back_to_escaped_text(self):
        """Test that non-JSON text is escaped as is."""
        assert format_json("<not json>") == "<pre>&lt;not json&gt;</pre>"

    def test_is_json_like(self):
        """Test detection of JSON-looking text."""
        assert is_json_like(' {"a": 1} ')
        assert is_json_like("[1, 2]")
        assert not is_json_like("plain text")
        assert not is_json_like(None)

    def test_render_markdown_text(self):
        """Test markdown rendering with fenced code."""
        assert render_markdown_text("**bold**") == "<p><strong>bold</strong></p>"
        assert render_markdown_text("") == ""


class TestRenderContentBlock:
    """Tests for the render_content_block function."""

    def test_text_block(self):
        """Test rendering an assistant text block."""
        html = render_content_block({"type": "text", "text": "Hello **world**"})
        assert html == '<div class="assistant-text"><p>Hello <strong>world</strong></p></div>'

    def test_user_role_text_block(self):
        """Test that user text uses the user container."""
        html = render_content_block({"type": "text", "text": "Hi"}, role="user")
        assert 'class="user-text"' in html

    def test_thinking_block(self):
        """Test rendering a thinking block."""
        html = render_content_block({"type": "thinking", "thinking": "Let me *think*"})
        assert 'class="thinking"' in html
        assert "Thinking" in html
        assert "<em>think</em>" in html

    def test_image_block(self):
        """Test rendering an image block as a data URI."""
        html = render_content_block(IMAGE_ITEM)
        assert '<img src="data:image/png;base64,iVBORw0KGgo="' in html

    def test_write_tool(self):
        """Test rendering a Write tool call."""
        html = render_content_block(
            tool_use("Write", {"file_path": "/src/app/main.py", "content": "x = '<b>'"})
        )
        assert "write-tool" in html
        assert '<span class="file-tool-path">main.py</span>' in html
        assert "/src/app/main.py" in html
        assert "&lt;b&gt;" in html
        assert "<b>" not in html

    def test_edit_tool(self):
        """Test rendering an Edit tool call with replace_all."""
        html = render_content_block(
            tool_use(
                "Edit",
                {
                    "file_path": "/src/app.py",
                    "old_string": "old_value",
                    "new_string": "new_value",
                    "replace_all": True,
                },
            )
        )
        assert "edit-tool" in html
        assert "edit-old" in html and "old_value" in html
        assert "edit-new" in html and "new_value" in html
        assert "(replace all)" in html

    def test_edit_tool_without_replace_all(self):
        """Test that the replace all badge is omitted by default."""
        html = render_content_block(
            tool_use("Edit", {"file_path": "/a.py", "old_string": "a", "new_string": "b"})
        )
        assert "(replace all)" not in html

    def test_bash_tool(self):
        """Test rendering a Bash tool call."""
        html = render_content_block(
            tool_use("Bash", {"command": "pytest -q", "description": "Run the tests"})
        )
        assert "bash-tool" in html
        assert "pytest -q" in html
        assert '<div class="tool-description">Run the tests</div>' in html

    def test_todo_write(self):
        """Test rendering a TodoWrite checklist."""
        html = render_content_block(
            tool_use(
                "TodoWrite",
                {
                    "todos": [
                        {"content": "Done", "status": "completed"},
                        {"content": "Doing", "status": "in_progress"},
                        {"content": "Later", "status": "pending"},
                    ]
                },
            )
        )
        assert "todo-list" in html
        assert 'todo-completed"><span class="todo-icon">✓</span>' in html
        assert 'todo-in-progress"><span class="todo-icon">→</span>' in html
        assert 'todo-pending"><span class="todo-icon">○</span>' in html

    def test_generic_tool(self):
        """Test rendering any other tool call."""
        html = render_content_block(
            tool_use("Read", {"file_path": "/a.py", "description": "Peek at a.py"})
        )
        assert "⚙</span> Read" in html
        assert '<div class="tool-description">Peek at a.py</div>' in html
        assert "file_path" in html
        assert "&#34;description&#34;" not in html

    def test_missing_tool_name(self):
        """Test rendering a tool call without a name."""
        html = render_content_block({"type": "tool_use", "input": {}})
        assert "Unknown" in html

    def test_tool_result_with_commit_and_no_repo(self):
        """Test commit cards in tool output without a repo."""
        html = render_content_block(
            {
                "type": "tool_result",
                "content": "Running hooks\n[main abc1234] Add new feature\n 1 file changed",
            }
        )
        assert "<pre>Running hooks</pre>" in html
        assert '<span class="commit-card-hash">abc1234</span> Add new feature' in html
        assert "<pre>1 file changed</pre>" in html
        assert "github.com" not in html

    def test_tool_result_with_commit_and_repo(self):
        """Test that commit cards link to GitHub when the repo is known."""
        html = render_content_block(
            {"type": "tool_result", "content": "[main abc1234] Add new feature"},
            RenderContext(github_repo="owner/repo"),
        )
        assert 'href="https://github.com/owner/repo/commit/abc1234"' in html

    def test_commit_text_with_custom_pattern(self):
        """Test commit cards found with a caller-supplied pattern."""
        pattern = re.compile(r"committed ([0-9a-f]{7,}): (.+?)(?:\n|$)")
        html = render_commit_text(
            "committed abcdef1: Fix bug", RenderContext(), pattern=pattern
        )
        assert '<span class="commit-card-hash">abcdef1</span> Fix bug' in html
        assert "<pre>" not in html

    def test_tool_result_plain_text_is_escaped(self):
        """Test that plain tool output is escaped."""
        html = render_content_block({"type": "tool_result", "content": "<script>"})
        assert "<pre>&lt;script&gt;</pre>" in html

    def test_tool_result_with_image_is_not_truncatable(self):
        """Test that tool results with images are not truncatable."""
        html = render_content_block(
            {
                "type": "tool_result",
                "content": [{"type": "text", "text": "Screenshot:"}, IMAGE_ITEM],
            }
        )
        assert "data:image/png;base64,iVBORw0KGgo=" in html
        assert "<pre>Screenshot:</pre>" in html
        assert "truncatable" not in html

    def test_tool_result_without_image_is_truncatable(self):
        """Test that text-only tool results are truncatable."""
        html = render_content_block(
            {"type": "tool_result", "content": [{"type": "text", "text": "output"}]}
        )
        assert 'class="truncatable"' in html

    def test_tool_result_list_with_other_items(self):
        """Test that unknown list items render as JSON."""
        html = render_content_block(
            {"type": "tool_result", "content": [{"type": "document", "id": 7}, "raw"]}
        )
        assert '<pre class="json">' in html
        assert "<pre>raw</pre>" in html

    def test_tool_result_empty_list(self):
        """Test that an empty result list renders as JSON."""
        html = render_content_block({"type": "tool_result", "content": []})
        assert '<pre class="json">[]</pre>' in html

    def test_tool_result_error(self):
        """Test that error results are marked."""
        html = render_content_block(
            {"type": "tool_result", "content": "boom", "is_error": True}
        )
        assert 'class="tool-result tool-error"' in html

    def test_parsed_blocks_are_accepted(self):
        """Test that already parsed blocks can be rendered."""
        html = render_content_block(ToolResultBlock(content="done"))
        assert "<pre>done</pre>" in html

    def test_unknown_mapping_renders_as_json(self):
        """Test that unknown block types render as JSON."""
        html = render_content_block({"type": "server_tool_use", "name": "x"})
        assert html.startswith('<pre class="json">')
        assert "server_tool_use" in html

    def test_non_mapping_renders_escaped(self):
        """Test that non-mapping blocks are escaped."""
        assert render_content_block("<raw>") == "<p>&lt;raw&gt;</p>"


class TestClassifyMessage:
    """Tests for the classify_message function."""

    def test_tool_reply(self):
        """Test that tool-result-only user messages are tool replies."""
        message = {"content": [{"type": "tool_result", "content": "ok"}]}
        assert classify_message("user", message) == ("tool-reply", "Tool reply")

    def test_mixed_content_is_user(self):
        """Test that mixed user content stays a user message."""
        message = {
            "content": [
                {"type": "text", "text": "Also this"},
                {"type": "tool_result", "content": "ok"},
            ]
        }
        assert classify_message("user", message) == ("user", "User")

    def test_assistant_and_other_kinds(self):
        """Test classification of assistant and other kinds."""
        assert classify_message("assistant", {"content": []}) == ("assistant", "Assistant")
        assert classify_message("system", {"content": "x"}) is None


class TestRenderMessage:
    """Tests for the render_message function."""

    def test_user_message(self):
        """Test rendering a user message card."""
        html = render_message(
            "user", {"content": "Hello"}, "2025-01-01T10:00:00.000Z"
        )
        assert '<div class="message user" id="msg-2025-01-01T10-00-00-000Z">' in html
        assert '<span class="role-label">User</span>' in html
        assert '<div class="user-content"><p>Hello</p></div>' in html
        assert 'href="#msg-2025-01-01T10-00-00-000Z"' in html

    def test_tool_reply_message(self):
        """Test rendering a tool reply card."""
        message = {"content": [{"type": "tool_result", "content": "ok"}]}
        html = render_message("user", message, "t")
        assert 'class="message tool-reply"' in html
        assert "Tool reply" in html

    def test_assistant_message_from_json_string(self):
        """Test rendering an assistant message stored as JSON text."""
        message = json.dumps({"content": [{"type": "text", "text": "Hi there!"}]})
        html = render_message("assistant", message, "t")
        assert 'class="message assistant"' in html
        assert "<p>Hi there!</p>" in html

    def test_json_like_user_content(self):
        """Test that JSON-looking user content is pretty printed."""
        html = render_message("user", {"content": '{"key": "value"}'}, "t")
        assert '<pre class="json">' in html

    @pytest.mark.parametrize(
        "kind,message",
        [
            ("assistant", {"content": []}),
            ("user", {"content": "   "}),
            ("assistant", "{not json"),
            ("assistant", ""),
            ("system", {"content": "ignored"}),
        ],
    )
    def test_empty_messages_render_nothing(self, kind, message):
        """Test that empty messages render nothing."""
        assert render_message(kind, message, "t") == ""
