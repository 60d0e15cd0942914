"""Render messages and content blocks to HTML fragments."""

import html
import json
from dataclasses import dataclass
from typing import Optional

import markdown
from jinja2 import Environment, PackageLoader

from .analysis import COMMIT_PATTERN, is_tool_result_message, load_message
from .blocks import (
    BLOCK_VARIANTS,
    ImageBlock,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    UnknownBlock,
    parse_block,
)

# Set up Jinja2 environment
_jinja_env = Environment(
    loader=PackageLoader("transcript_pages", "templates"),
    autoescape=True,
)

# Load macros template and expose macros
_macros = _jinja_env.get_template("macros.html").module


def get_template(name):
    """Get a Jinja2 template by name."""
    return _jinja_env.get_template(name)


@dataclass(frozen=True)
class RenderContext:
    """Per-session values every render call can see."""

    github_repo: Optional[str] = None


DEFAULT_CONTEXT = RenderContext()


def format_json(obj):
    try:
        if isinstance(obj, str):
            obj = json.loads(obj)
        formatted = json.dumps(obj, indent=2, ensure_ascii=False)
        return f'<pre class="json">{html.escape(formatted)}</pre>'
    except (json.JSONDecodeError, TypeError, ValueError):
        return f"<pre>{html.escape(str(obj))}</pre>"


def render_markdown_text(text):
    if not text:
        return ""
    return markdown.markdown(text, extensions=["fenced_code", "tables"])


def is_json_like(text):
    if not text or not isinstance(text, str):
        return False
    text = text.strip()
    return (text.startswith("{") and text.endswith("}")) or (
        text.startswith("[") and text.endswith("]")
    )


def make_msg_id(timestamp):
    return f"msg-{timestamp.replace(':', '-').replace('.', '-')}"


def render_todo_write(tool_input, tool_id):
    todos = tool_input.get("todos", [])
    if not isinstance(todos, list):
        return ""
    todos = [todo for todo in todos if isinstance(todo, dict)]
    if not todos:
        return ""
    return _macros.todo_list(todos, tool_id)


def render_write_tool(tool_input, tool_id):
    """Render Write tool calls with file path header and content preview."""
    file_path = str(tool_input.get("file_path") or "Unknown file")
    content = tool_input.get("content", "")
    return _macros.write_tool(file_path, content, tool_id)


def render_edit_tool(tool_input, tool_id):
    """Render Edit tool calls with diff-like old/new display."""
    file_path = str(tool_input.get("file_path") or "Unknown file")
    old_string = tool_input.get("old_string", "")
    new_string = tool_input.get("new_string", "")
    replace_all = bool(tool_input.get("replace_all", False))
    return _macros.edit_tool(file_path, old_string, new_string, replace_all, tool_id)


def render_bash_tool(tool_input, tool_id):
    """Render Bash tool calls with command as plain text."""
    command = tool_input.get("command", "")
    description = tool_input.get("description", "")
    return _macros.bash_tool(command, description, tool_id)


TOOL_RENDERERS = {
    "TodoWrite": render_todo_write,
    "Write": render_write_tool,
    "Edit": render_edit_tool,
    "Bash": render_bash_tool,
}


def render_tool_use(block):
    renderer = TOOL_RENDERERS.get(block.name)
    if renderer:
        return renderer(block.input, block.id)
    description = block.input.get("description", "")
    display_input = {k: v for k, v in block.input.items() if k != "description"}
    input_json = json.dumps(display_input, indent=2, ensure_ascii=False, default=str)
    return _macros.tool_use(block.name, description, input_json, block.id)


def render_commit_text(content, context, pattern=COMMIT_PATTERN):
    """Render tool output, turning git commit lines into commit cards."""
    parts = []
    last_end = 0
    for match in pattern.finditer(content):
        before = content[last_end : match.start()].strip()
        if before:
            parts.append(f"<pre>{html.escape(before)}</pre>")
        parts.append(
            _macros.commit_card(match.group(1), match.group(2), context.github_repo)
        )
        last_end = match.end()
    if not parts:
        return f"<pre>{html.escape(content)}</pre>"
    after = content[last_end:].strip()
    if after:
        parts.append(f"<pre>{html.escape(after)}</pre>")
    return "".join(parts)


def render_tool_result(block, context):
    content = block.content
    has_images = False
    if isinstance(content, str):
        content_html = render_commit_text(content, context)
    elif isinstance(content, list):
        parts = []
        for item in content:
            nested = parse_block(item)
            if isinstance(nested, TextBlock):
                if nested.text:
                    parts.append(f"<pre>{html.escape(nested.text)}</pre>")
            elif isinstance(nested, ImageBlock):
                if nested.data:
                    parts.append(_macros.image_block(nested.media_type, nested.data))
                    has_images = True
            elif isinstance(item, dict):
                parts.append(format_json(item))
            else:
                parts.append(f"<pre>{html.escape(str(item))}</pre>")
        content_html = "".join(parts) if parts else format_json(content)
    else:
        content_html = format_json(content)
    # Images are never collapsed
    return _macros.tool_result(content_html, block.is_error, has_images)


def render_content_block(block, context=None, role="assistant"):
    """Render one raw or parsed content block to HTML."""
    if context is None:
        context = DEFAULT_CONTEXT
    if not isinstance(block, BLOCK_VARIANTS):
        block = parse_block(block)

    if isinstance(block, ImageBlock):
        return _macros.image_block(block.media_type, block.data)
    elif isinstance(block, ThinkingBlock):
        return _macros.thinking(render_markdown_text(block.thinking))
    elif isinstance(block, TextBlock):
        content_html = render_markdown_text(block.text)
        if role == "user":
            return _macros.user_text(content_html)
        return _macros.assistant_text(content_html)
    elif isinstance(block, ToolUseBlock):
        return render_tool_use(block)
    elif isinstance(block, ToolResultBlock):
        return render_tool_result(block, context)
    elif isinstance(block.raw, dict):
        return format_json(block.raw)
    return f"<p>{html.escape(str(block.raw))}</p>"


def render_user_message_content(message_data, context=None):
    content = message_data.get("content", "")
    if isinstance(content, str):
        if not content.strip():
            return ""
        if is_json_like(content):
            return _macros.user_content(format_json(content))
        return _macros.user_content(render_markdown_text(content))
    elif isinstance(content, list):
        return "".join(
            render_content_block(block, context, role="user") for block in content
        )
    return f"<p>{html.escape(str(content))}</p>"


def render_assistant_message(message_data, context=None):
    content = message_data.get("content", [])
    if not isinstance(content, list):
        return f"<p>{html.escape(str(content))}</p>"
    return "".join(render_content_block(block, context) for block in content)


def classify_message(kind, message_data):
    """Return ``(role_class, role_label)`` for a message, or None to skip it."""
    if kind == "user":
        if is_tool_result_message(message_data):
            return "tool-reply", "Tool reply"
        return "user", "User"
    elif kind == "assistant":
        return "assistant", "Assistant"
    return None


def render_message(kind, message, timestamp, context=None):
    """Render a full message card; empty messages render as ""."""
    message_data = load_message(message)
    if message_data is None:
        return ""
    role = classify_message(kind, message_data)
    if role is None:
        return ""
    if kind == "user":
        content_html = render_user_message_content(message_data, context)
    else:
        content_html = render_assistant_message(message_data, context)
    if not content_html.strip():
        return ""
    role_class, role_label = role
    msg_id = make_msg_id(timestamp)
    return _macros.message(role_class, role_label, msg_id, timestamp, content_html)
