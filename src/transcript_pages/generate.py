"""Assemble conversations into pages and an index timeline, then write them."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import NamedTuple, Optional

import click

from .analysis import (
    LONG_TEXT_THRESHOLD,
    analyze_conversation,
    format_tool_stats,
    merge_tool_counts,
)
from .assets import CSS, JS, SEARCH_JS
from .conversations import build_conversations, continuation_run
from .github import detect_github_repo
from .parsing import parse_session_data, parse_session_file
from .rendering import (
    RenderContext,
    get_template,
    make_msg_id,
    render_markdown_text,
    render_message,
)

PROMPTS_PER_PAGE = 5

# Prompts that are echoes of hook output rather than something the user typed
NOISE_PROMPT_PREFIXES = ("Stop hook feedback:",)

_macros = get_template("macros.html").module

_UNPARSED_SORT_VALUE = datetime.min.replace(tzinfo=timezone.utc)


class TimelineItem(NamedTuple):
    timestamp: str
    kind: str  # "prompt" or "commit"
    html: str


@dataclass
class Page:
    number: int
    conversations: list
    messages_html: str = ""


@dataclass
class SessionArchive:
    """Everything needed to write one session's pages and index."""

    pages: list
    timeline: list
    prompt_count: int = 0
    total_messages: int = 0
    tool_counts: dict = field(default_factory=dict)
    total_tool_calls: int = 0
    total_commits: int = 0
    github_repo: Optional[str] = None

    @property
    def total_pages(self):
        return len(self.pages)

    @property
    def conversation_count(self):
        return sum(len(page.conversations) for page in self.pages)


def total_page_count(conversation_count, page_capacity=PROMPTS_PER_PAGE):
    """Number of pages needed; always at least one."""
    return max(1, (conversation_count + page_capacity - 1) // page_capacity)


def paginate(conversations, page_capacity=PROMPTS_PER_PAGE):
    """Split conversations into consecutive pages of ``page_capacity``."""
    total_pages = total_page_count(len(conversations), page_capacity)
    return [
        conversations[(n - 1) * page_capacity : n * page_capacity]
        for n in range(1, total_pages + 1)
    ]


def page_filename(page_num):
    return f"page-{page_num:03d}.html"


def parse_timestamp(value):
    """Parse an ISO-8601 timestamp to an aware datetime, or None."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def timeline_sort_key(item):
    """Order by instant; unparseable timestamps go last, by raw string."""
    parsed = parse_timestamp(item.timestamp)
    if parsed is None:
        return (1, _UNPARSED_SORT_VALUE, item.timestamp)
    return (0, parsed, "")


def is_noise_prompt(text):
    return text.startswith(NOISE_PROMPT_PREFIXES)


def render_page_messages(conversations, context):
    messages_html = []
    for conv in conversations:
        is_first = True
        for kind, message, timestamp in conv.messages:
            msg_html = render_message(kind, message, timestamp, context)
            if msg_html:
                # Wrap continuation summaries in collapsed details
                if is_first and conv.is_continuation:
                    msg_html = _macros.continuation(msg_html)
                messages_html.append(msg_html)
            is_first = False
    return "".join(messages_html)


def _prompt_item(prompt_num, conv, messages, page_num, long_text_threshold):
    link = f"{page_filename(page_num)}#{make_msg_id(conv.timestamp)}"
    stats = analyze_conversation(messages, long_text_threshold)
    long_texts_html = "".join(
        _macros.index_long_text(render_markdown_text(text))
        for text in stats.long_texts
    )
    stats_html = _macros.index_stats(format_tool_stats(stats.tool_counts), long_texts_html)
    item_html = _macros.index_item(
        prompt_num,
        link,
        conv.timestamp,
        render_markdown_text(conv.user_text),
        stats_html,
    )
    return TimelineItem(conv.timestamp, "prompt", str(item_html))


def _commit_item(commit, page_num, context):
    if context.github_repo:
        link = f"https://github.com/{context.github_repo}/commit/{commit.hash}"
    else:
        link = f"{page_filename(page_num)}#{make_msg_id(commit.timestamp)}"
    item_html = _macros.index_commit(commit.hash, commit.message, commit.timestamp, link)
    return TimelineItem(commit.timestamp, "commit", str(item_html))


def build_archive(
    entries,
    github_repo=None,
    page_capacity=PROMPTS_PER_PAGE,
    long_text_threshold=LONG_TEXT_THRESHOLD,
):
    """Build the pages and index timeline for one session without writing anything.

    ``github_repo`` is used as given; callers that want auto-detection should
    resolve it first (see ``resolve_github_repo``).
    """
    context = RenderContext(github_repo=github_repo)
    conversations = build_conversations(entries)

    pages = []
    for number, page_convs in enumerate(paginate(conversations, page_capacity), 1):
        pages.append(
            Page(number, list(page_convs), render_page_messages(page_convs, context))
        )

    archive = SessionArchive(pages=pages, timeline=[], github_repo=github_repo)
    all_commits = []  # (commit, page_num)
    all_tool_counts = []
    for i, conv in enumerate(conversations):
        archive.total_messages += len(conv.messages)
        stats = analyze_conversation(conv.messages, long_text_threshold)
        all_tool_counts.append(stats.tool_counts)
        page_num = (i // page_capacity) + 1
        all_commits.extend((commit, page_num) for commit in stats.commits)
    archive.tool_counts = merge_tool_counts(*all_tool_counts)
    archive.total_tool_calls = sum(archive.tool_counts.values())
    archive.total_commits = len(all_commits)

    timeline = []
    for i, conv in enumerate(conversations):
        if conv.is_continuation or is_noise_prompt(conv.user_text):
            continue
        archive.prompt_count += 1
        timeline.append(
            _prompt_item(
                archive.prompt_count,
                conv,
                continuation_run(conversations, i),
                (i // page_capacity) + 1,
                long_text_threshold,
            )
        )
    for commit, page_num in all_commits:
        timeline.append(_commit_item(commit, page_num, context))

    archive.timeline = sorted(timeline, key=timeline_sort_key)
    return archive


def render_page_html(archive, page):
    return get_template("page.html").render(
        css=CSS,
        js=JS,
        page_num=page.number,
        total_pages=archive.total_pages,
        pagination_html=_macros.pagination(page.number, archive.total_pages),
        messages_html=page.messages_html,
    )


def render_index_html(archive):
    return get_template("index.html").render(
        css=CSS,
        js=JS,
        search_js=SEARCH_JS,
        pagination_html=_macros.index_pagination(archive.total_pages),
        prompt_num=archive.prompt_count,
        total_messages=archive.total_messages,
        total_tool_calls=archive.total_tool_calls,
        total_commits=archive.total_commits,
        total_pages=archive.total_pages,
        index_items_html="".join(item.html for item in archive.timeline),
    )


def write_archive(archive, output_dir, quiet=False):
    """Write ``page-NNN.html`` files and ``index.html`` into ``output_dir``."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    for page in archive.pages:
        (output_dir / page_filename(page.number)).write_text(
            render_page_html(archive, page), encoding="utf-8"
        )
        if not quiet:
            click.echo(f"Generated {page_filename(page.number)}")

    index_path = output_dir / "index.html"
    index_path.write_text(render_index_html(archive), encoding="utf-8")
    if not quiet:
        click.echo(
            f"Generated {index_path.resolve()} "
            f"({archive.conversation_count} prompts, {archive.total_pages} pages)"
        )
    return index_path


def resolve_github_repo(entries, github_repo=None, quiet=False):
    """Return ``github_repo`` or, when it is None, the repo detected in ``entries``."""
    if github_repo is not None:
        return github_repo
    github_repo = detect_github_repo(entries)
    if quiet:
        return github_repo
    if github_repo:
        click.echo(f"Auto-detected GitHub repo: {github_repo}")
    else:
        click.echo(
            "Warning: Could not auto-detect GitHub repo. Commit links will be disabled."
        )
    return github_repo


def generate_html_from_entries(entries, output_dir, github_repo=None, quiet=False):
    github_repo = resolve_github_repo(entries, github_repo, quiet=quiet)
    archive = build_archive(entries, github_repo=github_repo)
    write_archive(archive, output_dir, quiet=quiet)
    return archive


def generate_html(json_path, output_dir, github_repo=None, quiet=False):
    """Convert a session file (JSON or JSONL) into an HTML archive."""
    return generate_html_from_entries(
        parse_session_file(json_path), output_dir, github_repo, quiet=quiet
    )


def generate_html_from_session_data(
    session_data, output_dir, github_repo=None, quiet=False
):
    """Convert an already-decoded session document into an HTML archive."""
    return generate_html_from_entries(
        parse_session_data(session_data), output_dir, github_repo, quiet=quiet
    )
