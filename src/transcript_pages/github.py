"""Work out which GitHub repository a session belongs to."""

import re

from .blocks import ToolResultBlock, parse_blocks

# Regex to detect GitHub repo from git push output (e.g., github.com/owner/repo/pull/new/branch)
GITHUB_REPO_PATTERN = re.compile(
    r"github\.com/([a-zA-Z0-9_-]+/[a-zA-Z0-9_-]+)/pull/new/"
)

GITHUB_URL_PATTERN = re.compile(r"github\.com/([^/]+/[^/]+?)(?:\.git)?$")


def detect_github_repo(entries):
    """
    Detect GitHub repo from git push output in tool results.

    Looks for patterns like:
    - github.com/owner/repo/pull/new/branch (from git push messages)

    Returns the first detected repo (owner/name) or None.
    """
    for entry in entries:
        for block in parse_blocks(entry.message.get("content")):
            if isinstance(block, ToolResultBlock) and isinstance(block.content, str):
                match = GITHUB_REPO_PATTERN.search(block.content)
                if match:
                    return match.group(1)
    return None


def extract_repo_from_session(session):
    """Extract the owner/name repo from API session metadata, or None."""
    context = session.get("session_context") or {}

    for outcome in context.get("outcomes") or []:
        if outcome.get("type") == "git_repository":
            repo = (outcome.get("git_info") or {}).get("repo")
            if repo:
                return repo

    for source in context.get("sources") or []:
        if source.get("type") == "git_repository":
            url = source.get("url") or ""
            match = GITHUB_URL_PATTERN.search(url)
            if match:
                return match.group(1)

    return None


def enrich_sessions_with_repos(sessions):
    """Return copies of API sessions with a ``repo`` key filled in."""
    return [dict(s, repo=extract_repo_from_session(s)) for s in sessions]


def filter_sessions_by_repo(sessions, repo):
    if repo is None:
        return sessions
    return [s for s in sessions if s.get("repo") == repo]


def format_session_for_display(session_data):
    """Format a session for display in the list or picker.

    Returns a formatted string.
    """
    title = session_data.get("title") or "Untitled"
    created_at = session_data.get("created_at") or ""
    repo = session_data.get("repo") or "(no repo)"
    # Truncate title if too long
    if len(title) > 50:
        title = title[:47] + "..."
    date_display = created_at[:19] if created_at else "N/A"
    return f"{repo:30}  {date_display:19}  {title}"
