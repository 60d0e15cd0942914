"""Tests for GitHub repository detection."""

from transcript_pages.github import (
    detect_github_repo,
    enrich_sessions_with_repos,
    extract_repo_from_session,
    filter_sessions_by_repo,
    format_session_for_display,
)
from transcript_pages.parsing import LogEntry


def result_entry(content):
    return LogEntry(
        "user",
        "2025-01-01T00:00:00Z",
        {"content": [{"type": "tool_result", "tool_use_id": "t", "content": content}]},
    )


class TestDetectGithubRepo:
    """Tests for the detect_github_repo function."""

    def test_detects_repo_from_push_output(self):
        """Test that the repo is detected from git push output."""
        entries = [
            LogEntry("user", "t", {"content": "push please"}),
            result_entry(
                "remote: Create a pull request for 'feat' on GitHub by visiting:\n"
                "remote:      https://github.com/simonw/datasette/pull/new/feat\n"
            ),
        ]
        assert detect_github_repo(entries) == "simonw/datasette"

    def test_first_match_wins(self):
        """Test that the first detected repo wins."""
        entries = [
            result_entry("github.com/first/repo/pull/new/a"),
            result_entry("github.com/second/repo/pull/new/b"),
        ]
        assert detect_github_repo(entries) == "first/repo"

    def test_no_match(self):
        """Test that None is returned when there is no push output."""
        assert detect_github_repo([result_entry("Everything up-to-date")]) is None
        assert detect_github_repo([]) is None

    def test_ignores_plain_text_mentions(self):
        """Test that repo URLs in ordinary text are ignored."""
        entry = LogEntry(
            "assistant",
            "t",
            {"content": [{"type": "text", "text": "github.com/a/b/pull/new/c"}]},
        )
        assert detect_github_repo([entry]) is None


class TestExtractRepoFromSession:
    """Tests for the extract_repo_from_session function."""

    def test_from_outcomes(self):
        """Test that the repo is read from session outcomes."""
        session = {
            "session_context": {
                "outcomes": [
                    {"type": "other"},
                    {"type": "git_repository", "git_info": {"repo": "owner/app"}},
                ]
            }
        }
        assert extract_repo_from_session(session) == "owner/app"

    def test_from_sources_url(self):
        """Test that the repo falls back to the source URL."""
        session = {
            "session_context": {
                "sources": [
                    {"type": "git_repository", "url": "https://github.com/owner/tool.git"}
                ]
            }
        }
        assert extract_repo_from_session(session) == "owner/tool"

    def test_missing_context(self):
        """Test that sessions without context have no repo."""
        assert extract_repo_from_session({}) is None
        assert extract_repo_from_session({"session_context": None}) is None


class TestSessionFiltering:
    """Tests for enriching, filtering and displaying API sessions."""

    def test_enrich_and_filter(self):
        """Test enriching sessions with repos and filtering by repo."""
        sessions = [
            {
                "id": "a",
                "session_context": {
                    "outcomes": [
                        {"type": "git_repository", "git_info": {"repo": "o/one"}}
                    ]
                },
            },
            {"id": "b"},
        ]
        enriched = enrich_sessions_with_repos(sessions)
        assert [s["repo"] for s in enriched] == ["o/one", None]
        assert "repo" not in sessions[0]
        assert [s["id"] for s in filter_sessions_by_repo(enriched, "o/one")] == ["a"]
        assert filter_sessions_by_repo(enriched, None) == enriched

    def test_format_session_for_display(self):
        """Test the picker line for a session."""
        display = format_session_for_display(
            {
                "title": "Fix the flaky test",
                "created_at": "2025-01-02T03:04:05.678Z",
                "repo": "owner/repo",
            }
        )
        assert display == f"{'owner/repo':30}  2025-01-02T03:04:05  Fix the flaky test"

    def test_format_session_truncates_long_titles(self):
        """Test that long titles are truncated in the picker."""
        display = format_session_for_display({"title": "t" * 80})
        assert display.startswith(f"{'(no repo)':30}  {'N/A':19}  ")
        assert display.endswith("t" * 47 + "...")
