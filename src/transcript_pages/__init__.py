"""Convert Claude Code session transcripts to paginated, browsable HTML archives."""

import json
import shutil
import tempfile
import webbrowser
from datetime import datetime
from pathlib import Path

import click
from click_default_group import DefaultGroup
import httpx
import questionary

from .analysis import (
    COMMIT_PATTERN,
    LONG_TEXT_THRESHOLD,
    analyze_conversation,
    find_commits,
    format_tool_stats,
    is_tool_result_message,
    merge_tool_counts,
)
from .api import (
    CredentialsError,
    fetch_session,
    fetch_sessions,
    resolve_credentials,
)
from .blocks import parse_block, parse_blocks
from .conversations import Conversation, build_conversations
from .generate import (
    PROMPTS_PER_PAGE,
    build_archive,
    generate_html,
    generate_html_from_session_data,
    paginate,
    total_page_count,
    write_archive,
)
from .gist import create_gist, gist_preview_url, inject_gist_preview_js
from .github import (
    GITHUB_REPO_PATTERN,
    detect_github_repo,
    enrich_sessions_with_repos,
    filter_sessions_by_repo,
    format_session_for_display,
)
from .parsing import (
    LogEntry,
    extract_text_from_content,
    parse_json_content,
    parse_jsonl_content,
    parse_session_data,
    parse_session_file,
)
from .rendering import RenderContext, render_content_block, render_message
from .sessions import (
    find_all_sessions,
    find_local_sessions,
    generate_batch_html,
    get_project_display_name,
    get_session_summary,
)

OUTPUT_HELP = (
    "Output directory. If not specified, writes to temp dir and opens in browser."
)
REPO_HELP = (
    "GitHub repo (owner/name) for commit links. "
    "Auto-detected from git push output if not specified."
)


def default_projects_folder():
    return Path.home() / ".claude" / "projects"


def output_options(func):
    """Options shared by the single-session commands."""
    options = [
        click.option("-o", "--output", type=click.Path(), help=OUTPUT_HELP),
        click.option(
            "-a",
            "--output-auto",
            is_flag=True,
            help="Auto-name output subdirectory (uses -o as parent, or current dir).",
        ),
        click.option("--repo", help=REPO_HELP),
        click.option(
            "--gist",
            is_flag=True,
            help="Upload to GitHub Gist and output a gisthost.github.io URL.",
        ),
        click.option(
            "--json",
            "include_json",
            is_flag=True,
            help="Include the session source data in the output directory.",
        ),
        click.option(
            "--open",
            "open_browser",
            is_flag=True,
            help="Open the generated index.html in your default browser (default if no -o specified).",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def resolve_output_dir(output, output_auto, name):
    """Pick the output directory; the second value says whether to auto-open it."""
    if output_auto:
        parent_dir = Path(output) if output else Path(".")
        return parent_dir / name, False
    if output is None:
        return Path(tempfile.gettempdir()) / f"claude-session-{name}", True
    return Path(output), False


def publish_output(output, gist, open_browser, auto_open):
    """Upload to a gist and open the browser, as requested."""
    if gist:
        inject_gist_preview_js(output)
        click.echo("Creating GitHub gist...")
        gist_id, gist_url = create_gist(output)
        click.echo(f"Gist: {gist_url}")
        click.echo(f"Preview: {gist_preview_url(gist_id)}")

    if open_browser or (auto_open and not gist):
        webbrowser.open((output / "index.html").resolve().as_uri())


def copy_source(source_file, output, label):
    output.mkdir(parents=True, exist_ok=True)
    dest = output / source_file.name
    shutil.copy(source_file, dest)
    click.echo(f"{label}: {dest} ({dest.stat().st_size / 1024:.1f} KB)")


@click.group(cls=DefaultGroup, default="local", default_if_no_args=True)
@click.version_option(None, "-v", "--version", package_name="transcript-pages")
def cli():
    """Convert Claude Code session transcripts to paginated HTML pages."""
    pass


@cli.command("local")
@output_options
@click.option(
    "--limit",
    default=10,
    help="Maximum number of sessions to show (default: 10)",
)
def local_cmd(output, output_auto, repo, gist, include_json, open_browser, limit):
    """Select and convert a local Claude Code session to HTML."""
    projects_folder = default_projects_folder()

    if not projects_folder.exists():
        click.echo(f"Projects folder not found: {projects_folder}")
        click.echo("No local Claude Code sessions available.")
        return

    click.echo("Loading local sessions...")
    results = find_local_sessions(projects_folder, limit=limit)

    if not results:
        click.echo("No local sessions found.")
        return

    choices = []
    for filepath, summary in results:
        stat = filepath.stat()
        date_str = datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d %H:%M")
        if len(summary) > 50:
            summary = summary[:47] + "..."
        display = f"{date_str}  {stat.st_size / 1024:5.0f} KB  {summary}"
        choices.append(questionary.Choice(title=display, value=filepath))

    session_file = questionary.select(
        "Select a session to convert:",
        choices=choices,
    ).ask()

    if session_file is None:
        click.echo("No session selected.")
        return

    session_file = Path(session_file)
    output, auto_open = resolve_output_dir(output, output_auto, session_file.stem)
    generate_html(session_file, output, github_repo=repo)
    click.echo(f"Output: {output.resolve()}")

    if include_json:
        copy_source(session_file, output, "JSONL")

    publish_output(output, gist, open_browser, auto_open)


def is_url(path):
    """Check if a path is a URL (starts with http:// or https://)."""
    return path.startswith("http://") or path.startswith("https://")


def fetch_url_to_tempfile(url):
    """Fetch a URL and save to a temporary file.

    Returns the Path to the temporary file.
    Raises click.ClickException on network errors.
    """
    try:
        response = httpx.get(url, timeout=60.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.RequestError as e:
        raise click.ClickException(f"Failed to fetch URL: {e}")
    except httpx.HTTPStatusError as e:
        raise click.ClickException(
            f"Failed to fetch URL: {e.response.status_code} {e.response.reason_phrase}"
        )

    url_path = url.split("?")[0]
    # JSONL unless the URL says otherwise
    suffix = ".json" if url_path.endswith(".json") else ".jsonl"
    url_name = Path(url_path).stem or "session"

    temp_file = Path(tempfile.gettempdir()) / f"claude-url-{url_name}{suffix}"
    temp_file.write_text(response.text, encoding="utf-8")
    return temp_file


@cli.command("json")
@click.argument("json_file", type=click.Path())
@output_options
def json_cmd(json_file, output, output_auto, repo, gist, include_json, open_browser):
    """Convert a Claude Code session JSON/JSONL file or URL to HTML."""
    if is_url(json_file):
        click.echo(f"Fetching {json_file}...")
        json_file_path = fetch_url_to_tempfile(json_file)
        name = Path(json_file.split("?")[0]).stem or "session"
    else:
        json_file_path = Path(json_file)
        if not json_file_path.exists():
            raise click.ClickException(f"File not found: {json_file}")
        name = json_file_path.stem

    output, auto_open = resolve_output_dir(output, output_auto, name)
    try:
        generate_html(json_file_path, output, github_repo=repo)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError
        raise click.ClickException(f"Could not parse {json_file}: {e}")
    click.echo(f"Output: {output.resolve()}")

    if include_json:
        copy_source(json_file_path, output, "JSON")

    publish_output(output, gist, open_browser, auto_open)


def api_error(e):
    if isinstance(e, httpx.HTTPStatusError):
        return click.ClickException(
            f"API request failed: {e.response.status_code} {e.response.text}"
        )
    return click.ClickException(f"Network error: {e}")


def pick_web_session(token, org_uuid, repo=None):
    """Show the remote session picker and return the chosen session id."""
    try:
        sessions_data = fetch_sessions(token, org_uuid)
    except httpx.HTTPError as e:
        raise api_error(e)

    sessions = enrich_sessions_with_repos(sessions_data.get("data", []))
    sessions = filter_sessions_by_repo(sessions, repo)
    if not sessions:
        if repo:
            raise click.ClickException(f"No sessions found for repo {repo}.")
        raise click.ClickException("No sessions found.")

    choices = [
        questionary.Choice(title=format_session_for_display(s), value=s.get("id"))
        for s in sessions
    ]
    selected = questionary.select(
        "Select a session to import:",
        choices=choices,
    ).ask()

    if selected is None:
        raise click.ClickException("No session selected.")
    return selected


@cli.command("web")
@click.argument("session_id", required=False)
@output_options
@click.option("--token", help="API access token (auto-detected from keychain on macOS)")
@click.option(
    "--org-uuid", help="Organization UUID (auto-detected from ~/.claude.json)"
)
def web_cmd(
    session_id,
    output,
    output_auto,
    repo,
    gist,
    include_json,
    open_browser,
    token,
    org_uuid,
):
    """Select and convert a web session from the Claude API to HTML.

    If SESSION_ID is not provided, displays an interactive picker to select a session.
    With --repo, the picker only lists sessions for that repository.
    """
    try:
        token, org_uuid = resolve_credentials(token, org_uuid)
    except CredentialsError as e:
        raise click.ClickException(str(e))

    if session_id is None:
        session_id = pick_web_session(token, org_uuid, repo)

    click.echo(f"Fetching session {session_id}...")
    try:
        session_data = fetch_session(token, org_uuid, session_id)
    except httpx.HTTPError as e:
        raise api_error(e)

    output, auto_open = resolve_output_dir(output, output_auto, session_id)
    click.echo(f"Generating HTML in {output}/...")
    generate_html_from_session_data(session_data, output, github_repo=repo)
    click.echo(f"Output: {output.resolve()}")

    if include_json:
        json_dest = output / f"{session_id}.json"
        json_dest.write_text(json.dumps(session_data, indent=2), encoding="utf-8")
        click.echo(f"JSON: {json_dest} ({json_dest.stat().st_size / 1024:.1f} KB)")

    publish_output(output, gist, open_browser, auto_open)


@cli.command("all")
@click.option(
    "-s",
    "--source",
    type=click.Path(exists=True),
    help="Source directory containing Claude projects (default: ~/.claude/projects).",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(),
    default="./claude-archive",
    help="Output directory for the archive (default: ./claude-archive).",
)
@click.option(
    "--include-agents",
    is_flag=True,
    help="Include agent-* session files (excluded by default).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be converted without creating files.",
)
@click.option(
    "--open",
    "open_browser",
    is_flag=True,
    help="Open the generated archive in your default browser.",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Suppress all output except errors.",
)
def all_cmd(source, output, include_agents, dry_run, open_browser, quiet):
    """Convert all local Claude Code sessions to a browsable HTML archive.

    Creates a directory structure with:
    - Master index listing all projects
    - Per-project pages listing sessions
    - Individual session transcripts
    """
    source = Path(source) if source else default_projects_folder()
    if not source.exists():
        raise click.ClickException(f"Source directory not found: {source}")

    output = Path(output)

    if not quiet:
        click.echo(f"Scanning {source}...")

    projects = find_all_sessions(source, include_agents=include_agents)

    if not projects:
        if not quiet:
            click.echo("No sessions found.")
        return

    total_sessions = sum(len(p["sessions"]) for p in projects)

    if not quiet:
        click.echo(f"Found {len(projects)} projects with {total_sessions} sessions")

    if dry_run:
        if not quiet:
            click.echo("\nDry run - would convert:")
            for project in projects:
                click.echo(
                    f"\n  {project['name']} ({len(project['sessions'])} sessions)"
                )
                for session in project["sessions"][:3]:
                    mod_time = datetime.fromtimestamp(session["mtime"])
                    click.echo(
                        f"    - {session['path'].stem} ({mod_time.strftime('%Y-%m-%d')})"
                    )
                if len(project["sessions"]) > 3:
                    click.echo(f"    ... and {len(project['sessions']) - 3} more")
        return

    if not quiet:
        click.echo(f"\nGenerating archive in {output}...")

    def on_progress(project_name, session_name, current, total):
        if not quiet and current % 10 == 0:
            click.echo(f"  Processed {current}/{total} sessions...")

    stats = generate_batch_html(
        source,
        output,
        include_agents=include_agents,
        progress_callback=on_progress,
    )

    if stats["failed_sessions"]:
        click.echo(f"\nWarning: {len(stats['failed_sessions'])} session(s) failed:")
        for failure in stats["failed_sessions"]:
            click.echo(
                f"  {failure['project']}/{failure['session']}: {failure['error']}"
            )

    if not quiet:
        click.echo(
            f"\nGenerated archive with {stats['total_projects']} projects, "
            f"{stats['total_sessions']} sessions"
        )
        click.echo(f"Output: {output.resolve()}")

    if open_browser:
        webbrowser.open((output / "index.html").resolve().as_uri())


def main():
    cli()
