"""Discover local sessions and build multi-project archives."""

import json
from datetime import datetime
from pathlib import Path

from .assets import CSS, JS
from .conversations import prompt_text
from .generate import generate_html
from .parsing import extract_text_from_content, parse_session_file
from .rendering import get_template

NO_SUMMARY = "(no summary)"

# Leading path segments Claude Code encodes into project folder names
PROJECT_PREFIXES = ("-home-", "-mnt-c-Users-", "-mnt-c-users-", "-Users-")

# Intermediate directories that never name a project
SKIP_DIRS = {"projects", "code", "repos", "src", "dev", "work", "documents"}


def _truncate(text, max_length):
    if len(text) > max_length:
        return text[: max_length - 3] + "..."
    return text


def _index_summary(summary):
    if len(summary) > 100:
        return summary[:100] + "..."
    return summary


def _iter_jsonl_records(filepath):
    with open(filepath, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(obj, dict):
                yield obj


def _jsonl_summary(filepath):
    # First priority: summary records anywhere in the file
    for obj in _iter_jsonl_records(filepath):
        if obj.get("type") == "summary" and obj.get("summary"):
            return str(obj["summary"])

    for obj in _iter_jsonl_records(filepath):
        if obj.get("type") != "user" or obj.get("isMeta"):
            continue
        message = obj.get("message")
        if not isinstance(message, dict) or not message.get("content"):
            continue
        text = extract_text_from_content(message["content"])
        if text and not text.startswith("<"):
            return text
    return None


def _json_summary(filepath):
    for entry in parse_session_file(filepath):
        text = prompt_text(entry)
        if text:
            return text
    return None


def get_session_summary(filepath, max_length=200):
    """Extract a human-readable summary from a session file.

    Supports both JSON and JSONL formats.
    Returns a summary string or "(no summary)" if none found.
    """
    filepath = Path(filepath)
    try:
        if filepath.suffix == ".jsonl":
            summary = _jsonl_summary(filepath)
        else:
            summary = _json_summary(filepath)
    except Exception:
        return NO_SUMMARY
    if not summary:
        return NO_SUMMARY
    return _truncate(summary, max_length)


def _is_listable(summary):
    return summary.lower() != "warmup" and summary != NO_SUMMARY


def find_local_sessions(folder, limit=10):
    """Find recent JSONL session files in the given folder.

    Returns a list of (Path, summary) tuples sorted by modification time.
    Excludes agent files and warmup/empty sessions.
    """
    folder = Path(folder)
    if not folder.exists():
        return []

    results = []
    for f in folder.glob("**/*.jsonl"):
        if f.name.startswith("agent-"):
            continue
        summary = get_session_summary(f)
        if _is_listable(summary):
            results.append((f, summary))

    results.sort(key=lambda x: x[0].stat().st_mtime, reverse=True)
    return results[:limit]


def get_project_display_name(folder_name):
    """Convert encoded folder name to readable project name.

    Claude Code stores projects in folders like:
    - -home-user-projects-myproject -> myproject
    - -mnt-c-Users-name-Projects-app -> app
    """
    name = folder_name
    for prefix in PROJECT_PREFIXES:
        if name.lower().startswith(prefix.lower()):
            name = name[len(prefix) :]
            break

    parts = name.split("-")
    lowered = [p.lower() for p in parts]
    meaningful = []
    for i, part in enumerate(parts):
        if not part:
            continue
        # Leading username, when a well-known directory follows it
        if i == 0 and not meaningful and SKIP_DIRS.intersection(lowered[1:]):
            continue
        if part.lower() in SKIP_DIRS:
            continue
        meaningful.append(part)

    if meaningful:
        return "-".join(meaningful)
    for part in reversed(parts):
        if part:
            return part
    return folder_name


def find_all_sessions(folder, include_agents=False):
    """Find all sessions in a Claude projects folder, grouped by project.

    Returns a list of project dicts with ``name``, ``path`` and ``sessions``
    (each a dict with ``path``, ``summary``, ``mtime`` and ``size``).
    Sessions are newest first, and projects are ordered by their newest session.
    """
    folder = Path(folder)
    if not folder.exists():
        return []

    projects = {}
    for session_file in folder.glob("**/*.jsonl"):
        if not include_agents and session_file.name.startswith("agent-"):
            continue
        summary = get_session_summary(session_file)
        if not _is_listable(summary):
            continue

        project_folder = session_file.parent
        project = projects.setdefault(
            project_folder.name,
            {
                "name": get_project_display_name(project_folder.name),
                "path": project_folder,
                "sessions": [],
            },
        )
        stat = session_file.stat()
        project["sessions"].append(
            {
                "path": session_file,
                "summary": summary,
                "mtime": stat.st_mtime,
                "size": stat.st_size,
            }
        )

    for project in projects.values():
        project["sessions"].sort(key=lambda s: s["mtime"], reverse=True)

    result = list(projects.values())
    result.sort(
        key=lambda p: p["sessions"][0]["mtime"] if p["sessions"] else 0, reverse=True
    )
    return result


def generate_project_index(project, output_dir):
    """Write ``index.html`` listing the sessions of one project."""
    sessions_data = [
        {
            "name": session["path"].stem,
            "summary": _index_summary(session["summary"]),
            "date": datetime.fromtimestamp(session["mtime"]).strftime("%Y-%m-%d %H:%M"),
            "size_kb": session["size"] / 1024,
        }
        for session in project["sessions"]
    ]
    html_content = get_template("project_index.html").render(
        project_name=project["name"],
        sessions=sessions_data,
        css=CSS,
        js=JS,
    )
    output_path = Path(output_dir) / "index.html"
    output_path.write_text(html_content, encoding="utf-8")
    return output_path


def generate_master_index(projects, output_dir):
    """Write the top-level ``index.html`` listing every project."""
    projects_data = []
    for project in projects:
        if project["sessions"]:
            most_recent = datetime.fromtimestamp(project["sessions"][0]["mtime"])
            recent_date = most_recent.strftime("%Y-%m-%d")
        else:
            recent_date = "N/A"
        projects_data.append(
            {
                "name": project["name"],
                "session_count": len(project["sessions"]),
                "recent_date": recent_date,
            }
        )

    html_content = get_template("master_index.html").render(
        projects=projects_data,
        total_projects=len(projects),
        total_sessions=sum(p["session_count"] for p in projects_data),
        css=CSS,
        js=JS,
    )
    output_path = Path(output_dir) / "index.html"
    output_path.write_text(html_content, encoding="utf-8")
    return output_path


def generate_batch_html(
    source_folder,
    output_dir,
    include_agents=False,
    progress_callback=None,
):
    """Generate HTML archive for all sessions in a Claude projects folder.

    Creates:
    - Master index.html listing all projects
    - Per-project directories with index.html listing sessions
    - Per-session directories with transcript pages

    Args:
        source_folder: Path to the Claude projects folder
        output_dir: Path for output archive
        include_agents: Whether to include agent-* session files
        progress_callback: Optional callback(project_name, session_name, current, total)
            called after each session is processed

    Returns statistics dict with total_projects, total_sessions, failed_sessions, output_dir.
    """
    source_folder = Path(source_folder)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    projects = find_all_sessions(source_folder, include_agents=include_agents)

    total_session_count = sum(len(p["sessions"]) for p in projects)
    processed_count = 0
    successful_sessions = 0
    failed_sessions = []

    for project in projects:
        project_dir = output_dir / project["name"]
        project_dir.mkdir(exist_ok=True)

        for session in project["sessions"]:
            session_name = session["path"].stem
            try:
                generate_html(session["path"], project_dir / session_name, quiet=True)
                successful_sessions += 1
            except Exception as e:
                failed_sessions.append(
                    {
                        "project": project["name"],
                        "session": session_name,
                        "error": str(e),
                    }
                )

            processed_count += 1
            if progress_callback:
                progress_callback(
                    project["name"], session_name, processed_count, total_session_count
                )

        generate_project_index(project, project_dir)

    generate_master_index(projects, output_dir)

    return {
        "total_projects": len(projects),
        "total_sessions": successful_sessions,
        "failed_sessions": failed_sessions,
        "output_dir": output_dir,
    }
