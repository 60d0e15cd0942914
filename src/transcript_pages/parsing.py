"""Load session transcripts (JSON or JSONL) into normalized log entries."""

import json
from dataclasses import dataclass, field
from pathlib import Path

MESSAGE_TYPES = ("user", "assistant")


@dataclass(frozen=True)
class LogEntry:
    """One user or assistant record from a session log."""

    kind: str
    timestamp: str = ""
    message: dict = field(default_factory=dict)
    is_continuation: bool = False

    def to_dict(self):
        """Return the entry in the on-disk ``loglines`` shape."""
        entry = {
            "type": self.kind,
            "timestamp": self.timestamp,
            "message": self.message,
        }
        if self.is_continuation:
            entry["isCompactSummary"] = True
        return entry


def extract_text_from_content(content):
    """Extract plain text from message content.

    Handles both string content (older format) and array content (newer format).

    Args:
        content: Either a string or a list of content blocks like
                 [{"type": "text", "text": "..."}, {"type": "image", ...}]

    Returns:
        The extracted text as a string, or empty string if no text found.
    """
    if isinstance(content, str):
        return content.strip()
    elif isinstance(content, list):
        texts = []
        for block in content:
            if isinstance(block, dict) and block.get("type") == "text":
                text = block.get("text", "")
                if text and isinstance(text, str):
                    texts.append(text)
        return " ".join(texts).strip()
    return ""


def _entry_from_record(record):
    message = record.get("message")
    if not isinstance(message, dict):
        message = {}
    timestamp = record.get("timestamp") or ""
    return LogEntry(
        kind=record.get("type", ""),
        timestamp=str(timestamp),
        message=message,
        is_continuation=bool(record.get("isCompactSummary")),
    )


def parse_session_data(data):
    """Convert a single-document session (already decoded) to log entries.

    The log array is read from ``loglines``, or ``logEntries`` as an alias.
    Records are passed through structurally; non-mapping records are ignored.
    """
    records = data.get("loglines") or data.get("logEntries") or []
    if not isinstance(records, list):
        return []
    return [_entry_from_record(r) for r in records if isinstance(r, dict)]


def parse_json_content(text):
    """Parse a single JSON session document.

    Raises json.JSONDecodeError if the document is not valid JSON.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Session document must be a JSON object")
    return parse_session_data(data)


def parse_jsonl_content(text):
    """Parse newline-delimited JSON records, keeping only user/assistant ones.

    Lines that fail to parse are dropped.
    """
    entries = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            continue
        if not isinstance(obj, dict):
            continue
        # summary records are read by session discovery, not here
        if obj.get("type") not in MESSAGE_TYPES:
            continue
        entries.append(_entry_from_record(obj))
    return entries


def parse_session_file(filepath):
    """Parse a session file and return normalized log entries.

    Supports both JSON and JSONL formats, chosen by file suffix.
    """
    filepath = Path(filepath)
    text = filepath.read_text(encoding="utf-8")
    if filepath.suffix == ".jsonl":
        return parse_jsonl_content(text)
    return parse_json_content(text)
