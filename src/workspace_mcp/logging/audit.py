"""Per-request audit trail for workspace operations.

Each tool request becomes one JSON line describing what kind of operation
ran, which path it targeted, which lines or edits it touched, and how it
ended. Free text (file bodies, replacement text, search queries) is reduced
to character counts so file contents never reach the log.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Final


class Outcome(Enum):
    OK = "ok"
    ERROR = "error"
    BLOCKED = "blocked"


OPERATION_BY_TOOL: Final[Mapping[str, str]] = {
    "read_file": "read",
    "list_files": "read",
    "write_file": "write",
    "append_to_file": "write",
    "create_directory": "write",
    "delete_file": "delete",
    "edit_file": "edit",
    "edit_file_advanced": "edit",
    "replace_in_file": "edit",
    "preview_edit": "preview",
    "fast_find_file": "lookup",
    "find_files": "lookup",
    "search_content": "lookup",
    "refresh_file_index": "index",
    "file_index_stats": "index",
}
PATH_KEYS: Final = ("path", "file_path")
FLAG_KEYS: Final = frozenset(
    {
        "add_newline",
        "case_sensitive",
        "dryRun",
        "fuzzy_match",
        "head",
        "include_hidden",
        "include_remote",
        "limit",
        "oneline",
        "show_diff",
        "staged",
        "tail",
    }
)


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """One tool request as recorded in the audit trail."""

    timestamp: str
    request_id: str
    tool: str
    operation: str
    outcome: Outcome
    error_code: str | None = None
    path: str | None = None
    line_range: tuple[int, int] | None = None
    edit_count: int | None = None
    text_chars: int = 0
    flags: dict[str, bool | int] = field(default_factory=dict)


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def operation_for(tool: str, arguments: Mapping[str, object]) -> str:
    """Classify a tool call; dry-run batches count as previews."""
    if tool == "edit_file_advanced" and arguments.get("dryRun") is True:
        return "preview"
    if tool.startswith("git_"):
        return "vcs"
    return OPERATION_BY_TOOL.get(tool, "protocol")


def _line_range(arguments: Mapping[str, object]) -> tuple[int, int] | None:
    start = arguments.get("line_start")
    if not isinstance(start, int) or isinstance(start, bool):
        return None
    end = arguments.get("line_end")
    if not isinstance(end, int) or isinstance(end, bool):
        end = start
    return (start, end)


def _text_chars(arguments: Mapping[str, object]) -> int:
    total = 0
    for key, value in arguments.items():
        if isinstance(value, str) and key not in PATH_KEYS:
            total += len(value)
    edits = arguments.get("edits")
    if isinstance(edits, list):
        for edit in edits:
            if not isinstance(edit, dict):
                continue
            total += sum(len(text) for text in edit.values() if isinstance(text, str))
    return total


def build_event(
    request_id: str,
    tool: str,
    arguments: Mapping[str, object],
    outcome: Outcome,
    error_code: str | None = None,
) -> AuditEvent:
    """Describe a request without copying any of its free text."""
    path = next(
        (arguments[key] for key in PATH_KEYS if isinstance(arguments.get(key), str)),
        None,
    )
    edits = arguments.get("edits")
    flags = {
        key: value
        for key, value in sorted(arguments.items())
        if key in FLAG_KEYS and isinstance(value, (bool, int))
    }
    return AuditEvent(
        timestamp=utc_timestamp(),
        request_id=request_id,
        tool=tool,
        operation=operation_for(tool, arguments),
        outcome=outcome,
        error_code=error_code,
        path=path,
        line_range=_line_range(arguments),
        edit_count=len(edits) if isinstance(edits, list) else None,
        text_chars=_text_chars(arguments),
        flags=flags,
    )


class JsonlAuditLogger:
    """Append-only JSONL audit trail under the server's data directory."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: AuditEvent) -> None:
        record = asdict(event)
        record["outcome"] = event.outcome.value
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, sort_keys=True))
            handle.write("\n")
