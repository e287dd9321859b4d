"""Size and volume limits applied to workspace operations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from workspace_mcp.errors import AccessDeniedError, InvalidArgumentsError

DEFAULT_MAX_FILE_BYTES = 10 * 1024 * 1024


@dataclass(slots=True, frozen=True)
class SecurityLimits:
    """Runtime limits for file access and tool responses."""

    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    max_read_lines: int = 5_000
    max_find_results: int = 10
    max_total_bytes_per_response: int = 2 * 1024 * 1024


def enforce_file_size_limit(resolved_path: Path, limits: SecurityLimits) -> None:
    """Raise AccessDeniedError when an existing file exceeds max_file_bytes."""
    if resolved_path.is_file() and resolved_path.stat().st_size > limits.max_file_bytes:
        raise AccessDeniedError(
            "File exceeds max_file_bytes limit.",
            hint="Use head or tail to read part of the file.",
        )


def enforce_line_window(head: int | None, tail: int | None, limits: SecurityLimits) -> None:
    """Validate head/tail arguments for partial reads."""
    if head is not None and tail is not None:
        raise InvalidArgumentsError(
            "Cannot specify both tail and head parameters simultaneously",
            hint="Pass either head or tail, not both.",
        )
    for name, value in (("head", head), ("tail", tail)):
        if value is None:
            continue
        if value < 1:
            raise InvalidArgumentsError(f"{name} must be >= 1.")
        if value > limits.max_read_lines:
            raise InvalidArgumentsError(
                f"{name} exceeds max_read_lines limit ({limits.max_read_lines}).",
                hint="Request fewer lines.",
            )
