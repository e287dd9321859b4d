"""Line-range editing with validation, verification, and rollback."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from workspace_mcp.editing.atomic import read_text, translate_write_error, write_atomic
from workspace_mcp.editing.diff import create_unified_diff, format_diff
from workspace_mcp.editing.line_endings import (
    LineEnding,
    detect_line_ending,
    join_lines,
    normalize_line_endings,
    split_lines,
)
from workspace_mcp.errors import (
    CorruptionDetectedError,
    CriticalRecoveryFailureError,
    InvalidRangeError,
    WorkspaceError,
)

logger = logging.getLogger(__name__)

Writer = Callable[[Path, str], None]


class WriteStatus(Enum):
    """Outcome of a verified write."""

    SUCCESS = "success"
    CORRUPTION_DETECTED = "corruption_detected"


@dataclass(slots=True, frozen=True)
class WriteResult:
    """Result of committing new content and verifying it on disk."""

    status: WriteStatus
    restored: bool = False
    detail: str = ""
    restore_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is WriteStatus.SUCCESS


@dataclass(slots=True, frozen=True)
class LineEditPlan:
    """Validated splice of a line range, not yet written."""

    original: str
    updated: str
    line_ending: LineEnding
    line_start: int
    line_end: int
    original_line_count: int
    new_line_count: int
    lines_added: int

    @property
    def lines_replaced(self) -> int:
        return self.line_end - self.line_start + 1


@dataclass(slots=True, frozen=True)
class LineEditResult:
    """Display-ready outcome of a committed line edit."""

    diff: str
    summary: str


class SafeLineEditor:
    """Replaces 1-based inclusive line ranges without guessing offsets."""

    def __init__(self, writer: Writer = write_atomic, restorer: Writer = write_atomic) -> None:
        self._write = writer
        self._restore = restorer

    def plan(
        self,
        path: Path,
        line_start: int,
        line_end: int | None,
        new_content: str,
    ) -> LineEditPlan:
        """Read the file, validate the range, and compute the spliced content."""
        original = read_text(path)
        style = detect_line_ending(original)
        lines = split_lines(original, style)
        total = len(lines)
        effective_end = line_start if line_end is None else line_end
        validate_line_range(path.name, line_start, effective_end, total)

        replacement = normalize_line_endings(new_content).split("\n")
        edited = lines[: line_start - 1] + replacement + lines[effective_end:]
        return LineEditPlan(
            original=original,
            updated=join_lines(edited, style),
            line_ending=style,
            line_start=line_start,
            line_end=effective_end,
            original_line_count=total,
            new_line_count=len(edited),
            lines_added=len(replacement),
        )

    def preview(
        self,
        path: Path,
        line_start: int,
        line_end: int | None,
        new_content: str,
        label: str | None = None,
    ) -> str:
        """Return the formatted diff an edit would produce, without writing."""
        plan = self.plan(path, line_start, line_end, new_content)
        diff = create_unified_diff(plan.original, plan.updated, label or path.name)
        return (
            "PREVIEW - This is what the edit would do:\n\n"
            f"{format_diff(diff)}"
            f"Line ending style: {plan.line_ending.label} (preserved)\n\n"
            "To apply these changes, use: edit_file with the same parameters"
        )

    def edit(
        self,
        path: Path,
        line_start: int,
        line_end: int | None,
        new_content: str,
        label: str | None = None,
    ) -> LineEditResult:
        """Apply the edit atomically, verify it, and restore on corruption."""
        plan = self.plan(path, line_start, line_end, new_content)
        diff = create_unified_diff(plan.original, plan.updated, label or path.name)

        result = self.commit_verified(path, plan.original, plan.updated)
        if not result.ok:
            if not result.restored:
                raise CriticalRecoveryFailureError(
                    write_error=result.detail,
                    restore_error=result.restore_error or "unknown error",
                )
            raise CorruptionDetectedError(
                f"{result.detail} - restored from backup",
                hint="The edit was not applied and the original content is intact. "
                "Re-read the file and retry.",
            )
        return LineEditResult(diff=format_diff(diff), summary=_summary(path.name, plan))

    def commit_verified(self, path: Path, original: str, updated: str) -> WriteResult:
        """Write updated content, re-read it, and roll back an empty result."""
        try:
            self._write(path, updated)
        except (OSError, UnicodeError) as error:
            raise translate_write_error(path, error) from error

        failure: str | None = None
        try:
            verified = read_text(path)
        except WorkspaceError as error:
            failure = f"File verification failed: {error.message}"
        else:
            if not verified and updated:
                failure = "File corruption detected: file is empty after write"
        if failure is None:
            return WriteResult(status=WriteStatus.SUCCESS)

        logger.warning("%s (%s); restoring pre-edit content", failure, path)
        try:
            self._restore(path, original)
        except OSError as error:
            logger.error("Restore of %s failed: %s", path, error)
            return WriteResult(
                status=WriteStatus.CORRUPTION_DETECTED,
                restored=False,
                detail=failure,
                restore_error=str(error),
            )
        return WriteResult(status=WriteStatus.CORRUPTION_DETECTED, restored=True, detail=failure)


def validate_line_range(name: str, line_start: int, line_end: int, total: int) -> None:
    """Raise InvalidRangeError naming the bound a range violates."""
    if line_start < 1 or line_start > total:
        raise InvalidRangeError(
            f"Invalid line_start {line_start} - file only has {total} lines",
            hint=(
                f"1. Use 'read_file {name}' to see current content\n"
                "2. Count lines carefully (files start at line 1)\n"
                "3. Use 'preview_edit' to test parameters safely\n"
                f"The file currently has lines 1-{total}"
            ),
        )
    if line_end < line_start:
        raise InvalidRangeError(
            f"Invalid line_end {line_end} - line_end precedes line_start {line_start}; "
            f"must be between {line_start} and {total}",
            hint=(
                "1. Ensure line_end >= line_start\n"
                f"2. Use 'read_file {name}' to see current content\n"
                f"3. File has {total} lines total"
            ),
        )
    if line_end > total:
        raise InvalidRangeError(
            f"Invalid line_end {line_end} - file only has {total} lines; "
            f"must be between {line_start} and {total}",
            hint=(
                f"1. Use 'read_file {name}' to see current content\n"
                "2. Use 'preview_edit' to test parameters safely\n"
                f"The file currently has lines 1-{total}"
            ),
        )


def _summary(name: str, plan: LineEditPlan) -> str:
    return (
        f"Successfully edited {name}:\n"
        f"- Replaced {plan.lines_replaced} lines (lines {plan.line_start}-{plan.line_end})\n"
        f"- Added {plan.lines_added} new lines\n"
        f"- File now has {plan.new_line_count} lines (was {plan.original_line_count})\n"
        f"- Line ending style: {plan.line_ending.label}\n\n"
        "Verification recommended:\n"
        f"Use 'read_file {name}' to confirm the edit looks correct\n"
        "Use 'git_diff' to see changes in context"
    )
