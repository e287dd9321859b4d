"""Old-text to new-text substitution with whitespace-tolerant block matching."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from workspace_mcp.editing.atomic import read_text, translate_write_error, write_atomic
from workspace_mcp.editing.diff import create_unified_diff, format_diff
from workspace_mcp.editing.line_editor import Writer
from workspace_mcp.editing.line_endings import (
    LineEnding,
    detect_line_ending,
    normalize_line_endings,
    restore_line_endings,
)
from workspace_mcp.errors import NoMatchFoundError

_LEADING_WHITESPACE: Final[re.Pattern[str]] = re.compile(r"^\s*")
_HORIZONTAL_WHITESPACE: Final[str] = " \t"


@dataclass(slots=True, frozen=True)
class EditOperation:
    """A single find/replace unit."""

    old_text: str
    new_text: str


class MatchKind(Enum):
    EXACT = "exact"
    BLOCK = "block"


@dataclass(slots=True, frozen=True)
class Match:
    """Where an edit applies: a character offset (exact) or a line index (block)."""

    kind: MatchKind
    position: int


@dataclass(slots=True, frozen=True)
class PatternEditResult:
    """Outcome of a batch of pattern edits."""

    diff: str
    applied: int
    dry_run: bool
    line_ending: LineEnding


def _leading_whitespace(line: str) -> str:
    match = _LEADING_WHITESPACE.match(line)
    return match.group(0) if match else ""


def find_block(content_lines: Sequence[str], old_lines: Sequence[str]) -> int:
    """Return the earliest window whose trimmed lines equal old_lines, or -1."""
    width = len(old_lines)
    for index in range(len(content_lines) - width + 1):
        window = content_lines[index : index + width]
        if all(old.strip() == line.strip() for old, line in zip(old_lines, window, strict=True)):
            return index
    return -1


def _line_offset(content_lines: Sequence[str], index: int) -> int:
    return sum(len(line) + 1 for line in content_lines[:index])


def locate_match(buffer: str, old_text: str) -> Match | None:
    """Pick the earliest usable match of old_text in an LF-normalized buffer.

    A verbatim occurrence wins unless old_text starts with indentation and a
    block match begins strictly earlier. That case is an indented old_text
    landing partway into a deeper indentation run, where the block match keeps
    the line's own indentation.
    """
    verbatim = buffer.find(old_text)
    indented = bool(old_text) and old_text[0] in _HORIZONTAL_WHITESPACE
    if verbatim == -1 or indented:
        content_lines = buffer.split("\n")
        index = find_block(content_lines, old_text.split("\n"))
        if index != -1 and (verbatim == -1 or _line_offset(content_lines, index) < verbatim):
            return Match(kind=MatchKind.BLOCK, position=index)
    if verbatim != -1:
        return Match(kind=MatchKind.EXACT, position=verbatim)
    return None


def reindent_block(
    base_indent: str, old_lines: Sequence[str], new_lines: Sequence[str]
) -> list[str]:
    """Shift replacement lines onto the matched block's indentation."""
    output: list[str] = []
    for index, line in enumerate(new_lines):
        if index == 0:
            output.append(base_indent + line.lstrip())
            continue
        old_indent = _leading_whitespace(old_lines[index]) if index < len(old_lines) else ""
        new_indent = _leading_whitespace(line)
        if old_indent and new_indent:
            delta = max(0, len(new_indent) - len(old_indent))
            output.append(base_indent + " " * delta + line.lstrip())
            continue
        output.append(line)
    return output


def apply_edit(buffer: str, edit: EditOperation) -> str:
    """Apply one edit to an LF-normalized buffer or raise NoMatchFoundError."""
    old_text = normalize_line_endings(edit.old_text)
    new_text = normalize_line_endings(edit.new_text)

    match = locate_match(buffer, old_text)
    if match is None:
        raise NoMatchFoundError(edit.old_text)
    if match.kind is MatchKind.EXACT:
        start = match.position
        return buffer[:start] + new_text + buffer[start + len(old_text) :]

    old_lines = old_text.split("\n")
    content_lines = buffer.split("\n")
    index = match.position
    base_indent = _leading_whitespace(content_lines[index])
    replacement = reindent_block(base_indent, old_lines, new_text.split("\n"))
    content_lines[index : index + len(old_lines)] = replacement
    return "\n".join(content_lines)


def apply_edits_to_text(content: str, edits: Sequence[EditOperation]) -> str:
    """Apply edits in order; any unmatched edit aborts the whole batch."""
    style = detect_line_ending(content)
    buffer = normalize_line_endings(content)
    for edit in edits:
        buffer = apply_edit(buffer, edit)
    return restore_line_endings(buffer, style)


class PatternEditor:
    """Applies batches of find/replace edits to a single file."""

    def __init__(self, writer: Writer = write_atomic) -> None:
        self._write = writer

    def apply_edits(
        self,
        path: Path,
        edits: Sequence[EditOperation],
        dry_run: bool = False,
        label: str | None = None,
    ) -> PatternEditResult:
        """Apply edits and persist them unless dry_run is set."""
        original = read_text(path)
        updated = apply_edits_to_text(original, edits)
        diff = create_unified_diff(original, updated, label or path.name)
        if not dry_run:
            try:
                self._write(path, updated)
            except (OSError, UnicodeError) as error:
                raise translate_write_error(path, error) from error
        return PatternEditResult(
            diff=format_diff(diff),
            applied=len(edits),
            dry_run=dry_run,
            line_ending=detect_line_ending(original),
        )
