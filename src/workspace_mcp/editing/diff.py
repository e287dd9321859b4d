"""Unified diff generation and display formatting."""

from __future__ import annotations

import difflib
import re
from typing import Final

from workspace_mcp.editing.line_endings import normalize_line_endings

FENCE_CHAR: Final[str] = "`"
MIN_FENCE_LENGTH: Final[int] = 3
NO_NEWLINE_MARKER: Final[str] = "\\ No newline at end of file\n"

_FENCE_RUN: Final[re.Pattern[str]] = re.compile(re.escape(FENCE_CHAR) + "+")


def create_unified_diff(original: str, modified: str, label: str = "file") -> str:
    """Build a unified diff between two blobs after normalizing line endings."""
    before = _lines_with_ends(normalize_line_endings(original))
    after = _lines_with_ends(normalize_line_endings(modified))
    output: list[str] = []
    for line in difflib.unified_diff(
        before,
        after,
        fromfile=label,
        tofile=label,
        fromfiledate="original",
        tofiledate="modified",
    ):
        if line.endswith("\n"):
            output.append(line)
            continue
        output.append(line + "\n")
        output.append(NO_NEWLINE_MARKER)
    if not output:
        output = [f"--- {label}\toriginal\n", f"+++ {label}\tmodified\n"]
    return "".join(output)


def _lines_with_ends(text: str) -> list[str]:
    # str.splitlines also breaks on form feeds and unicode separators.
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def longest_fence_run(text: str) -> int:
    """Return the length of the longest run of fence characters in text."""
    return max((len(match.group(0)) for match in _FENCE_RUN.finditer(text)), default=0)


def format_diff(diff_text: str) -> str:
    """Wrap a diff in a fenced block that cannot collide with its body."""
    fence = FENCE_CHAR * max(MIN_FENCE_LENGTH, longest_fence_run(diff_text) + 1)
    body = diff_text if diff_text.endswith("\n") else diff_text + "\n"
    return f"{fence}diff\n{body}{fence}\n\n"
