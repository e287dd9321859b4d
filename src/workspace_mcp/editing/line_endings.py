"""Line-ending detection and normalization."""

from __future__ import annotations

import re
from enum import Enum
from typing import Final

_CRLF_OR_LF: Final[re.Pattern[str]] = re.compile(r"\r?\n")
_ANY_BREAK: Final[re.Pattern[str]] = re.compile(r"\r\n?|\n")


class LineEnding(Enum):
    """Line terminator style of a text file."""

    CRLF = "\r\n"
    CR = "\r"
    LF = "\n"

    @property
    def sequence(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return self.name


def detect_line_ending(content: str) -> LineEnding:
    """Detect the style from the first CRLF, else any bare CR, else LF."""
    if "\r\n" in content:
        return LineEnding.CRLF
    if "\r" in content:
        return LineEnding.CR
    return LineEnding.LF


def normalize_line_endings(content: str) -> str:
    """Return content with every line break rewritten as LF."""
    return _ANY_BREAK.sub("\n", content)


def split_lines(content: str, style: LineEnding | None = None) -> list[str]:
    """Split content into lines, accepting LF or CRLF separators.

    CR-only files are split on bare CR as well so that the line count agrees
    with the detected style. A trailing separator yields a final empty line.
    """
    if style is None:
        style = detect_line_ending(content)
    if style is LineEnding.CR:
        return _ANY_BREAK.split(content)
    return _CRLF_OR_LF.split(content)


def join_lines(lines: list[str], style: LineEnding) -> str:
    """Join lines with the given style's terminator."""
    return style.sequence.join(lines)


def restore_line_endings(normalized: str, style: LineEnding) -> str:
    """Convert LF-only content back to the given style."""
    if style is LineEnding.LF:
        return normalized
    return join_lines(normalized.split("\n"), style)
