"""Safe file editing: line ranges, pattern edits, diffs, and atomic writes."""

from .atomic import read_text, translate_write_error, write_atomic
from .diff import create_unified_diff, format_diff
from .line_editor import (
    LineEditPlan,
    LineEditResult,
    SafeLineEditor,
    WriteResult,
    WriteStatus,
    validate_line_range,
)
from .line_endings import (
    LineEnding,
    detect_line_ending,
    join_lines,
    normalize_line_endings,
    restore_line_endings,
    split_lines,
)
from .pattern_editor import EditOperation, PatternEditor, PatternEditResult, apply_edits_to_text

__all__ = [
    "EditOperation",
    "LineEditPlan",
    "LineEditResult",
    "LineEnding",
    "PatternEditResult",
    "PatternEditor",
    "SafeLineEditor",
    "WriteResult",
    "WriteStatus",
    "apply_edits_to_text",
    "create_unified_diff",
    "detect_line_ending",
    "format_diff",
    "join_lines",
    "normalize_line_endings",
    "read_text",
    "restore_line_endings",
    "split_lines",
    "translate_write_error",
    "validate_line_range",
    "write_atomic",
]
