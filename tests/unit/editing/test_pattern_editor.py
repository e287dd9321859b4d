from __future__ import annotations

from pathlib import Path

import pytest

from workspace_mcp.editing import EditOperation, PatternEditor, apply_edits_to_text
from workspace_mcp.editing.pattern_editor import (
    Match,
    MatchKind,
    find_block,
    locate_match,
    reindent_block,
)
from workspace_mcp.errors import InvalidArgumentsError, NoMatchFoundError


def test_exact_match_replaces_first_occurrence() -> None:
    updated = apply_edits_to_text("x = 1\nx = 1\n", [EditOperation("x = 1", "x = 2")])

    assert updated == "x = 2\nx = 1\n"


def test_block_match_keeps_original_indentation() -> None:
    content = "def f():\n    foo()\n    return 1\n"

    updated = apply_edits_to_text(content, [EditOperation("  foo()", "bar()")])

    assert updated == "def f():\n    bar()\n    return 1\n"


def test_block_match_ignores_surrounding_whitespace_per_line() -> None:
    content = "class A:\n    def run(self):\n        go()\n"

    updated = apply_edits_to_text(
        content, [EditOperation("def run(self):  \n  go()", "def run(self):\n  stop()")]
    )

    assert "    def run(self):\n" in updated
    assert "stop()" in updated
    assert "go()" not in updated


def test_earliest_match_wins_when_it_is_a_block_match() -> None:
    updated = apply_edits_to_text("    foo()\n  foo()\n", [EditOperation("  foo()", "bar()")])

    assert updated == "    bar()\n  foo()\n"


def test_verbatim_text_inside_a_line_is_still_replaced() -> None:
    updated = apply_edits_to_text(
        "x = 1   # note\n", [EditOperation("  # note", "  # changed")]
    )

    assert updated == "x = 1   # changed\n"


def test_indented_old_text_at_line_start_matches_verbatim() -> None:
    updated = apply_edits_to_text("  foo()\n", [EditOperation("  foo()", "bar()")])

    assert updated == "bar()\n"


def test_locate_match_reports_kind_and_position() -> None:
    assert locate_match("a foo b", "foo") == Match(MatchKind.EXACT, 2)
    assert locate_match("x\n    foo()\n", "  foo()") == Match(MatchKind.BLOCK, 1)
    assert locate_match("    foo()\n  foo()", "  foo()") == Match(MatchKind.BLOCK, 0)
    assert locate_match("alpha", "omega") is None


def test_find_block_returns_earliest_window() -> None:
    lines = ["a", "  b", "c", "b  "]

    assert find_block(lines, ["b"]) == 1
    assert find_block(lines, ["b", "c"]) == 1
    assert find_block(lines, ["z"]) == -1


def test_reindent_block_applies_base_indent_to_first_line() -> None:
    assert reindent_block("    ", ["  foo()"], ["bar()"]) == ["    bar()"]


def test_unmatched_edit_raises_with_old_text() -> None:
    with pytest.raises(NoMatchFoundError) as error:
        apply_edits_to_text("alpha\n", [EditOperation("omega", "beta")])

    assert error.value.old_text == "omega"
    assert error.value.message == "Could not find exact match for edit:\nomega"


def test_batch_with_missing_edit_leaves_file_unmodified(tmp_path: Path) -> None:
    target = tmp_path / "module.py"
    original = "first = 1\nsecond = 2\n"
    target.write_text(original, encoding="utf-8")
    edits = [EditOperation("first = 1", "first = 10"), EditOperation("third = 3", "third = 30")]

    with pytest.raises(NoMatchFoundError):
        PatternEditor().apply_edits(target, edits)

    assert target.read_text(encoding="utf-8") == original


def test_edits_apply_in_order_to_updated_buffer(tmp_path: Path) -> None:
    target = tmp_path / "chain.txt"
    target.write_text("a\n", encoding="utf-8")
    edits = [EditOperation("a", "b"), EditOperation("b", "c")]

    result = PatternEditor().apply_edits(target, edits)

    assert target.read_text(encoding="utf-8") == "c\n"
    assert result.applied == 2
    assert "-a\n" in result.diff
    assert "+c\n" in result.diff


def test_dry_run_returns_diff_without_writing(tmp_path: Path) -> None:
    target = tmp_path / "dry.txt"
    target.write_text("value = old\n", encoding="utf-8")

    result = PatternEditor().apply_edits(
        target, [EditOperation("old", "new")], dry_run=True, label="dry.txt"
    )

    assert result.dry_run is True
    assert "+value = new\n" in result.diff
    assert target.read_text(encoding="utf-8") == "value = old\n"


def test_crlf_file_keeps_crlf_after_pattern_edit(tmp_path: Path) -> None:
    target = tmp_path / "crlf.py"
    target.write_bytes(b"x = 1\r\ny = 2\r\n")

    PatternEditor().apply_edits(target, [EditOperation("y = 2", "y = 3\nz = 4")])

    assert target.read_bytes() == b"x = 1\r\ny = 3\r\nz = 4\r\n"


def test_crlf_old_text_matches_normalized_buffer(tmp_path: Path) -> None:
    target = tmp_path / "multi.txt"
    target.write_bytes(b"one\r\ntwo\r\nthree\r\n")

    PatternEditor().apply_edits(target, [EditOperation("one\r\ntwo", "uno\r\ndos")])

    assert target.read_bytes() == b"uno\r\ndos\r\nthree\r\n"


def test_unencodable_replacement_is_rejected_without_writing(tmp_path: Path) -> None:
    target = tmp_path / "text.txt"
    target.write_text("value = old\n", encoding="utf-8")

    with pytest.raises(InvalidArgumentsError):
        PatternEditor().apply_edits(target, [EditOperation("old", "\udcff")])

    assert target.read_text(encoding="utf-8") == "value = old\n"
