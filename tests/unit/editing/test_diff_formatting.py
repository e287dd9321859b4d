from __future__ import annotations

from workspace_mcp.editing import create_unified_diff, format_diff


def test_unified_diff_shows_removed_and_added_lines() -> None:
    diff = create_unified_diff("a\nb\nc\n", "a\nB\nc\n", "notes.txt")

    assert diff.startswith("--- notes.txt\toriginal\n+++ notes.txt\tmodified\n")
    assert "-b\n" in diff
    assert "+B\n" in diff
    assert " a\n" in diff


def test_line_endings_do_not_show_up_as_changes() -> None:
    diff = create_unified_diff("a\r\nb\r\n", "a\nb\n", "same.txt")

    assert diff == "--- same.txt\toriginal\n+++ same.txt\tmodified\n"


def test_missing_final_newline_is_marked() -> None:
    diff = create_unified_diff("a\nb", "a\nc", "tail.txt")

    assert "-b\n\\ No newline at end of file\n" in diff
    assert "+c\n\\ No newline at end of file\n" in diff


def test_format_diff_uses_plain_fence_by_default() -> None:
    formatted = format_diff("--- f\n+++ f\n")

    assert formatted == "```diff\n--- f\n+++ f\n```\n\n"


def test_format_diff_fence_outgrows_backticks_in_body() -> None:
    formatted = format_diff("+````python\n")

    assert formatted.startswith("`````diff\n")
    assert formatted.endswith("\n`````\n\n")
