from __future__ import annotations

from pathlib import Path

import pytest

from workspace_mcp.errors import AccessDeniedError, InvalidArgumentsError
from workspace_mcp.security import SecurityLimits, enforce_file_size_limit, enforce_line_window


def test_file_over_max_bytes_is_denied(tmp_path: Path) -> None:
    target = tmp_path / "big.txt"
    target.write_text("x" * 64, encoding="utf-8")

    with pytest.raises(AccessDeniedError) as error:
        enforce_file_size_limit(target, SecurityLimits(max_file_bytes=10))

    assert error.value.message == "File exceeds max_file_bytes limit."


def test_file_within_limit_and_missing_file_pass(tmp_path: Path) -> None:
    target = tmp_path / "small.txt"
    target.write_text("x", encoding="utf-8")

    enforce_file_size_limit(target, SecurityLimits(max_file_bytes=10))
    enforce_file_size_limit(tmp_path / "missing.txt", SecurityLimits(max_file_bytes=10))


def test_head_and_tail_are_mutually_exclusive() -> None:
    with pytest.raises(InvalidArgumentsError) as error:
        enforce_line_window(head=1, tail=1, limits=SecurityLimits())

    assert "Cannot specify both tail and head" in error.value.message


def test_window_above_max_read_lines_is_rejected() -> None:
    with pytest.raises(InvalidArgumentsError):
        enforce_line_window(head=11, tail=None, limits=SecurityLimits(max_read_lines=10))

    enforce_line_window(head=None, tail=10, limits=SecurityLimits(max_read_lines=10))
