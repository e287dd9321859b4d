from __future__ import annotations

import os
from pathlib import Path

import pytest

from workspace_mcp.editing import read_text, write_atomic
from workspace_mcp.errors import FileAccessError


def test_write_atomic_replaces_content_without_leftovers(tmp_path: Path) -> None:
    target = tmp_path / "data.txt"
    target.write_text("old", encoding="utf-8")

    write_atomic(target, "new\r\ncontent")

    assert target.read_bytes() == b"new\r\ncontent"
    assert sorted(path.name for path in tmp_path.iterdir()) == ["data.txt"]


def test_failed_rename_keeps_original_and_removes_temp(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    target = tmp_path / "data.txt"
    target.write_text("original", encoding="utf-8")

    def failing_replace(src: object, dst: object) -> None:
        raise OSError("rename failed")

    monkeypatch.setattr(os, "replace", failing_replace)

    with pytest.raises(OSError, match="rename failed"):
        write_atomic(target, "changed")

    assert target.read_text(encoding="utf-8") == "original"
    assert sorted(path.name for path in tmp_path.iterdir()) == ["data.txt"]


def test_read_text_preserves_crlf(tmp_path: Path) -> None:
    target = tmp_path / "crlf.txt"
    target.write_bytes(b"a\r\nb\r\n")

    assert read_text(target) == "a\r\nb\r\n"


def test_read_text_translates_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileAccessError) as error:
        read_text(tmp_path / "missing.txt")

    assert error.value.message == "File not found: missing.txt"


def test_read_text_rejects_binary_content(tmp_path: Path) -> None:
    target = tmp_path / "blob.bin"
    target.write_bytes(b"\xff\xfe\x00\x81")

    with pytest.raises(FileAccessError) as error:
        read_text(target)

    assert "not valid UTF-8" in error.value.message
