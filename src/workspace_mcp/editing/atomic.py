"""Atomic text writes and exact text reads."""

from __future__ import annotations

import contextlib
import os
import secrets
import stat
from pathlib import Path

from workspace_mcp.errors import FileAccessError, InvalidArgumentsError, WorkspaceError


def translate_write_error(path: Path, error: OSError | UnicodeError) -> WorkspaceError:
    """Label a failed write; text that cannot be encoded is the caller's input."""
    if isinstance(error, UnicodeError):
        return InvalidArgumentsError(
            f"Content for {path.name} cannot be encoded as UTF-8: {error}",
            hint="Remove unpaired surrogate characters and retry. "
            "The original file was not modified.",
        )
    return FileAccessError(
        f"Failed to write {path.name}: {error.strerror or error}",
        hint="The original file was not modified.",
    )


def temp_path_for(path: Path) -> Path:
    """Return a sibling temp path with a random suffix."""
    return path.with_name(f"{path.name}.{secrets.token_hex(16)}.tmp")


def write_atomic(path: Path, content: str) -> None:
    """Write content to a sibling temp file, then rename it over path.

    The rename is the commit point, so readers never observe a partially
    written file. On failure the temp file is removed and the original error
    is re-raised.
    """
    temp_path = temp_path_for(path)
    try:
        with temp_path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        with contextlib.suppress(OSError):
            os.chmod(temp_path, stat.S_IMODE(path.stat().st_mode))
        os.replace(temp_path, path)
    except Exception:
        with contextlib.suppress(OSError):
            temp_path.unlink()
        raise


def read_text(path: Path) -> str:
    """Read UTF-8 text without translating line endings."""
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except FileNotFoundError as error:
        raise FileAccessError(
            f"File not found: {path.name}",
            hint="Use fast_find_file or list_files to locate the file.",
        ) from error
    except IsADirectoryError as error:
        raise FileAccessError(f"Path is a directory, not a file: {path.name}") from error
    except UnicodeDecodeError as error:
        raise FileAccessError(f"File is not valid UTF-8 text: {path.name}") from error
    except OSError as error:
        raise FileAccessError(f"Cannot read {path.name}: {error.strerror or error}") from error
