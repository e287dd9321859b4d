"""Filesystem tools: read, write, append, mkdir, delete, and list."""

from __future__ import annotations

import logging
import os
import shutil
from collections import deque
from itertools import islice
from pathlib import Path, PurePosixPath

from workspace_mcp.editing import (
    detect_line_ending,
    read_text,
    translate_write_error,
    write_atomic,
)
from workspace_mcp.errors import (
    AccessDeniedError,
    FileAccessError,
    InvalidArgumentsError,
    ParentMissingError,
)
from workspace_mcp.index import is_hidden_name
from workspace_mcp.security import enforce_file_size_limit, enforce_line_window
from workspace_mcp.tools.arguments import (
    optional_bool,
    optional_positive_int,
    optional_string,
    require_string,
    require_text,
    text_result,
)
from workspace_mcp.tools.registry import ToolHandler
from workspace_mcp.workspace import WorkspaceContext

logger = logging.getLogger(__name__)


def read_file_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        path_value = require_string(arguments, "path", "read_file")
        head = optional_positive_int(arguments, "head", "read_file")
        tail = optional_positive_int(arguments, "tail", "read_file")
        enforce_line_window(head=head, tail=tail, limits=context.limits)
        resolved = context.resolve(path_value)
        if head is None and tail is None:
            enforce_file_size_limit(resolved, context.limits)
            return text_result(read_text(resolved))
        return text_result(_read_window(resolved, head=head, tail=tail))

    return handler


def write_file_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        path_value = require_string(arguments, "path", "write_file")
        content = require_text(arguments, "content", "write_file")
        resolved = context.resolve(path_value)
        if resolved.is_dir():
            raise FileAccessError(f"Path is a directory, not a file: {path_value}")
        try:
            data = content.encode("utf-8")
        except UnicodeError as error:
            raise translate_write_error(resolved, error) from error
        try:
            with resolved.open("xb") as handle:
                handle.write(data)
        except FileExistsError:
            _write_or_translate(resolved, content)
        except OSError as error:
            raise translate_write_error(resolved, error) from error
        return text_result(f"Successfully wrote to {path_value}")

    return handler


def append_to_file_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        path_value = require_string(arguments, "path", "append_to_file")
        content = require_text(arguments, "content", "append_to_file")
        add_newline = optional_bool(arguments, "add_newline", "append_to_file", default=True)
        resolved = context.resolve(path_value)
        existing = read_text(resolved) if resolved.exists() else ""
        separator = ""
        if add_newline and existing:
            separator = detect_line_ending(existing).sequence
        _write_or_translate(resolved, existing + separator + content)
        return text_result(f"Successfully appended to {path_value}")

    return handler


def create_directory_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        path_value = require_string(arguments, "path", "create_directory")
        target = _resolve_directory_target(context, path_value)
        if target.exists() and not target.is_dir():
            raise FileAccessError(f"Path exists and is not a directory: {path_value}")
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise FileAccessError(
                f"Failed to create directory {path_value}: {error.strerror or error}"
            ) from error
        return text_result(f"Successfully created directory {path_value}")

    return handler


def delete_file_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        path_value = require_string(arguments, "path", "delete_file")
        resolved = context.resolve(path_value)
        if resolved == context.root:
            raise AccessDeniedError(
                "Access denied - cannot delete the workspace root",
                hint="Delete individual files or subdirectories instead.",
            )
        if not resolved.exists():
            raise FileAccessError(f"Path not found: {path_value}")
        try:
            if resolved.is_dir():
                shutil.rmtree(resolved)
                message = f"Successfully deleted directory {path_value}"
            else:
                resolved.unlink()
                message = f"Successfully deleted file {path_value}"
        except OSError as error:
            raise FileAccessError(
                f"Failed to delete {path_value}: {error.strerror or error}"
            ) from error
        logger.debug("Deleted %s", resolved)
        return text_result(message)

    return handler


def list_files_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        path_value = optional_string(arguments, "path", "list_files") or "."
        include_hidden = optional_bool(arguments, "include_hidden", "list_files", default=False)
        resolved = context.resolve(path_value)
        if not resolved.is_dir():
            raise FileAccessError(f"Not a directory: {path_value}")
        skip_dirs = context.index_config.skip_dirs
        lines: list[str] = []
        try:
            with os.scandir(resolved) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as error:
            raise FileAccessError(
                f"Cannot list {path_value}: {error.strerror or error}"
            ) from error
        for entry in entries:
            if not include_hidden and is_hidden_name(entry.name):
                continue
            try:
                is_dir = entry.is_dir()
            except OSError:
                continue
            if is_dir:
                if entry.name in skip_dirs:
                    continue
                lines.append(f"[DIR] {entry.name}")
            else:
                lines.append(f"[FILE] {entry.name}")
        return text_result("\n".join(lines) if lines else "(empty directory)")

    return handler


def _read_window(path: Path, head: int | None, tail: int | None) -> str:
    if not path.is_file():
        if path.is_dir():
            raise FileAccessError(f"Path is a directory, not a file: {path.name}")
        raise FileAccessError(f"File not found: {path.name}")
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            if head is not None:
                window = list(islice(handle, head))
            else:
                window = list(deque(handle, maxlen=tail))
    except UnicodeDecodeError as error:
        raise FileAccessError(f"File is not valid UTF-8 text: {path.name}") from error
    except OSError as error:
        raise FileAccessError(f"Cannot read {path.name}: {error.strerror or error}") from error
    return _strip_final_break("".join(window))


def _strip_final_break(text: str) -> str:
    for ending in ("\r\n", "\n", "\r"):
        if text.endswith(ending):
            return text[: -len(ending)]
    return text


def _write_or_translate(path: Path, content: str) -> None:
    try:
        write_atomic(path, content)
    except (OSError, UnicodeError) as error:
        raise translate_write_error(path, error) from error


def _resolve_directory_target(context: WorkspaceContext, requested: str) -> Path:
    """Resolve a directory path whose ancestors may not exist yet."""
    current = PurePosixPath(requested.replace("\\", "/"))
    pending: list[str] = []
    while True:
        try:
            base = context.resolve(str(current))
        except ParentMissingError:
            if current.name in ("", "..") or current.parent == current:
                raise
            pending.append(current.name)
            current = current.parent
            continue
        break
    if base.exists() and not base.is_dir():
        raise FileAccessError(f"Path exists and is not a directory: {current}")
    if any(part in ("", ".", "..") for part in pending):
        raise InvalidArgumentsError(
            f"create_directory path must not traverse missing directories: {requested}"
        )
    return base.joinpath(*reversed(pending))
