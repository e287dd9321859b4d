"""Workspace-scoped path resolution with symlink-aware containment checks."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Final, NewType

from workspace_mcp.errors import AccessDeniedError, ParentMissingError

WINDOWS_ABSOLUTE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:[\\/]")

ResolvedPath = NewType("ResolvedPath", Path)


def _normalize_input(candidate: str) -> str:
    """Normalize separators so agent-supplied Windows paths behave like POSIX ones."""
    if WINDOWS_ABSOLUTE_PATTERN.match(candidate):
        return candidate
    return candidate.replace("\\", "/")


def expand_home(candidate: str) -> str:
    """Expand a leading ``~`` to the invoking user's home directory."""
    if candidate == "~" or candidate.startswith("~/"):
        return str(Path.home()) + candidate[1:]
    return candidate


def is_within(root: str, candidate: str) -> bool:
    """Return True when candidate equals root or is one of its descendants."""
    try:
        relative = os.path.relpath(candidate, root)
    except ValueError:
        # Different drives on Windows.
        return False
    if os.path.isabs(relative):
        return False
    return relative != os.pardir and not relative.startswith(os.pardir + os.sep)


def resolve_workspace_path(workspace_root: Path, requested_path: str) -> ResolvedPath:
    """Resolve a user-supplied path and prove it stays inside the workspace.

    Runs before every filesystem touch and is never cached. Existing targets
    are checked through their real (symlink-free) path; targets that do not
    exist yet are checked through their parent directory's real path.
    """
    lexical_root = os.path.abspath(workspace_root)
    real_root = os.path.realpath(lexical_root)

    expanded = expand_home(_normalize_input(requested_path))
    if os.path.isabs(expanded) or WINDOWS_ABSOLUTE_PATTERN.match(expanded):
        absolute = os.path.abspath(expanded)
    else:
        absolute = os.path.abspath(os.path.join(lexical_root, expanded))

    if not is_within(lexical_root, absolute) and not is_within(real_root, absolute):
        raise AccessDeniedError(
            f"Access denied - path outside workspace: {absolute} not in {lexical_root}",
            hint="Use a path located under the workspace root.",
        )

    try:
        real_path = os.path.realpath(absolute, strict=True)
    except FileNotFoundError:
        return _resolve_new_file(absolute, real_root)
    except NotADirectoryError as error:
        raise ParentMissingError(
            f"Parent path is not a directory: {os.path.dirname(absolute)}",
            hint="A file sits where a directory is expected; choose another path.",
        ) from error
    except OSError as error:
        raise AccessDeniedError(
            f"Access denied - path cannot be resolved: {absolute} ({error.strerror})",
            hint="Use a path located under the workspace root.",
        ) from error

    if not is_within(real_root, real_path):
        raise AccessDeniedError(
            f"Access denied - symlink target outside workspace: {real_path} not in {real_root}",
            hint="Symlinks may only point at locations inside the workspace root.",
        )
    return ResolvedPath(Path(real_path))


def _resolve_new_file(absolute: str, real_root: str) -> ResolvedPath:
    parent = os.path.dirname(absolute)
    try:
        real_parent = os.path.realpath(parent, strict=True)
    except OSError as error:
        raise ParentMissingError(
            f"Parent directory does not exist: {parent}",
            hint="Create the directory first with create_directory.",
        ) from error
    if not is_within(real_root, real_parent):
        raise AccessDeniedError(
            f"Access denied - parent directory outside workspace: {real_parent} not in {real_root}",
            hint="Use a path located under the workspace root.",
        )
    if not os.path.isdir(real_parent):
        raise ParentMissingError(
            f"Parent path is not a directory: {parent}",
            hint="A file sits where a directory is expected; choose another path.",
        )
    return ResolvedPath(Path(real_parent) / os.path.basename(absolute))
