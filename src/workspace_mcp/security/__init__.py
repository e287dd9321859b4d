"""Sandboxing and path safety primitives."""

from .paths import ResolvedPath, expand_home, is_within, resolve_workspace_path
from .policy import (
    DEFAULT_MAX_FILE_BYTES,
    SecurityLimits,
    enforce_file_size_limit,
    enforce_line_window,
)

__all__ = [
    "DEFAULT_MAX_FILE_BYTES",
    "ResolvedPath",
    "SecurityLimits",
    "enforce_file_size_limit",
    "enforce_line_window",
    "expand_home",
    "is_within",
    "resolve_workspace_path",
]
