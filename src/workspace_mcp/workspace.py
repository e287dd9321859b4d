"""Explicit per-workspace service object shared by every operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from workspace_mcp.config import IndexConfig, ServerConfig
from workspace_mcp.editing import PatternEditor, SafeLineEditor
from workspace_mcp.index import FileIndex
from workspace_mcp.security import ResolvedPath, SecurityLimits, resolve_workspace_path


@dataclass(slots=True, frozen=True)
class WorkspaceContext:
    """Immutable workspace root and limits, plus the components bound to them."""

    root: Path
    limits: SecurityLimits = field(default_factory=SecurityLimits)
    index_config: IndexConfig = field(default_factory=IndexConfig)
    line_editor: SafeLineEditor = field(default_factory=SafeLineEditor)
    pattern_editor: PatternEditor = field(default_factory=PatternEditor)
    file_index: FileIndex = field(init=False)

    def __post_init__(self) -> None:
        root = self.root.resolve()
        object.__setattr__(self, "root", root)
        object.__setattr__(
            self,
            "file_index",
            FileIndex(root, self.index_config, self.limits.max_file_bytes),
        )

    @classmethod
    def from_config(cls, config: ServerConfig) -> WorkspaceContext:
        return cls(root=config.workspace_root, limits=config.limits, index_config=config.index)

    def resolve(self, requested_path: str) -> ResolvedPath:
        """Resolve a caller path through the containment check."""
        return resolve_workspace_path(self.root, requested_path)

    def relative(self, path: Path) -> str:
        """Return a workspace-relative POSIX label for a resolved path."""
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()
