"""Typed models for the in-memory file catalog."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType


class FilePriority(IntEnum):
    """Search tie-break rank; lower numbers sort first."""

    CRITICAL = 1
    CODE = 2
    CONFIG = 3
    DOCS = 4
    OTHER = 5


@dataclass(slots=True, frozen=True)
class FileIndexEntry:
    """Represents one file tracked by the catalog."""

    path: str
    name: str
    size: int
    mtime_ms: int
    priority: FilePriority
    extension: str


def _empty_entries() -> Mapping[str, FileIndexEntry]:
    return MappingProxyType({})


@dataclass(slots=True, frozen=True)
class IndexSnapshot:
    """Immutable catalog keyed by relative path, replaced wholesale on rebuild."""

    entries: Mapping[str, FileIndexEntry] = field(default_factory=_empty_entries)
    built_at: str | None = None

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(slots=True, frozen=True)
class IndexStats:
    """Summary of the current catalog for status reporting."""

    total_files: int
    last_built: str | None
    extension_counts: tuple[tuple[str, int], ...]
