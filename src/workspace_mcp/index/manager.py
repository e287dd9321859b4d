"""In-memory file catalog with wholesale rebuild and reference swap."""

from __future__ import annotations

import logging
import time
from collections import Counter
from pathlib import Path
from types import MappingProxyType

from workspace_mcp.config import IndexConfig
from workspace_mcp.index.discovery import build_entries
from workspace_mcp.index.models import IndexSnapshot, IndexStats
from workspace_mcp.index.search import rank_entries
from workspace_mcp.logging import utc_timestamp

logger = logging.getLogger(__name__)

NO_EXTENSION_LABEL = "(no extension)"


class FileIndex:
    """Catalog of workspace files used for fast lookup.

    Readers take one reference to the current snapshot; a rebuild assembles a
    complete new snapshot and then replaces that reference, so a concurrent
    reader sees either the old or the new catalog, never a partial one.
    """

    def __init__(
        self, workspace_root: Path, index_config: IndexConfig, max_file_bytes: int
    ) -> None:
        self._workspace_root = workspace_root.resolve()
        self._index_config = index_config
        self._max_file_bytes = max_file_bytes
        self._snapshot = IndexSnapshot()

    @property
    def enabled(self) -> bool:
        return self._index_config.enabled

    @property
    def snapshot(self) -> IndexSnapshot:
        """Return the current immutable snapshot."""
        return self._snapshot

    def build(self) -> IndexSnapshot:
        """Rebuild the catalog from disk and swap it in."""
        if not self.enabled:
            logger.debug("File indexing disabled")
            return self._snapshot
        logger.info("Building file index for %s", self._workspace_root)
        entries = build_entries(self._workspace_root, self._index_config, self._max_file_bytes)
        snapshot = IndexSnapshot(entries=MappingProxyType(entries), built_at=utc_timestamp())
        self._snapshot = snapshot
        return snapshot

    def refresh(self) -> dict[str, object]:
        """Rebuild and report old and new catalog sizes."""
        started = time.perf_counter()
        previous_count = len(self._snapshot)
        snapshot = self.build()
        return {
            "previous_count": previous_count,
            "current_count": len(snapshot),
            "duration_ms": int((time.perf_counter() - started) * 1000),
            "timestamp": snapshot.built_at,
        }

    def clear(self) -> None:
        """Drop the catalog."""
        self._snapshot = IndexSnapshot()

    def search(self, query: str, limit: int) -> list[str]:
        """Return ranked relative paths for a query."""
        if not self.enabled:
            return []
        snapshot = self._snapshot
        hits = rank_entries(snapshot.entries.values(), query, limit)
        return [hit.entry.path for hit in hits]

    def stats(self) -> IndexStats:
        """Summarize the current catalog."""
        snapshot = self._snapshot
        counts = Counter(
            entry.extension or NO_EXTENSION_LABEL for entry in snapshot.entries.values()
        )
        ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return IndexStats(
            total_files=len(snapshot),
            last_built=snapshot.built_at,
            extension_counts=tuple(ordered),
        )
