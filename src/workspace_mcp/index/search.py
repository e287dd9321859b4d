"""Deterministic scored lookup over catalog entries."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from workspace_mcp.index.models import FileIndexEntry

EXACT_PATH_SCORE = 1000
EXACT_NAME_SCORE = 900
PATH_CONTAINS_SCORE = 500
PATH_LENGTH_BONUS = 100
NAME_CONTAINS_SCORE = 400
NAME_LENGTH_BONUS = 50


@dataclass(slots=True, frozen=True)
class SearchHit:
    """Scored catalog entry."""

    entry: FileIndexEntry
    score: int


def score_entry(entry: FileIndexEntry, query: str) -> int:
    """Score one entry against a lowercased query; 0 means no match."""
    path = entry.path.lower()
    name = entry.name.lower()
    if path == query:
        return EXACT_PATH_SCORE
    if name == query:
        return EXACT_NAME_SCORE
    if query in path:
        return PATH_CONTAINS_SCORE + max(0, PATH_LENGTH_BONUS - len(entry.path))
    if query in name:
        return NAME_CONTAINS_SCORE + max(0, NAME_LENGTH_BONUS - len(entry.name))
    return 0


def rank_entries(entries: Iterable[FileIndexEntry], query: str, limit: int) -> list[SearchHit]:
    """Return up to limit hits by score, then priority, then name, then shorter path."""
    normalized = query.replace("\\", "/").strip().lower()
    if not normalized or limit < 1:
        return []
    hits: list[SearchHit] = []
    for entry in entries:
        score = score_entry(entry, normalized)
        if score > 0:
            hits.append(SearchHit(entry=entry, score=score))
    hits.sort(
        key=lambda hit: (
            -hit.score,
            hit.entry.priority,
            hit.entry.name,
            len(hit.entry.path),
            hit.entry.path,
        )
    )
    return hits[:limit]
