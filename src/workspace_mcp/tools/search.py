"""Content grep and name-pattern search over the workspace catalog."""

from __future__ import annotations

import fnmatch
import logging
from pathlib import PurePosixPath

from workspace_mcp.editing import read_text
from workspace_mcp.errors import WorkspaceError
from workspace_mcp.index import build_entries
from workspace_mcp.tools.arguments import (
    optional_bool,
    optional_string,
    require_string,
    text_result,
)
from workspace_mcp.tools.registry import ToolHandler
from workspace_mcp.workspace import WorkspaceContext

logger = logging.getLogger(__name__)

MAX_SEARCH_FILES = 200
MAX_MATCHES_PER_FILE = 5


def _name_matches(name: str, pattern: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return fnmatch.fnmatchcase(name, pattern)
    return fnmatch.fnmatchcase(name.lower(), pattern.lower())


def search_lines(text: str, query: str, case_sensitive: bool, limit: int) -> list[tuple[int, str]]:
    """Return up to limit (line number, stripped line) pairs containing query."""
    needle = query if case_sensitive else query.lower()
    hits: list[tuple[int, str]] = []
    for number, line in enumerate(text.split("\n"), start=1):
        haystack = line if case_sensitive else line.lower()
        if needle in haystack:
            hits.append((number, line.strip()))
            if len(hits) >= limit:
                break
    return hits


def search_content_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        query = require_string(arguments, "query", "search_content")
        file_pattern = optional_string(arguments, "file_pattern", "search_content") or "*"
        case_sensitive = optional_bool(
            arguments, "case_sensitive", "search_content", default=False
        )
        if not context.file_index.enabled:
            return text_result("File indexing is disabled")

        results: list[str] = []
        searched = 0
        for relative_path, entry in sorted(context.file_index.snapshot.entries.items()):
            if searched >= MAX_SEARCH_FILES:
                break
            if file_pattern != "*" and not _name_matches(entry.name, file_pattern, case_sensitive):
                continue
            try:
                text = read_text(context.root / relative_path)
            except WorkspaceError as error:
                logger.debug("Error searching %s: %s", relative_path, error.message)
                continue
            searched += 1
            hits = search_lines(text, query, case_sensitive, MAX_MATCHES_PER_FILE)
            results.extend(f"{relative_path}:{number}: {line}" for number, line in hits)
        return text_result("\n".join(results) or "No matches found")

    return handler


def find_files_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        pattern = require_string(arguments, "pattern", "find_files")
        fuzzy = optional_bool(arguments, "fuzzy_match", "find_files", default=True)
        case_sensitive = optional_bool(arguments, "case_sensitive", "find_files", default=False)
        if fuzzy:
            if not context.file_index.enabled:
                return text_result("File indexing is disabled")
            paths = context.file_index.search(pattern, context.limits.max_find_results)
        else:
            # Fresh walk with the catalog filters.
            entries = build_entries(
                context.root, context.index_config, context.limits.max_file_bytes
            )
            glob = f"*{pattern}*"
            paths = sorted(
                path
                for path in entries
                if _name_matches(PurePosixPath(path).name, glob, case_sensitive)
            )
        return text_result("\n".join(paths) or "No files found")

    return handler
