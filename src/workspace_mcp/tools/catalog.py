"""File catalog tools: lookup, refresh, and statistics."""

from __future__ import annotations

from workspace_mcp.errors import InvalidArgumentsError
from workspace_mcp.tools.arguments import optional_positive_int, require_string, text_result
from workspace_mcp.tools.registry import ToolHandler
from workspace_mcp.workspace import WorkspaceContext

MAX_STATS_EXTENSIONS = 10
BYTES_PER_MB = 1024 * 1024


def fast_find_file_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        query = require_string(arguments, "file_path", "fast_find_file")
        limit = optional_positive_int(arguments, "limit", "fast_find_file")
        if limit is None:
            limit = context.limits.max_find_results
        if limit > context.limits.max_find_results:
            raise InvalidArgumentsError(
                "fast_find_file limit exceeds max_find_results "
                f"({context.limits.max_find_results}).",
                hint="Reduce limit or raise the configured max_find_results.",
            )
        if not context.file_index.enabled:
            return text_result("File indexing is disabled")
        paths = context.file_index.search(query, limit)
        if not paths:
            return text_result("No files found matching the search criteria")
        return text_result("\n".join(paths))

    return handler


def refresh_file_index_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        if not context.file_index.enabled:
            return text_result("File indexing is disabled")
        report = context.file_index.refresh()
        return text_result(
            f"File index refreshed: {report['previous_count']} → {report['current_count']} files "
            f"({report['duration_ms']} ms)"
        )

    return handler


def file_index_stats_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        if not context.file_index.enabled:
            return text_result("File indexing is disabled")
        stats = context.file_index.stats()
        max_mb = context.limits.max_file_bytes / BYTES_PER_MB
        lines = [
            "File Index Statistics:",
            f"• Total files indexed: {stats.total_files}",
            f"• Last built: {stats.last_built or 'never'}",
            "• Index enabled: true",
            f"• Max file size: {max_mb:g}MB",
            "",
            "File type distribution:",
        ]
        lines.extend(
            f"• {extension}: {count} files"
            for extension, count in stats.extension_counts[:MAX_STATS_EXTENSIONS]
        )
        return text_result("\n".join(lines))

    return handler
