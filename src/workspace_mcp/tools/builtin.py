"""Built-in tool set and the input schemas advertised for it."""

from __future__ import annotations

from workspace_mcp.tools import catalog, edits, filesystem, git, search
from workspace_mcp.tools.registry import ToolRegistry
from workspace_mcp.workspace import WorkspaceContext


def _schema(
    properties: dict[str, dict[str, object]],
    required: tuple[str, ...] = (),
) -> dict[str, object]:
    schema: dict[str, object] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = list(required)
    return schema


_PATH = {"type": "string", "description": "Path relative to the workspace root"}
_STRING = {"type": "string"}
_INTEGER = {"type": "integer", "minimum": 1}
_BOOLEAN = {"type": "boolean"}
_LINE_RANGE = {
    "path": _PATH,
    "line_start": {"type": "integer", "description": "First line to replace (1-based)"},
    "line_end": {
        "type": "integer",
        "description": "Last line to replace, inclusive (defaults to line_start)",
    },
    "new_content": {"type": "string", "description": "Replacement text, lines split on \\n"},
}


def register_builtin_tools(registry: ToolRegistry, context: WorkspaceContext) -> None:
    """Register every built-in tool in deterministic order."""
    registry.register(
        "read_file",
        filesystem.read_file_handler(context),
        "Read a file, or only its first (head) or last (tail) N lines.",
        _schema({"path": _PATH, "head": _INTEGER, "tail": _INTEGER}, ("path",)),
    )
    registry.register(
        "write_file",
        filesystem.write_file_handler(context),
        "Create a file, or atomically replace an existing one.",
        _schema({"path": _PATH, "content": _STRING}, ("path", "content")),
    )
    registry.register(
        "append_to_file",
        filesystem.append_to_file_handler(context),
        "Append content to a file, optionally separated by a line break.",
        _schema(
            {"path": _PATH, "content": _STRING, "add_newline": _BOOLEAN},
            ("path", "content"),
        ),
    )
    registry.register(
        "create_directory",
        filesystem.create_directory_handler(context),
        "Create a directory, including missing parents.",
        _schema({"path": _PATH}, ("path",)),
    )
    registry.register(
        "delete_file",
        filesystem.delete_file_handler(context),
        "Delete a file or a directory tree.",
        _schema({"path": _PATH}, ("path",)),
    )
    registry.register(
        "list_files",
        filesystem.list_files_handler(context),
        "List one directory level, skipping hidden and build directories.",
        _schema({"path": _PATH, "include_hidden": _BOOLEAN}),
    )
    registry.register(
        "edit_file",
        edits.edit_file_handler(context),
        "Replace a line range; validates the range, preserves line endings, "
        "verifies the write, and restores the file on corruption.",
        _schema(_LINE_RANGE, ("path", "line_start", "new_content")),
    )
    registry.register(
        "preview_edit",
        edits.preview_edit_handler(context),
        "Show the diff edit_file would produce without writing.",
        _schema(_LINE_RANGE, ("path", "line_start", "new_content")),
    )
    registry.register(
        "edit_file_advanced",
        edits.edit_file_advanced_handler(context),
        "Apply a batch of oldText/newText edits; all succeed or none are written.",
        _schema(
            {
                "path": _PATH,
                "edits": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {"oldText": _STRING, "newText": _STRING},
                        "required": ["oldText", "newText"],
                    },
                },
                "dryRun": _BOOLEAN,
            },
            ("path", "edits"),
        ),
    )
    registry.register(
        "replace_in_file",
        edits.replace_in_file_handler(context),
        "Replace the first match of search_text with replace_text.",
        _schema(
            {"path": _PATH, "search_text": _STRING, "replace_text": _STRING},
            ("path", "search_text", "replace_text"),
        ),
    )
    registry.register(
        "fast_find_file",
        catalog.fast_find_file_handler(context),
        "Find files by name or path fragment using the file index.",
        _schema({"file_path": _STRING, "limit": _INTEGER}, ("file_path",)),
    )
    registry.register(
        "find_files",
        search.find_files_handler(context),
        "Find files by name; fuzzy ranking via the index, or a *pattern* glob on names.",
        _schema(
            {"pattern": _STRING, "fuzzy_match": _BOOLEAN, "case_sensitive": _BOOLEAN},
            ("pattern",),
        ),
    )
    registry.register(
        "search_content",
        search.search_content_handler(context),
        "Search indexed files for lines containing text, optionally filtered by name glob.",
        _schema(
            {"query": _STRING, "file_pattern": _STRING, "case_sensitive": _BOOLEAN},
            ("query",),
        ),
    )
    registry.register(
        "refresh_file_index",
        catalog.refresh_file_index_handler(context),
        "Rebuild the file index from disk.",
        _schema({}),
    )
    registry.register(
        "file_index_stats",
        catalog.file_index_stats_handler(context),
        "Show file index size, build time, and extension distribution.",
        _schema({}),
    )
    registry.register(
        "git_status",
        git.git_status_handler(context),
        "Show working tree status (porcelain).",
        _schema({}),
    )
    registry.register(
        "git_diff",
        git.git_diff_handler(context),
        "Show unstaged or staged changes, optionally for one file.",
        _schema({"staged": _BOOLEAN, "file_path": _PATH}),
    )
    registry.register(
        "git_log",
        git.git_log_handler(context),
        "Show commit history.",
        _schema({"oneline": _BOOLEAN, "limit": _INTEGER}),
    )
    registry.register(
        "git_current_branch",
        git.git_current_branch_handler(context),
        "Show the current branch and its last commit.",
        _schema({}),
    )
    registry.register(
        "git_list_branches",
        git.git_list_branches_handler(context),
        "List local branches, and remote branches unless include_remote is false.",
        _schema({"include_remote": _BOOLEAN}),
    )
    registry.register(
        "git_show_commit",
        git.git_show_commit_handler(context),
        "Show one commit's details, with its diff unless show_diff is false.",
        _schema({"commit_hash": _STRING, "show_diff": _BOOLEAN}, ("commit_hash",)),
    )
