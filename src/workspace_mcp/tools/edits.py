"""Editing tools backed by the line editor and the pattern editor."""

from __future__ import annotations

from workspace_mcp.editing import EditOperation
from workspace_mcp.errors import InvalidArgumentsError
from workspace_mcp.tools.arguments import (
    optional_bool,
    optional_int,
    require_string,
    require_text,
    text_result,
)
from workspace_mcp.tools.registry import ToolHandler
from workspace_mcp.workspace import WorkspaceContext


def edit_file_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        path_value = require_string(arguments, "path", "edit_file")
        line_start, line_end = _line_range(arguments, "edit_file")
        new_content = require_text(arguments, "new_content", "edit_file")
        resolved = context.resolve(path_value)
        result = context.line_editor.edit(
            resolved, line_start, line_end, new_content, label=context.relative(resolved)
        )
        return text_result(result.diff + result.summary)

    return handler


def preview_edit_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        path_value = require_string(arguments, "path", "preview_edit")
        line_start, line_end = _line_range(arguments, "preview_edit")
        new_content = require_text(arguments, "new_content", "preview_edit")
        resolved = context.resolve(path_value)
        preview = context.line_editor.preview(
            resolved, line_start, line_end, new_content, label=context.relative(resolved)
        )
        return text_result(preview)

    return handler


def edit_file_advanced_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        path_value = require_string(arguments, "path", "edit_file_advanced")
        edits = _edit_operations(arguments.get("edits"))
        dry_run = optional_bool(arguments, "dryRun", "edit_file_advanced", default=False)
        resolved = context.resolve(path_value)
        result = context.pattern_editor.apply_edits(
            resolved, edits, dry_run=dry_run, label=context.relative(resolved)
        )
        action = "PREVIEW" if result.dry_run else "Applied"
        return text_result(f"{action} {result.applied} edit(s):\n\n{result.diff}")

    return handler


def replace_in_file_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        path_value = require_string(arguments, "path", "replace_in_file")
        search_text = require_string(arguments, "search_text", "replace_in_file")
        replace_text = require_text(arguments, "replace_text", "replace_in_file")
        resolved = context.resolve(path_value)
        result = context.pattern_editor.apply_edits(
            resolved,
            [EditOperation(old_text=search_text, new_text=replace_text)],
            label=context.relative(resolved),
        )
        return text_result(result.diff)

    return handler


def _line_range(arguments: dict[str, object], tool: str) -> tuple[int, int | None]:
    line_start = optional_int(arguments, "line_start", tool)
    if line_start is None:
        raise InvalidArgumentsError(f"{tool} line_start is required.")
    return line_start, optional_int(arguments, "line_end", tool)


def _edit_operations(value: object) -> list[EditOperation]:
    if not isinstance(value, list) or not value:
        raise InvalidArgumentsError("edit_file_advanced edits must be a non-empty list.")
    operations: list[EditOperation] = []
    for position, item in enumerate(value, start=1):
        if not isinstance(item, dict):
            raise InvalidArgumentsError(f"edit_file_advanced edits[{position}] must be an object.")
        old_text = item.get("oldText")
        new_text = item.get("newText")
        if not isinstance(old_text, str) or not old_text:
            raise InvalidArgumentsError(
                f"edit_file_advanced edits[{position}].oldText must be a non-empty string."
            )
        if not isinstance(new_text, str):
            raise InvalidArgumentsError(
                f"edit_file_advanced edits[{position}].newText must be a string."
            )
        operations.append(EditOperation(old_text=old_text, new_text=new_text))
    return operations
