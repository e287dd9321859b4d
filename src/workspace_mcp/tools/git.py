"""Read-only version-control tools."""

from __future__ import annotations

from workspace_mcp.errors import InvalidArgumentsError, VcsCommandError
from workspace_mcp.tools.arguments import (
    optional_bool,
    optional_positive_int,
    optional_string,
    require_string,
    text_result,
)
from workspace_mcp.tools.registry import ToolHandler
from workspace_mcp.vcs import run_git_command
from workspace_mcp.workspace import WorkspaceContext


def git_status_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        output = run_git_command(["status", "--porcelain"], context.root)
        return text_result(output or "Working tree clean")

    return handler


def git_diff_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        args = ["diff"]
        if optional_bool(arguments, "staged", "git_diff", default=False):
            args.append("--cached")
        file_path = optional_string(arguments, "file_path", "git_diff")
        if file_path is not None:
            resolved = context.resolve(file_path)
            args.extend(["--", context.relative(resolved)])
        output = run_git_command(args, context.root)
        return text_result(output or "No changes")

    return handler


def git_log_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        args = ["log"]
        if optional_bool(arguments, "oneline", "git_log", default=False):
            args.append("--oneline")
        limit = optional_positive_int(arguments, "limit", "git_log")
        if limit is not None:
            args.append(f"-{limit}")
        output = run_git_command(args, context.root)
        return text_result(output or "No commits")

    return handler


def git_current_branch_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(_: dict[str, object]) -> dict[str, object]:
        branch = run_git_command(["rev-parse", "--abbrev-ref", "HEAD"], context.root)
        last_commit = run_git_command(["log", "-1", "--oneline"], context.root)
        return text_result(f"Current branch: {branch}\nLast commit: {last_commit}")

    return handler


def git_list_branches_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        include_remote = optional_bool(
            arguments, "include_remote", "git_list_branches", default=True
        )
        text = "Local branches:\n" + run_git_command(["branch"], context.root)
        if include_remote:
            try:
                remote = run_git_command(["branch", "-r"], context.root)
            except VcsCommandError:
                text += "\n\nRemote branches: (no remotes configured)"
            else:
                if remote:
                    text += "\n\nRemote branches:\n" + remote
        return text_result(text)

    return handler


def git_show_commit_handler(context: WorkspaceContext) -> ToolHandler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        commit = require_string(arguments, "commit_hash", "git_show_commit")
        if commit.startswith("-"):
            raise InvalidArgumentsError(
                "git_show_commit commit_hash must be a commit reference, not an option."
            )
        args = ["show"]
        if not optional_bool(arguments, "show_diff", "git_show_commit", default=True):
            args.append("--no-patch")
        args.append(commit)
        return text_result(run_git_command(args, context.root))

    return handler
