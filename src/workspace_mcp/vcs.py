"""Read-only git command runner."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from workspace_mcp.errors import VcsCommandError

ALLOWED_GIT_COMMANDS = ("status", "diff", "log", "branch", "show", "rev-parse")
BLOCKED_GIT_COMMANDS = (
    "add",
    "commit",
    "push",
    "pull",
    "merge",
    "rebase",
    "reset",
    "checkout",
    "switch",
    "restore",
    "clean",
    "rm",
)
DEFAULT_TIMEOUT_SECONDS = 30.0


def run_git_command(
    args: Sequence[str],
    workspace_root: Path,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> str:
    """Run an allow-listed git subcommand in the workspace and return stdout."""
    if not args:
        raise VcsCommandError("No git command given.")
    command = args[0]
    if command in BLOCKED_GIT_COMMANDS:
        raise VcsCommandError(
            f"Git command '{command}' is not allowed - this server only supports read operations",
            hint=f"Allowed commands: {', '.join(ALLOWED_GIT_COMMANDS)}",
        )
    if command not in ALLOWED_GIT_COMMANDS:
        raise VcsCommandError(
            f"Git command '{command}' is not in the allowed list.",
            hint=f"Allowed commands: {', '.join(ALLOWED_GIT_COMMANDS)}",
        )
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=workspace_root,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as error:
        raise VcsCommandError("Failed to run git command: git executable not found.") from error
    except subprocess.TimeoutExpired as error:
        raise VcsCommandError(f"Git command timed out after {timeout:g}s.") from error
    if completed.returncode != 0:
        output = (completed.stderr or completed.stdout).strip()
        raise VcsCommandError(
            f"Git command failed (exit code {completed.returncode}): {output}"
        )
    return completed.stdout.strip()
