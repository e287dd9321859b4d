"""Error taxonomy shared by every workspace operation."""

from __future__ import annotations


class WorkspaceError(Exception):
    """Base class for labeled, caller-facing workspace failures."""

    code = "WORKSPACE_ERROR"

    def __init__(self, message: str, hint: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class AccessDeniedError(WorkspaceError):
    """Raised when a path resolves outside the workspace root."""

    code = "ACCESS_DENIED"


class ParentMissingError(WorkspaceError):
    """Raised when a new file's parent directory does not exist."""

    code = "PARENT_MISSING"


class InvalidRangeError(WorkspaceError):
    """Raised when a requested line range does not fit the file."""

    code = "INVALID_RANGE"


class NoMatchFoundError(WorkspaceError):
    """Raised when a pattern edit's old text cannot be located."""

    code = "NO_MATCH_FOUND"

    def __init__(self, old_text: str) -> None:
        super().__init__(
            f"Could not find exact match for edit:\n{old_text}",
            hint="Re-read the file and retry with text copied from its current content.",
        )
        self.old_text = old_text


class CorruptionDetectedError(WorkspaceError):
    """Raised when post-write verification failed and the original was restored."""

    code = "CORRUPTION_DETECTED"


class CriticalRecoveryFailureError(WorkspaceError):
    """Raised when verification failed and restoring the original also failed."""

    code = "CRITICAL_RECOVERY_FAILURE"

    def __init__(self, write_error: str, restore_error: str) -> None:
        super().__init__(
            "CRITICAL: File write failed AND backup restoration failed! "
            f"Manual recovery needed. Write failure: {write_error}. "
            f"Restore failure: {restore_error}",
            hint="Inspect the file by hand; the pre-edit content could not be written back.",
        )
        self.write_error = write_error
        self.restore_error = restore_error


class InvalidArgumentsError(WorkspaceError):
    """Raised when tool arguments are missing or malformed."""

    code = "INVALID_PARAMS"


class FileAccessError(WorkspaceError):
    """Raised when an OS-level file operation fails inside the workspace."""

    code = "FILE_ACCESS"


class VcsCommandError(WorkspaceError):
    """Raised when a version-control command is refused or fails."""

    code = "VCS_ERROR"
