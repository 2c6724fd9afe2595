"""Exception hierarchy shared by generation and publishing."""

from __future__ import annotations


class CommitCanvasError(Exception):
    """Base class for every error raised by commit-canvas."""


class ValidationError(CommitCanvasError, ValueError):
    """Caller input is unusable (ratios, contributions, language identifiers)."""


class ConfigurationError(CommitCanvasError):
    """The git executable is missing or cannot be run."""


class GitCommandError(CommitCanvasError):
    """A git subcommand exited with a non-zero status."""

    def __init__(self, args: list[str], returncode: int, stderr: str) -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"git {' '.join(self.command)} failed ({returncode}): {stderr}")


class InternalStreamError(CommitCanvasError):
    """A fast-import stream broke its own invariants or was rejected by git."""


class RemoteApiError(CommitCanvasError):
    """The hosting API answered with an unexpected status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RemoteAuthError(RemoteApiError):
    """The credential is expired, revoked, or missing the repository scope."""


class RemoteConflictError(CommitCanvasError):
    """A normal push was rejected; the remote was left untouched."""


class DestructiveRecoveryFailure(CommitCanvasError):
    """The force-recovery re-push was rejected as well."""
