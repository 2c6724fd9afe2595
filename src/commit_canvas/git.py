"""Thin wrapper around the git executable: subcommands and fast-import."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from commit_canvas.errors import ConfigurationError, GitCommandError, InternalStreamError
from commit_canvas.logging import get_logger, redact
from commit_canvas.models import GitIdentity

logger = get_logger("git")

Runner = Callable[..., subprocess.CompletedProcess]

# Speed-ups for a throwaway repository; failures here are not fatal.
FAST_REPO_SETTINGS = (
    ("commit.gpgsign", "false"),
    ("gc.auto", "0"),
    ("core.autocrlf", "false"),
)


def _default_runner(
    cmd: Sequence[str],
    *,
    cwd: Path | None = None,
    input: bytes | None = None,
) -> subprocess.CompletedProcess:
    return subprocess.run(
        list(cmd),
        cwd=str(cwd) if cwd is not None else None,
        input=input,
        env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
        capture_output=True,
        check=False,
    )


def _decode(value: bytes | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


class GitRunner:
    """Runs git subcommands with an explicit, injectable executable path."""

    def __init__(self, git_path: str = "git", runner: Runner | None = None):
        self.git_path = git_path or "git"
        self._runner = runner or _default_runner

    def run(self, args: Sequence[str], cwd: Path | None = None, input: bytes | None = None) -> str:
        """Run ``git <args>`` and return stdout, raising on failure."""
        cmd = [self.git_path, *args]
        logger.debug("git %s", redact(" ".join(args)))
        try:
            proc = self._runner(cmd, cwd=cwd, input=input)
        except (FileNotFoundError, PermissionError, NotADirectoryError) as exc:
            raise ConfigurationError(f"Cannot run git executable {self.git_path!r}: {exc}") from exc
        if proc.returncode != 0:
            raise GitCommandError(
                [redact(arg) for arg in args],
                proc.returncode,
                redact(_decode(proc.stderr).strip()),
            )
        return _decode(proc.stdout)

    def version(self) -> str:
        """Return ``git --version`` output; ``ConfigurationError`` when unusable."""
        try:
            return self.run(["--version"]).strip()
        except GitCommandError as exc:
            raise ConfigurationError(f"{self.git_path!r} is not a usable git executable: {exc}") from exc

    def init_repository(self, repo_path: Path, identity: GitIdentity) -> None:
        self.run(["init", "--quiet"], cwd=repo_path)
        self.run(["config", "user.name", identity.name], cwd=repo_path)
        self.run(["config", "user.email", identity.email], cwd=repo_path)
        for key, value in FAST_REPO_SETTINGS:
            try:
                self.run(["config", key, value], cwd=repo_path)
            except GitCommandError as exc:
                logger.warning("could not set %s=%s: %s", key, value, exc.stderr)

    def fast_import(self, repo_path: Path, stream: bytes) -> None:
        """Feed a whole history to ``git fast-import`` in one invocation."""
        try:
            self.run(["fast-import", "--quiet"], cwd=repo_path, input=stream)
        except GitCommandError as exc:
            raise InternalStreamError(f"git fast-import rejected the stream: {exc.stderr}") from exc

    def checkout(self, repo_path: Path, branch: str) -> None:
        self.run(["checkout", "-f", branch], cwd=repo_path)

    def set_remote(self, repo_path: Path, url: str, name: str = "origin") -> None:
        """Point ``name`` at ``url``, adding the remote when it does not exist."""
        try:
            self.run(["remote", "add", name, url], cwd=repo_path)
        except GitCommandError:
            self.run(["remote", "set-url", name, url], cwd=repo_path)

    def push(self, repo_path: Path, refspec: str, *, force: bool = False, remote: str = "origin") -> None:
        flag = "-f" if force else "-u"
        self.run(["push", flag, remote, refspec], cwd=repo_path)

    def delete_remote_branch(self, repo_path: Path, branch: str, remote: str = "origin") -> None:
        self.run(["push", remote, "--delete", branch], cwd=repo_path)


def check_git(git_path: str = "git") -> str:
    """Validate a git executable path and return its version string."""
    candidate = Path(git_path).expanduser()
    if git_path and Path(git_path).name != git_path and not candidate.exists():
        raise ConfigurationError(f"Git executable not found: {candidate}")
    return GitRunner(git_path).version()
