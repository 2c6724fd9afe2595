"""Publish a generated repository to GitHub with one bounded force-recovery path."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from enum import Enum
from functools import partial
from pathlib import Path

from commit_canvas.config import DEFAULT_WEB_BASE_URL
from commit_canvas.errors import (
    CommitCanvasError,
    DestructiveRecoveryFailure,
    GitCommandError,
    RemoteAuthError,
    RemoteConflictError,
)
from commit_canvas.git import GitRunner
from commit_canvas.github import GitHubClient, push_url, repository_url
from commit_canvas.logging import get_logger, redact
from commit_canvas.models import PublishRequest, PublishResult
from commit_canvas.progress import ProgressCallback, emit

logger = get_logger("publisher")

DEFAULT_BRANCH = "main"
CONFLICT_MESSAGE = (
    "Push rejected: the remote branch likely already has content. "
    "Retry with force to overwrite it."
)
PROTECTED_MESSAGE = (
    "Force push failed after deleting the remote branch; "
    "check the branch protection rules of the target repository."
)


class PublishState(str, Enum):
    IDLE = "idle"
    VERIFYING_CREDENTIAL = "verifying_credential"
    RESOLVING_REMOTE = "resolving_remote"
    REMOTE_CONFIGURED = "remote_configured"
    PUSHING = "pushing"
    SUCCEEDED = "succeeded"
    REJECTED = "rejected"
    DELETING_REMOTE_BRANCH = "deleting_remote_branch"
    RE_PUSHING = "re_pushing"
    FINAL_FAILURE = "final_failure"
    CLEANING_UP = "cleaning_up"


class Publisher:
    """Drives one publish call from credential check to cleanup.

    At most two pushes and one remote branch deletion happen per call, and the
    local repository directory is removed exactly once on every exit path.
    """

    def __init__(
        self,
        client: GitHubClient,
        git: GitRunner,
        token: str,
        *,
        web_base_url: str = DEFAULT_WEB_BASE_URL,
        progress_callback: ProgressCallback | None = None,
        remove_tree: Callable[[Path], None] = partial(shutil.rmtree, ignore_errors=True),
    ):
        self.client = client
        self.git = git
        self._token = token
        self.web_base_url = web_base_url
        self.progress_callback = progress_callback
        self.remove_tree = remove_tree
        self.history: list[PublishState] = []

    @property
    def state(self) -> PublishState:
        return self.history[-1] if self.history else PublishState.IDLE

    def _enter(self, state: PublishState) -> None:
        logger.debug("publish state -> %s", state.value)
        self.history.append(state)

    def publish(self, request: PublishRequest) -> PublishResult:
        self.history = [PublishState.IDLE]
        logger.info(
            "publishing %s (new=%s private=%s force=%s commits=%d)",
            request.repo_name,
            request.is_new_repo,
            request.private,
            request.force,
            request.commit_count,
        )
        try:
            return self._publish(request)
        except CommitCanvasError as exc:
            message = redact(f"Publish failed during {self.state.value}: {exc}")
            logger.error(message)
            return PublishResult(success=False, message=message)
        finally:
            self._enter(PublishState.CLEANING_UP)
            self.remove_tree(request.repo_path)

    def _publish(self, request: PublishRequest) -> PublishResult:
        self._enter(PublishState.VERIFYING_CREDENTIAL)
        try:
            user = self.client.verify_token()
        except RemoteAuthError as exc:
            return PublishResult(success=False, message=f"Token verification failed: {exc}")

        self._enter(PublishState.RESOLVING_REMOTE)
        target_branch = request.branch.strip()
        if request.is_new_repo:
            emit(self.progress_callback, f"creating repository {request.repo_name}")
            repo = self.client.create_repository(request.repo_name, private=request.private)
            repo_name = repo.full_name or repo.name
            repo_url = repo.html_url
            target_branch = target_branch or repo.default_branch or DEFAULT_BRANCH
        else:
            repo_name = request.repo_name
            repo_url = repository_url(repo_name, user.login, self.web_base_url)
            target_branch = target_branch or DEFAULT_BRANCH

        self.git.set_remote(request.repo_path, push_url(repo_name, user.login, self._token, self.web_base_url))
        self._enter(PublishState.REMOTE_CONFIGURED)

        refspec = f"{request.local_branch}:{target_branch}"
        try:
            self._push(request, refspec, target_branch)
        except RemoteConflictError as exc:
            return PublishResult(success=False, message=str(exc), repo_url=repo_url)
        except DestructiveRecoveryFailure as exc:
            return PublishResult(success=False, message=str(exc), repo_url=repo_url)

        self._enter(PublishState.SUCCEEDED)
        message = f"Pushed {request.commit_count} commits to {repo_name}"
        emit(self.progress_callback, message)
        return PublishResult(success=True, message=message, repo_url=repo_url)

    def _push(self, request: PublishRequest, refspec: str, target_branch: str) -> None:
        self._enter(PublishState.PUSHING)
        if request.force:
            emit(self.progress_callback, f"force pushing to {target_branch}")
        else:
            emit(self.progress_callback, f"pushing to {target_branch}")

        try:
            self.git.push(request.repo_path, refspec, force=request.force)
            return
        except GitCommandError as exc:
            self._enter(PublishState.REJECTED)
            logger.warning("push rejected: %s", exc.stderr)

        if not request.force:
            raise RemoteConflictError(CONFLICT_MESSAGE)

        self._enter(PublishState.DELETING_REMOTE_BRANCH)
        emit(self.progress_callback, f"deleting remote branch {target_branch} before re-pushing")
        try:
            self.git.delete_remote_branch(request.repo_path, target_branch)
        except GitCommandError as exc:
            logger.warning("remote branch deletion failed: %s", exc.stderr)

        self._enter(PublishState.RE_PUSHING)
        try:
            self.git.push(request.repo_path, refspec)
        except GitCommandError as exc:
            self._enter(PublishState.FINAL_FAILURE)
            logger.error("re-push after branch deletion failed: %s", exc.stderr)
            raise DestructiveRecoveryFailure(PROTECTED_MESSAGE) from exc
