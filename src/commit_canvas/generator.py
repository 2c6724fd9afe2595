"""Generate a local repository whose history matches a contribution calendar."""

from __future__ import annotations

import re
import shutil
import tempfile
from collections.abc import Callable
from functools import partial
from pathlib import Path

from commit_canvas.config import Settings
from commit_canvas.git import GitRunner
from commit_canvas.logging import get_logger
from commit_canvas.models import GenerateRequest, GenerationResult
from commit_canvas.progress import ProgressCallback, emit
from commit_canvas.schedule import normalize_contributions, normalize_language_weights, validate_identity
from commit_canvas.selector import LanguageSelector
from commit_canvas.stream import build_history

logger = get_logger("generator")

REPO_NAME_SANITIZER = re.compile(r"[^a-zA-Z0-9._-]+")
MAX_REPO_NAME_LENGTH = 64
FALLBACK_REPO_NAME = "contributions"


def sanitize_repo_name(value: str) -> str:
    """Reduce ``value`` to characters git hosts accept in repository names."""
    value = REPO_NAME_SANITIZER.sub("-", value.strip()).strip("-")
    return value[:MAX_REPO_NAME_LENGTH]


def derive_repo_name(request: GenerateRequest) -> str:
    """Pick the repository name: explicit name, else ``<author>[-<year>]``."""
    name = request.repo_name.strip()
    if not name:
        name = request.identity.name
        if request.year:
            name = f"{name}-{request.year}"
    return sanitize_repo_name(name) or FALLBACK_REPO_NAME


def generate_repository(
    request: GenerateRequest,
    settings: Settings,
    progress_callback: ProgressCallback | None = None,
    git: GitRunner | None = None,
    remove_tree: Callable[[Path], None] = partial(shutil.rmtree, ignore_errors=True),
) -> GenerationResult:
    """Synthesize a repository in a fresh directory under ``settings.work_root``.

    Inputs are validated before anything touches the filesystem. When a later
    step fails, the half-built directory is removed before the error
    propagates, so the caller never owns a partial repository.
    """
    weights = normalize_language_weights(request.weights)
    days = normalize_contributions(request.contributions)
    identity = validate_identity(request.identity)
    total = sum(day.count for day in days)
    repo_name = derive_repo_name(request)
    git = git or GitRunner(settings.git_path)

    logger.info(
        "generating %s: %d commits over %d days, languages=%s",
        repo_name,
        total,
        len(days),
        ",".join(f"{w.language}:{w.ratio}" for w in weights),
    )

    settings.work_root.mkdir(parents=True, exist_ok=True)
    repo_path = Path(tempfile.mkdtemp(prefix=f"{repo_name}-", dir=settings.work_root))
    completed = False
    try:
        emit(progress_callback, f"initializing repository at {repo_path}")
        git.init_repository(repo_path, identity)

        emit(progress_callback, f"building history stream ({total} commits)")
        stream = build_history(
            days,
            LanguageSelector(weights),
            weights=weights,
            identity=identity,
            repo_name=repo_name,
            branch=request.branch,
            tz=settings.timezone,
        )

        emit(progress_callback, "importing history")
        git.fast_import(repo_path, stream.to_bytes())
        git.checkout(repo_path, request.branch)
        completed = True
    finally:
        if not completed:
            logger.error("generation failed; removing %s", repo_path)
            remove_tree(repo_path)

    logger.info("generated %s with %d commits at %s", repo_name, stream.commit_count, repo_path)
    return GenerationResult(
        repo_path=repo_path,
        repo_name=repo_name,
        branch=request.branch,
        commit_count=stream.commit_count,
    )
