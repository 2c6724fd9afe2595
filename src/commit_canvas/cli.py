"""Typer-based CLI for generating and publishing contribution-calendar repositories."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError as PydanticValidationError

from commit_canvas.config import Settings
from commit_canvas.errors import CommitCanvasError, ValidationError
from commit_canvas.generator import generate_repository
from commit_canvas.git import GitRunner, check_git
from commit_canvas.github import GitHubClient, split_repo_name
from commit_canvas.languages import supported_languages
from commit_canvas.logging import configure_logging
from commit_canvas.models import GenerateRequest, GenerationResult, GitIdentity, LanguageWeight, PublishRequest
from commit_canvas.publisher import Publisher
from commit_canvas.schedule import (
    default_weights,
    load_contributions,
    normalize_language_weights,
    parse_language_weights,
)
from commit_canvas.selector import build_selection_weights, cycle_distribution

app = typer.Typer(add_completion=False, help="commit-canvas: paint a contribution calendar with synthetic commits")


def _echo_step(step: int, total: int, message: str) -> None:
    """Print a normalized progress step line."""
    typer.echo(f"[{step}/{total}] {message}")


def _echo_progress(message: str) -> None:
    typer.echo(f"    {message}")


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _parse_weights(lang: str | None) -> list[LanguageWeight]:
    if not lang:
        return default_weights()
    try:
        return parse_language_weights(lang)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_hint="--lang") from exc


def _settings(git_path: str | None, work_root: Path | None, utc_offset: int | None = None) -> Settings:
    return Settings.from_env(git_path=git_path, work_root=work_root, utc_offset_minutes=utc_offset)


def _github_client(settings: Settings) -> GitHubClient:
    if not settings.token:
        _fail("Missing GITHUB_TOKEN (set env var or .api_keys/GitHub.md)")
    return GitHubClient(settings.token, base_url=settings.api_base_url, timeout=settings.request_timeout)


def _generate(
    contributions_file: Path,
    lang: str | None,
    author: str | None,
    email: str | None,
    repo_name: str,
    year: int | None,
    settings: Settings,
) -> GenerationResult:
    try:
        request = GenerateRequest(
            contributions=load_contributions(contributions_file),
            weights=_parse_weights(lang),
            identity=GitIdentity(name=author, email=email),
            repo_name=repo_name,
            year=year,
        )
        return generate_repository(request, settings, progress_callback=_echo_progress)
    except (ValidationError, PydanticValidationError) as exc:
        raise typer.BadParameter(str(exc)) from exc
    except CommitCanvasError as exc:
        _fail(f"Generation failed: {exc}")


def _publish(
    result: GenerationResult,
    target: str | None,
    branch: str,
    new_repo: bool,
    private: bool,
    force: bool,
    settings: Settings,
) -> None:
    client = _github_client(settings)
    publisher = Publisher(
        client,
        GitRunner(settings.git_path),
        settings.token or "",
        web_base_url=settings.web_base_url,
        progress_callback=_echo_progress,
    )
    outcome = publisher.publish(
        PublishRequest(
            repo_path=result.repo_path,
            repo_name=target or result.repo_name,
            branch=branch,
            local_branch=result.branch,
            is_new_repo=new_repo,
            private=private,
            force=force,
            commit_count=result.commit_count,
        )
    )
    if not outcome.success:
        _fail(outcome.message)
    typer.echo(f"{outcome.message} url={outcome.repo_url}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Path | None = typer.Option(None, "--log-file", help="Also write logs to this file"),
) -> None:
    """Configure logging for every command."""
    configure_logging(verbose=verbose, log_file=log_file)


@app.command("languages")
def languages() -> None:
    """List supported languages."""
    for value, label in supported_languages():
        typer.echo(f"{value:<12} {label}")


@app.command("plan")
def plan(
    lang: str = typer.Option(..., "--lang", help="Language ratios, e.g. go=50,python=50"),
) -> None:
    """Show normalized ratios, selection weights, and one cycle's distribution."""
    try:
        weights = normalize_language_weights(_parse_weights(lang))
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_hint="--lang") from exc

    selection = build_selection_weights(weights)
    distribution = cycle_distribution(selection)
    cycle = sum(item.weight for item in selection)
    typer.echo(f"total ratio={sum(w.ratio for w in weights)} cycle={cycle}")
    for weight, item in zip([w for w in weights if w.ratio > 0], selection):
        typer.echo(f"{item.language:<12} ratio={weight.ratio:>3} weight={item.weight:>5} per-cycle={distribution.get(item.language, 0)}")


@app.command("generate")
def generate(
    contributions_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of {date, count}"),
    lang: str | None = typer.Option(None, "--lang", help="Language ratios, e.g. go=50,python=50"),
    author: str | None = typer.Option(None, help="Commit author name"),
    email: str | None = typer.Option(None, help="Commit author email"),
    repo_name: str = typer.Option("", "--repo-name", help="Repository name"),
    year: int | None = typer.Option(None, help="Year used in the default repository name"),
    git_path: str | None = typer.Option(None, "--git", help="Custom git executable"),
    work_root: Path | None = typer.Option(None, "--work-root", help="Parent directory for generated repos"),
    utc_offset: int | None = typer.Option(None, "--utc-offset", help="Commit timezone offset in minutes"),
) -> None:
    """Generate a local repository from a contribution calendar."""
    settings = _settings(git_path, work_root, utc_offset)
    _echo_step(1, 1, "Generating repository")
    result = _generate(contributions_file, lang, author, email, repo_name, year, settings)
    typer.echo(f"Generated. commits={result.commit_count} path={result.repo_path}")


@app.command("publish")
def publish(
    repo_path: Path = typer.Argument(..., exists=True, file_okay=False, help="Generated repository"),
    target: str = typer.Option(..., "--to", help="Remote repository: name or owner/name"),
    branch: str = typer.Option("", help="Target branch (default: main or the new repo's default)"),
    local_branch: str = typer.Option("main", "--local-branch", help="Local branch to push"),
    new_repo: bool = typer.Option(False, "--new", help="Create the repository first"),
    private: bool = typer.Option(False, help="Create the new repository as private"),
    force: bool = typer.Option(False, help="Overwrite the remote branch if the push is rejected"),
    commit_count: int = typer.Option(0, "--commit-count", help="Commit count reported in the result"),
    git_path: str | None = typer.Option(None, "--git", help="Custom git executable"),
) -> None:
    """Push a generated repository; the local directory is removed afterwards."""
    settings = _settings(git_path, None)
    result = GenerationResult(
        repo_path=repo_path, repo_name=target, branch=local_branch, commit_count=commit_count
    )
    _echo_step(1, 1, "Publishing repository")
    _publish(result, target, branch, new_repo, private, force, settings)


@app.command("run")
def run(
    contributions_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of {date, count}"),
    lang: str | None = typer.Option(None, "--lang", help="Language ratios, e.g. go=50,python=50"),
    author: str | None = typer.Option(None, help="Commit author name"),
    email: str | None = typer.Option(None, help="Commit author email"),
    repo_name: str = typer.Option("", "--repo-name", help="Repository name"),
    year: int | None = typer.Option(None, help="Year used in the default repository name"),
    target: str | None = typer.Option(None, "--to", help="Remote repository (defaults to the repo name)"),
    branch: str = typer.Option("", help="Target branch"),
    new_repo: bool = typer.Option(False, "--new", help="Create the repository first"),
    private: bool = typer.Option(False, help="Create the new repository as private"),
    force: bool = typer.Option(False, help="Overwrite the remote branch if the push is rejected"),
    git_path: str | None = typer.Option(None, "--git", help="Custom git executable"),
    work_root: Path | None = typer.Option(None, "--work-root", help="Parent directory for generated repos"),
    utc_offset: int | None = typer.Option(None, "--utc-offset", help="Commit timezone offset in minutes"),
) -> None:
    """Generate and publish in one flow."""
    settings = _settings(git_path, work_root, utc_offset)
    if not settings.token:
        _fail("Missing GITHUB_TOKEN (set env var or .api_keys/GitHub.md)")

    _echo_step(1, 2, "Generating repository")
    result = _generate(contributions_file, lang, author, email, repo_name, year, settings)
    typer.echo(f"    generated {result.commit_count} commits at {result.repo_path}")

    _echo_step(2, 2, "Publishing repository")
    _publish(result, target, branch, new_repo, private, force, settings)


@app.command("repos")
def repos() -> None:
    """List repositories of the authenticated user."""
    settings = Settings.from_env()
    try:
        items = _github_client(settings).list_repositories()
    except CommitCanvasError as exc:
        _fail(str(exc))
    for repo in items:
        visibility = "private" if repo.private else "public"
        typer.echo(f"{repo.full_name:<40} {visibility:<8} {repo.default_branch or '-'}")


@app.command("branches")
def branches(
    repo: str = typer.Argument(..., help="owner/name, or a bare name under the token's user"),
) -> None:
    """List branches of a repository."""
    settings = Settings.from_env()
    client = _github_client(settings)
    try:
        owner, name = split_repo_name(repo, "" if "/" in repo else client.get_user().login)
        names = client.list_branches(owner, name)
    except CommitCanvasError as exc:
        _fail(str(exc))
    for branch in names:
        typer.echo(branch)


@app.command("doctor")
def doctor(
    git_path: str | None = typer.Option(None, "--git", help="Custom git executable"),
) -> None:
    """Print local environment diagnostics used by the CLI."""
    settings = _settings(git_path, None)
    try:
        typer.echo(f"git: {check_git(settings.git_path)}")
    except CommitCanvasError as exc:
        typer.echo(f"git: unusable ({exc})")
    typer.echo(f"GITHUB_TOKEN set: {bool(settings.token)}")
    typer.echo(f"work root: {settings.work_root}")


if __name__ == "__main__":
    app()
