from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from commit_canvas.errors import ConfigurationError, GitCommandError, InternalStreamError
from commit_canvas.git import GitRunner, check_git


def test_run_given_custom_git_path_when_called_then_executable_is_used(recording_runner, tmp_path) -> None:
    # Given
    git = GitRunner("/opt/git/bin/git", runner=recording_runner)

    # When
    git.checkout(tmp_path, "main")

    # Then
    assert recording_runner.calls == [["/opt/git/bin/git", "checkout", "-f", "main"]]


def test_run_given_missing_executable_when_called_then_configuration_error_is_raised() -> None:
    # Given
    def missing(cmd, *, cwd=None, input=None):
        raise FileNotFoundError(cmd[0])

    git = GitRunner("no-such-git", runner=missing)

    # When / Then
    with pytest.raises(ConfigurationError, match="no-such-git"):
        git.version()


def test_run_given_nonzero_exit_with_token_url_when_called_then_error_is_redacted(tmp_path) -> None:
    # Given
    def rejecting(cmd, *, cwd=None, input=None):
        return subprocess.CompletedProcess(
            cmd, 128, stdout=b"", stderr=b"fatal: unable to access 'https://ghp_secret@github.com/a/b.git/'"
        )

    git = GitRunner(runner=rejecting)

    # When
    with pytest.raises(GitCommandError) as excinfo:
        git.set_remote(tmp_path, "https://ghp_secret@github.com/a/b.git")

    # Then
    assert excinfo.value.returncode == 128
    assert "ghp_secret" not in str(excinfo.value)
    assert "ghp_secret" not in " ".join(excinfo.value.command)


def test_init_repository_given_identity_when_initialized_then_user_config_and_fast_settings_are_written(
    recording_runner, identity, tmp_path
) -> None:
    # Given
    git = GitRunner(runner=recording_runner)

    # When
    git.init_repository(tmp_path, identity)

    # Then
    args = [call[1:] for call in recording_runner.calls]
    assert args[0] == ["init", "--quiet"]
    assert ["config", "user.name", "Ada"] in args
    assert ["config", "user.email", "ada@example.com"] in args
    assert ["config", "commit.gpgsign", "false"] in args


def test_init_repository_given_optional_setting_fails_when_initialized_then_init_still_succeeds(
    make_runner, identity, tmp_path
) -> None:
    # Given
    runner = make_runner({("config", "gc.auto"): [1]})
    git = GitRunner(runner=runner)

    # When
    git.init_repository(tmp_path, identity)

    # Then
    assert ["config", "core.autocrlf", "false"] in runner.subcommands("config")


def test_fast_import_given_stream_when_imported_then_bytes_go_to_stdin(recording_runner, tmp_path) -> None:
    # Given
    git = GitRunner(runner=recording_runner)

    # When
    git.fast_import(tmp_path, b"done\n")

    # Then
    assert recording_runner.calls[-1][1:] == ["fast-import", "--quiet"]
    assert recording_runner.inputs[-1] == b"done\n"


def test_fast_import_given_git_rejects_stream_when_imported_then_internal_stream_error_is_raised(
    make_runner, tmp_path
) -> None:
    # Given
    git = GitRunner(runner=make_runner({("fast-import",): [1]}))

    # When / Then
    with pytest.raises(InternalStreamError):
        git.fast_import(tmp_path, b"garbage")


def test_set_remote_given_existing_remote_when_set_then_url_is_replaced(make_runner, tmp_path) -> None:
    # Given
    runner = make_runner({("remote", "add"): [3]})
    git = GitRunner(runner=runner)

    # When
    git.set_remote(tmp_path, "https://github.com/a/b.git")

    # Then
    assert runner.subcommands("remote")[-1] == ["remote", "set-url", "origin", "https://github.com/a/b.git"]


def test_push_given_force_flag_when_pushed_then_force_or_upstream_flag_is_used(recording_runner, tmp_path) -> None:
    # Given
    git = GitRunner(runner=recording_runner)

    # When
    git.push(tmp_path, "main:main", force=True)
    git.push(tmp_path, "main:main")
    git.delete_remote_branch(tmp_path, "main")

    # Then
    assert recording_runner.subcommands("push") == [
        ["push", "-f", "origin", "main:main"],
        ["push", "-u", "origin", "main:main"],
        ["push", "origin", "--delete", "main"],
    ]


def test_check_git_given_missing_absolute_path_when_checked_then_configuration_error_is_raised(tmp_path) -> None:
    # Given
    missing = tmp_path / "bin" / "git"

    # When / Then
    with pytest.raises(ConfigurationError, match="not found"):
        check_git(str(missing))


def test_version_given_nonzero_exit_when_checked_then_configuration_error_is_raised(make_runner) -> None:
    # Given
    git = GitRunner(str(Path("/usr/bin/false")), runner=make_runner({("--version",): [1]}))

    # When / Then
    with pytest.raises(ConfigurationError):
        git.version()
