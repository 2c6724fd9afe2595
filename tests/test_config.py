from __future__ import annotations

import datetime
from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from commit_canvas.config import Settings, resolve_github_token


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GITHUB_TOKEN", "COMMIT_CANVAS_GIT_PATH", "COMMIT_CANVAS_WORK_ROOT", "COMMIT_CANVAS_API_URL"):
        monkeypatch.delenv(name, raising=False)


def test_resolve_github_token_given_env_and_file_when_resolved_then_env_wins(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path,
) -> None:
    # Given
    key_file = tmp_path / "GitHub.md"
    key_file.write_text("file-token", encoding="utf-8")
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")

    # When
    value = resolve_github_token(key_file=key_file)

    # Then
    assert value == "env-token"


def test_resolve_github_token_given_only_file_when_resolved_then_file_value_is_used(tmp_path) -> None:
    # Given
    key_file = tmp_path / "GitHub.md"
    key_file.write_text("file-token\n", encoding="utf-8")

    # When
    value = resolve_github_token(key_file=key_file)

    # Then
    assert value == "file-token"


def test_resolve_github_token_given_no_sources_when_resolved_then_none_is_returned(tmp_path) -> None:
    # Given
    missing_file = tmp_path / "missing.md"

    # When
    value = resolve_github_token(key_file=missing_file)

    # Then
    assert value is None


def test_settings_from_env_given_environment_and_overrides_when_built_then_overrides_win(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path,
) -> None:
    # Given
    monkeypatch.setenv("COMMIT_CANVAS_GIT_PATH", "/usr/local/bin/git")
    monkeypatch.setenv("COMMIT_CANVAS_WORK_ROOT", str(tmp_path / "env-root"))
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")

    # When
    settings = Settings.from_env(key_file=tmp_path / "none.md", git_path=None, work_root=tmp_path / "cli-root")

    # Then
    assert settings.git_path == "/usr/local/bin/git"
    assert settings.work_root == tmp_path / "cli-root"
    assert settings.token == "env-token"
    assert "env-token" not in repr(settings)


def test_settings_timezone_given_offset_minutes_when_read_then_fixed_offset_is_returned() -> None:
    # Given
    settings = Settings(utc_offset_minutes=-300)

    # When / Then
    assert settings.timezone.utcoffset(None) == datetime.timedelta(hours=-5)
    assert Settings().work_root.name == "commit-canvas"
    assert isinstance(Settings().work_root, Path)


def test_settings_given_out_of_range_offset_when_built_then_validation_fails() -> None:
    # Given / When / Then
    with pytest.raises(PydanticValidationError):
        Settings(utc_offset_minutes=15 * 60)
