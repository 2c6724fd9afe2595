"""Runtime settings passed explicitly into generation and publishing."""

from __future__ import annotations

import datetime
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_GITHUB_KEY_FILE = Path(".api_keys/GitHub.md")
DEFAULT_API_BASE_URL = "https://api.github.com"
DEFAULT_WEB_BASE_URL = "https://github.com"


def default_work_root() -> Path:
    return Path(tempfile.gettempdir()) / "commit-canvas"


def resolve_github_token(key_file: Path = DEFAULT_GITHUB_KEY_FILE) -> str | None:
    """Find the personal access token used for API calls and pushes.

    A non-blank ``GITHUB_TOKEN`` wins. Otherwise the whole of ``key_file`` is
    taken as the token, so it can be kept out of the shell history. ``None``
    means neither source holds one and publishing is unavailable.
    """
    env_token = (os.getenv("GITHUB_TOKEN") or "").strip()
    if env_token:
        return env_token
    if not key_file.is_file():
        return None
    return key_file.read_text(encoding="utf-8").strip() or None


class Settings(BaseModel):
    """Tool path, directories, and credentials for one invocation."""

    git_path: str = "git"
    work_root: Path = Field(default_factory=default_work_root)
    api_base_url: str = DEFAULT_API_BASE_URL
    web_base_url: str = DEFAULT_WEB_BASE_URL
    token: str | None = Field(default=None, repr=False)
    request_timeout: float = 15.0
    utc_offset_minutes: int = Field(default=0, ge=-14 * 60, le=14 * 60)

    @property
    def timezone(self) -> datetime.timezone:
        return datetime.timezone(datetime.timedelta(minutes=self.utc_offset_minutes))

    @classmethod
    def from_env(cls, key_file: Path = DEFAULT_GITHUB_KEY_FILE, **overrides: Any) -> "Settings":
        """Build settings from ``COMMIT_CANVAS_*`` variables, then apply non-``None`` overrides."""
        values: dict[str, Any] = {}
        env_map = {
            "git_path": "COMMIT_CANVAS_GIT_PATH",
            "work_root": "COMMIT_CANVAS_WORK_ROOT",
            "api_base_url": "COMMIT_CANVAS_API_URL",
        }
        for field_name, env_name in env_map.items():
            value = (os.getenv(env_name) or "").strip()
            if value:
                values[field_name] = value
        token = resolve_github_token(key_file)
        if token:
            values["token"] = token
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(values)
