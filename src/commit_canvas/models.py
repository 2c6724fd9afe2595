"""Pydantic models shared across scheduling, generation, and publishing."""

from __future__ import annotations

import datetime
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_AUTHOR_NAME = "commit-canvas"
DEFAULT_AUTHOR_EMAIL = "commit-canvas@users.noreply.github.com"
# Characters that would break an ident line in a fast-import stream.
IDENT_FORBIDDEN = re.compile(r"[<>\r\n]")


class ContributionDay(BaseModel):
    """Requested commit count for one calendar day."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    count: int


class LanguageWeight(BaseModel):
    """Caller-requested share of one language, in percent."""

    language: str
    ratio: int
    locked: bool = False


class SelectionWeight(BaseModel):
    """Integer round-robin weight derived from a ratio and the byte-cost table."""

    model_config = ConfigDict(frozen=True)

    language: str
    weight: int = Field(ge=1)


class GitIdentity(BaseModel):
    """Author and committer identity written into every synthesized commit."""

    name: str = DEFAULT_AUTHOR_NAME
    email: str = DEFAULT_AUTHOR_EMAIL

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_AUTHOR_NAME
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def _default_email(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_AUTHOR_EMAIL
        return value.strip() if isinstance(value, str) else value

    @field_validator("name", "email")
    @classmethod
    def _reject_ident_delimiters(cls, value: str) -> str:
        if IDENT_FORBIDDEN.search(value):
            raise ValueError("must not contain '<', '>' or line breaks")
        return value


class GenerateRequest(BaseModel):
    """Everything needed to synthesize one local repository."""

    contributions: list[ContributionDay]
    weights: list[LanguageWeight]
    identity: GitIdentity = Field(default_factory=GitIdentity)
    repo_name: str = ""
    year: int | None = None
    branch: str = "main"


class GenerationResult(BaseModel):
    """Location and size of a freshly generated repository."""

    repo_path: Path
    repo_name: str
    branch: str
    commit_count: int


class PublishRequest(BaseModel):
    """Target of a publish call for a previously generated repository."""

    repo_path: Path
    repo_name: str
    branch: str = ""
    local_branch: str = "main"
    is_new_repo: bool = False
    private: bool = False
    force: bool = False
    commit_count: int = 0


class PublishResult(BaseModel):
    """Outcome of a publish call, reported instead of raising."""

    success: bool
    message: str
    repo_url: str = ""


class GitHubUser(BaseModel):
    """Subset of ``GET /user`` used to address the caller's repositories."""

    login: str
    name: str | None = None
    email: str | None = None


class GitHubRepo(BaseModel):
    """Subset of a GitHub repository payload."""

    name: str
    full_name: str
    private: bool = False
    html_url: str
    default_branch: str | None = None
