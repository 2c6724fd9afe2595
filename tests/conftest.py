from __future__ import annotations

import subprocess
import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from commit_canvas.models import ContributionDay, GitIdentity, LanguageWeight


class RecordingRunner:
    """Stands in for ``subprocess.run``; fails any command whose args start with a configured prefix."""

    def __init__(self, failures: dict[tuple[str, ...], list[int]] | None = None):
        self.calls: list[list[str]] = []
        self.inputs: list[bytes | None] = []
        self.failures = {prefix: list(codes) for prefix, codes in (failures or {}).items()}

    def __call__(self, cmd, *, cwd=None, input=None) -> subprocess.CompletedProcess:
        cmd = list(cmd)
        self.calls.append(cmd)
        self.inputs.append(input)
        args = tuple(cmd[1:])
        for prefix, codes in self.failures.items():
            if args[: len(prefix)] == prefix and codes:
                code = codes.pop(0)
                if code:
                    return subprocess.CompletedProcess(cmd, code, stdout=b"", stderr=b"! [rejected] main -> main")
        if args[:1] == ("--version",):
            return subprocess.CompletedProcess(cmd, 0, stdout=b"git version 2.45.0\n", stderr=b"")
        return subprocess.CompletedProcess(cmd, 0, stdout=b"", stderr=b"")

    def subcommands(self, name: str) -> list[list[str]]:
        return [call[1:] for call in self.calls if len(call) > 1 and call[1] == name]


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def make_runner():
    return RecordingRunner


@pytest.fixture
def sample_days() -> list[ContributionDay]:
    return [
        ContributionDay(date=date(2024, 1, 2), count=1),
        ContributionDay(date=date(2024, 1, 1), count=2),
        ContributionDay(date=date(2024, 1, 3), count=0),
    ]


@pytest.fixture
def markdown_weights() -> list[LanguageWeight]:
    return [LanguageWeight(language="markdown", ratio=100)]


@pytest.fixture
def identity() -> GitIdentity:
    return GitIdentity(name="Ada", email="ada@example.com")
