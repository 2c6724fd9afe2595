"""Build ``git fast-import`` streams for a synthetic, linear history."""

from __future__ import annotations

import datetime
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from commit_canvas.errors import InternalStreamError
from commit_canvas.languages import activity_file_path, build_readme, get_template, merge_additional_files
from commit_canvas.logging import get_logger
from commit_canvas.models import ContributionDay, GitIdentity, LanguageWeight

logger = get_logger("stream")

README_PATH = "README.md"
FILE_MODE = "100644"


@dataclass(frozen=True)
class Blob:
    mark: int
    content: bytes


@dataclass(frozen=True)
class FileChange:
    mark: int
    path: str


@dataclass(frozen=True)
class Commit:
    ref: str
    identity: GitIdentity
    timestamp: datetime.datetime
    message: str
    changes: tuple[FileChange, ...]
    language: str = ""


def format_offset(moment: datetime.datetime) -> str:
    """Format a UTC offset as git expects it (``+HHMM``/``-HHMM``)."""
    offset = moment.utcoffset() or datetime.timedelta(0)
    minutes = int(offset.total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    minutes = abs(minutes)
    return f"{sign}{minutes // 60:02d}{minutes % 60:02d}"


def _data(payload: bytes) -> bytes:
    return b"data %d\n" % len(payload) + payload + b"\n"


@dataclass
class HistoryStream:
    """Ordered fast-import objects for one branch.

    Marks are handed out from 1 upward and a commit may only bind marks that
    an earlier blob defined. Commit timestamps never go backwards.
    """

    objects: list[Blob | Commit] = field(default_factory=list)
    next_mark: int = 1
    _defined: set[int] = field(default_factory=set)
    _last_timestamp: datetime.datetime | None = None

    def add_blob(self, content: str | bytes) -> int:
        payload = content.encode("utf-8") if isinstance(content, str) else content
        mark = self.next_mark
        self.objects.append(Blob(mark=mark, content=payload))
        self._defined.add(mark)
        self.next_mark += 1
        return mark

    def add_commit(self, commit: Commit) -> None:
        for change in commit.changes:
            if change.mark not in self._defined:
                raise InternalStreamError(f"commit {commit.message!r} references undefined mark :{change.mark}")
        if self._last_timestamp is not None and commit.timestamp < self._last_timestamp:
            raise InternalStreamError(
                f"commit {commit.message!r} at {commit.timestamp.isoformat()} precedes "
                f"{self._last_timestamp.isoformat()}"
            )
        self._last_timestamp = commit.timestamp
        self.objects.append(commit)

    @property
    def commits(self) -> list[Commit]:
        return [obj for obj in self.objects if isinstance(obj, Commit)]

    @property
    def blobs(self) -> list[Blob]:
        return [obj for obj in self.objects if isinstance(obj, Blob)]

    @property
    def commit_count(self) -> int:
        return len(self.commits)

    def to_bytes(self) -> bytes:
        """Serialize the stream, terminated by ``done``."""
        parts: list[bytes] = []
        for obj in self.objects:
            if isinstance(obj, Blob):
                parts.append(b"blob\nmark :%d\n" % obj.mark)
                parts.append(_data(obj.content))
                continue
            epoch = int(obj.timestamp.timestamp())
            tz = format_offset(obj.timestamp)
            who = f"{obj.identity.name} <{obj.identity.email}> {epoch} {tz}"
            lines = [f"commit {obj.ref}", f"author {who}", f"committer {who}"]
            parts.append(("\n".join(lines) + "\n").encode("utf-8"))
            parts.append(_data(obj.message.encode("utf-8")))
            for change in obj.changes:
                parts.append(f"M {FILE_MODE} :{change.mark} {change.path}\n".encode("utf-8"))
        parts.append(b"done\n")
        return b"".join(parts)


def build_history(
    days: Sequence[ContributionDay],
    selector: Callable[[int], str],
    *,
    weights: Sequence[LanguageWeight],
    identity: GitIdentity,
    repo_name: str,
    branch: str = "main",
    tz: datetime.tzinfo = datetime.timezone.utc,
) -> HistoryStream:
    """Emit the README, support files, and one commit per requested contribution.

    ``days`` must already be normalized (positive counts, ascending dates).
    The i-th commit of a day is stamped ``i - 1`` seconds after that day's
    midnight in ``tz``.
    """
    stream = HistoryStream()
    ref = branch if branch.startswith("refs/") else f"refs/heads/{branch}"

    readme_mark = stream.add_blob(build_readme(repo_name, weights))
    static_changes = [FileChange(mark=readme_mark, path=README_PATH)]
    for path, content in sorted(merge_additional_files(repo_name, weights).items()):
        static_changes.append(FileChange(mark=stream.add_blob(content), path=path))

    commit_index = 0
    for day in days:
        midnight = datetime.datetime.combine(day.date, datetime.time(0, 0), tzinfo=tz)
        for i in range(1, day.count + 1):
            language = selector(commit_index)
            template = get_template(language)
            code_mark = stream.add_blob(template.generate_code(day.date, i, day.count))
            stream.add_commit(
                Commit(
                    ref=ref,
                    identity=identity,
                    timestamp=midnight + datetime.timedelta(seconds=i - 1),
                    message=f"Contribution on {day.date.isoformat()} ({i}/{day.count})",
                    changes=(*static_changes, FileChange(mark=code_mark, path=activity_file_path(language))),
                    language=template.language.value,
                )
            )
            commit_index += 1

    logger.debug("built stream: %d commits, %d blobs", stream.commit_count, stream.next_mark - 1)
    return stream
