"""Result models produced by the output parsers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from gitpilot.git.types import ContentHash, ReferenceName


class FileStatus(str, Enum):
    UNMODIFIED = "unmodified"
    MODIFIED = "modified"
    ADDED = "added"
    DELETED_WORKING_TREE = "deleted"
    DELETED_STAGED = "deleted_staged"
    RENAMED = "renamed"
    COPIED = "copied"
    UNMERGED_CONFLICT = "unmerged"
    UNTRACKED = "untracked"
    IGNORED = "ignored"


_CLEAN_STATUSES = frozenset({FileStatus.UNMODIFIED, FileStatus.IGNORED})


@dataclass(frozen=True)
class CommitRecord:
    """A single commit as reported by ``git show`` / ``git log``."""

    hash: ContentHash
    short_hash: ContentHash
    author_name: str
    author_email: str
    timestamp: int  # seconds since the Unix epoch
    message: str  # subject line only
    parents: Tuple[ContentHash, ...] = ()

    @property
    def date(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


@dataclass(frozen=True, slots=True)
class FileStatusEntry:
    """One path from ``git status``."""

    path: str
    status: FileStatus
    original_path: Optional[str] = None  # set on renames and copies


@dataclass(frozen=True)
class StatusSnapshot:
    """Working tree state: current branch, per-file entries and in-progress operations."""

    branch: Optional[ReferenceName] = None  # None when detached
    files: Tuple[FileStatusEntry, ...] = ()
    merging: bool = False
    rebasing: bool = False
    cherry_picking: bool = False

    @property
    def is_clean(self) -> bool:
        return all(entry.status in _CLEAN_STATUSES for entry in self.files)

    @property
    def untracked(self) -> Tuple[FileStatusEntry, ...]:
        return tuple(e for e in self.files if e.status is FileStatus.UNTRACKED)

    @property
    def conflicted(self) -> Tuple[FileStatusEntry, ...]:
        return tuple(e for e in self.files if e.status is FileStatus.UNMERGED_CONFLICT)


@dataclass(frozen=True)
class BranchRecord:
    """A local branch and the commit it points to."""

    name: ReferenceName
    commit: ContentHash
    is_head: bool = False
    upstream: Optional[str] = None  # e.g. "origin/main"


@dataclass(frozen=True, slots=True)
class DiffStat:
    """One ``git diff --numstat`` line. Binary files count as 0/0."""

    path: str
    added: int
    removed: int


@dataclass(frozen=True)
class DiffSummary:
    files: Tuple[DiffStat, ...] = ()

    @property
    def total_added(self) -> int:
        return sum(f.added for f in self.files)

    @property
    def total_removed(self) -> int:
        return sum(f.removed for f in self.files)


# --- Unified diff ---------------------------------------------------------------


class LineType(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"


class DiffFileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    MODE_CHANGED = "mode_changed"


@dataclass(frozen=True, slots=True)
class DiffLine:
    """A single line inside a hunk, without its leading marker."""

    content: str
    line_type: LineType


@dataclass
class DiffHunk:
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: list[DiffLine] = field(default_factory=list)


@dataclass
class DiffFile:
    """A file section of a unified diff."""

    path: str
    old_path: Optional[str] = None  # set on renames
    status: DiffFileStatus = DiffFileStatus.MODIFIED
    hunks: list[DiffHunk] = field(default_factory=list)
    added_lines: int = 0
    removed_lines: int = 0
    is_binary: bool = False
    old_mode: Optional[str] = None
    new_mode: Optional[str] = None


@dataclass
class DiffResult:
    files: list[DiffFile] = field(default_factory=list)
