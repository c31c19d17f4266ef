"""Parsers for git's line- and field-oriented output formats.

All functions here are pure: they take decoded stdout and return models from
:mod:`gitpilot.git.models`. Listing parsers skip malformed records with a
warning; single-record parsers raise :class:`ParseFailure`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from gitpilot.git.errors import InvalidFormat, ParseFailure
from gitpilot.git.models import (
    BranchRecord,
    CommitRecord,
    DiffStat,
    DiffSummary,
    FileStatus,
    FileStatusEntry,
    StatusSnapshot,
)
from gitpilot.git.types import ContentHash, ReferenceName, RemoteName

logger = logging.getLogger(__name__)

# --- Commit ---------------------------------------------------------------------

RECORD_SEPARATOR = "\x1e"

COMMIT_FORMAT = (
    "%H%n"
    "shortcommit %h%n"
    "author_name %an%n"
    "author_email %ae%n"
    "timestamp %at%n"
    "%P%n"
    "message %s"
)
LOG_FORMAT = "%x1e" + COMMIT_FORMAT

_SHORT_PREFIX = "shortcommit "
_AUTHOR_NAME_PREFIX = "author_name "
_AUTHOR_EMAIL_PREFIX = "author_email "
_TIMESTAMP_PREFIX = "timestamp "
_MESSAGE_PREFIX = "message "
_LABELS = (
    _SHORT_PREFIX,
    _AUTHOR_NAME_PREFIX,
    _AUTHOR_EMAIL_PREFIX,
    _TIMESTAMP_PREFIX,
    _MESSAGE_PREFIX,
)


def parse_commit(text: str) -> CommitRecord:
    """Parse the output of ``git show --no-patch --format=COMMIT_FORMAT``."""
    hash_str: Optional[str] = None
    short_str: Optional[str] = None
    timestamp_str: Optional[str] = None
    parents_str: Optional[str] = None
    author_name = ""
    author_email = ""
    message = ""

    for line in text.splitlines():
        if hash_str is None:
            if line.strip():
                hash_str = line.strip()
            continue
        if line.startswith(_SHORT_PREFIX):
            short_str = line[len(_SHORT_PREFIX):].strip()
        elif line.startswith(_AUTHOR_NAME_PREFIX):
            author_name = line[len(_AUTHOR_NAME_PREFIX):]
        elif line.startswith(_AUTHOR_EMAIL_PREFIX):
            author_email = line[len(_AUTHOR_EMAIL_PREFIX):]
        elif line.startswith(_TIMESTAMP_PREFIX):
            timestamp_str = line[len(_TIMESTAMP_PREFIX):].strip()
        elif line.startswith(_MESSAGE_PREFIX):
            message = line[len(_MESSAGE_PREFIX):]
        elif parents_str is None and short_str is not None:
            # The single unlabeled line; empty for a root commit.
            parents_str = line
        # `%s` with an empty subject renders as "message" without the space.
        elif line == _MESSAGE_PREFIX.rstrip():
            message = ""

    if hash_str is None:
        raise ParseFailure(text, "missing commit hash")
    if short_str is None:
        raise ParseFailure(text, "missing short hash")
    if timestamp_str is None:
        raise ParseFailure(text, "missing timestamp")
    if not (timestamp_str.isascii() and timestamp_str.isdigit()):
        raise ParseFailure(text, f"non-numeric timestamp {timestamp_str!r}")

    try:
        commit_hash = ContentHash.parse(hash_str)
        short_hash = ContentHash.parse(short_str)
        parents = tuple(ContentHash.parse(p) for p in (parents_str or "").split())
    except InvalidFormat as exc:
        raise ParseFailure(text, str(exc)) from exc

    return CommitRecord(
        hash=commit_hash,
        short_hash=short_hash,
        author_name=author_name,
        author_email=author_email,
        timestamp=int(timestamp_str),
        message=message,
        parents=parents,
    )


def parse_log(text: str) -> List[CommitRecord]:
    """Parse ``git log --format=LOG_FORMAT``; bad records are skipped."""
    commits: List[CommitRecord] = []
    for chunk in text.split(RECORD_SEPARATOR):
        if not chunk.strip():
            continue
        try:
            commits.append(parse_commit(chunk))
        except ParseFailure as exc:
            logger.warning("Skipping unparseable log record: %s", exc.reason)
    return commits


# --- Status ---------------------------------------------------------------------

_BRANCH_HEAD_PREFIX = "# branch.head "
_V1_BRANCH_PREFIX = "## "
_DETACHED = "(detached)"


@dataclass(frozen=True)
class _RecordShape:
    """Field layout of one ``git status --porcelain=v2`` record type."""

    width: int  # number of space-separated fields; the last one is the path
    code_field: int = 1
    has_original: bool = False  # path field is "<path>\t<origPath>"
    fixed_status: Optional[FileStatus] = None


# Record types keyed by their leading token. Every "u" record is reported as
# UNMERGED_CONFLICT whatever its XY code (AA, UD, ...); only "1" and "2"
# records go through status_from_code().
_STATUS_RECORDS: Dict[str, _RecordShape] = {
    "1": _RecordShape(width=9),
    "2": _RecordShape(width=10, has_original=True),
    "u": _RecordShape(width=11, fixed_status=FileStatus.UNMERGED_CONFLICT),
}

_MARKER_RECORDS: Dict[str, FileStatus] = {
    "?": FileStatus.UNTRACKED,
    "??": FileStatus.UNTRACKED,
    "!": FileStatus.IGNORED,
    "!!": FileStatus.IGNORED,
}


def status_from_code(index: str, worktree: str) -> FileStatus:
    """Map an ``XY`` status code to a FileStatus.

    ``.`` (porcelain v2) reads as unchanged and ``T`` (type change) as ``M``.
    """
    x = {".": " ", "T": "M"}.get(index, index)
    y = {".": " ", "T": "M"}.get(worktree, worktree)
    if (x, y) == (" ", "M"):
        return FileStatus.MODIFIED
    if x in ("M", "A"):
        return FileStatus.ADDED
    if x == "D":
        return FileStatus.DELETED_STAGED
    if x == "R":
        return FileStatus.RENAMED
    if x == "C":
        return FileStatus.COPIED
    if x == "U":
        return FileStatus.UNMERGED_CONFLICT
    if y == "D":
        return FileStatus.DELETED_WORKING_TREE
    if (x, y) == ("?", "?"):
        return FileStatus.UNTRACKED
    if (x, y) == ("!", "!"):
        return FileStatus.IGNORED
    return FileStatus.UNMODIFIED


def _split_code(code: str) -> Tuple[str, str]:
    code = code.ljust(2)
    return code[0], code[1]


def _parse_record(line: str, shape: _RecordShape) -> Optional[FileStatusEntry]:
    fields = line.split(" ", shape.width - 1)
    if len(fields) < shape.width or not fields[-1]:
        return None
    path = fields[-1]
    original: Optional[str] = None
    if shape.has_original:
        path, sep, original = path.partition("\t")
        if not sep or not original:
            return None
    status = shape.fixed_status or status_from_code(*_split_code(fields[shape.code_field]))
    return FileStatusEntry(path=path, status=status, original_path=original)


def _parse_v1_record(line: str) -> Optional[FileStatusEntry]:
    code, rest = line[:2], line[2:].strip()
    if not rest:
        return None
    status = status_from_code(*_split_code(code))
    original: Optional[str] = None
    if status in (FileStatus.RENAMED, FileStatus.COPIED) and " -> " in rest:
        original, _, rest = rest.partition(" -> ")
    return FileStatusEntry(path=rest, status=status, original_path=original)


def _branch_from_header(name: str) -> Optional[ReferenceName]:
    if not name or name == _DETACHED:
        return None
    if ReferenceName.is_valid(name):
        return ReferenceName.parse(name)
    logger.warning("Ignoring unparseable branch name in status header: %r", name)
    return None


def _branch_from_v1_header(header: str) -> Optional[ReferenceName]:
    # "## main...origin/main [ahead 1]", "## No commits yet on main", "## HEAD (no branch)"
    if header.startswith("HEAD (no branch)"):
        return None
    for prefix in ("No commits yet on ", "Initial commit on "):
        if header.startswith(prefix):
            header = header[len(prefix):]
    name = header.split("...", 1)[0].split(" ", 1)[0]
    return _branch_from_header(name)


def parse_status(
    text: str,
    *,
    merging: bool = False,
    rebasing: bool = False,
    cherry_picking: bool = False,
) -> StatusSnapshot:
    """Parse ``git status --porcelain=v2 --branch`` output.

    Porcelain v1 lines (``XY path``) are accepted as well. The three flags
    come from marker files the caller checked; the parser itself does no I/O.
    """
    branch: Optional[ReferenceName] = None
    files: List[FileStatusEntry] = []

    for line in text.splitlines():
        if not line.strip():
            continue
        if line.startswith(_BRANCH_HEAD_PREFIX):
            branch = _branch_from_header(line[len(_BRANCH_HEAD_PREFIX):].strip())
            continue
        if line.startswith(_V1_BRANCH_PREFIX):
            branch = _branch_from_v1_header(line[len(_V1_BRANCH_PREFIX):].strip())
            continue
        if line.startswith("#"):
            continue  # branch.oid, branch.upstream, branch.ab, stash

        token, _, rest = line.partition(" ")
        entry: Optional[FileStatusEntry]
        if token in _STATUS_RECORDS:
            entry = _parse_record(line, _STATUS_RECORDS[token])
        elif token in _MARKER_RECORDS:
            entry = (
                FileStatusEntry(path=rest, status=_MARKER_RECORDS[token]) if rest else None
            )
        else:
            entry = _parse_v1_record(line)

        if entry is None:
            logger.warning("Skipping malformed status line: %r", line)
            continue
        files.append(entry)

    return StatusSnapshot(
        branch=branch,
        files=tuple(files),
        merging=merging,
        rebasing=rebasing,
        cherry_picking=cherry_picking,
    )


# --- Branches & remotes ---------------------------------------------------------

BRANCH_INFO_FORMAT = "%(refname:short) %(objectname) %(HEAD) %(upstream:short)"


def parse_branch_list(text: str) -> List[BranchRecord]:
    """Parse ``git branch --format=BRANCH_INFO_FORMAT``.

    A line whose name or hash fails validation is dropped with a warning.
    """
    branches: List[BranchRecord] = []
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 2:
            if line.strip():
                logger.warning("Skipping malformed branch line: %r", line)
            continue
        name_str, commit_str = parts[0], parts[1]
        # A non-head branch renders %(HEAD) as a blank, which split() drops.
        if len(parts) > 2 and parts[2] == "*":
            is_head, upstream = True, (parts[3] if len(parts) > 3 else None)
        else:
            is_head, upstream = False, (parts[2] if len(parts) > 2 else None)

        if not ReferenceName.is_valid(name_str):
            logger.warning("Could not parse branch name %r", name_str)
            continue
        if not ContentHash.is_valid(commit_str):
            logger.warning(
                "Could not parse commit hash %r for branch %r", commit_str, name_str
            )
            continue
        branches.append(
            BranchRecord(
                name=ReferenceName.parse(name_str),
                commit=ContentHash.parse(commit_str),
                is_head=is_head,
                upstream=upstream,
            )
        )
    return branches


def parse_branch_names(text: str) -> List[ReferenceName]:
    names: List[ReferenceName] = []
    for line in text.splitlines():
        name = line.strip()
        if not name:
            continue
        if ReferenceName.is_valid(name):
            names.append(ReferenceName.parse(name))
        else:
            logger.warning("Could not parse branch name %r", name)
    return names


def parse_remote_names(text: str) -> List[RemoteName]:
    remotes: List[RemoteName] = []
    for line in text.splitlines():
        name = line.strip()
        if not name:
            continue
        if RemoteName.is_valid(name):
            remotes.append(RemoteName.parse(name))
        else:
            logger.warning("Could not parse remote name %r", name)
    return remotes


# --- Diff stats -----------------------------------------------------------------


def _count(field: str) -> int:
    # Binary files report "-" for both counts.
    return int(field) if field.isascii() and field.isdigit() else 0


def parse_diff_stat(text: str) -> DiffSummary:
    """Parse ``git diff --numstat`` output."""
    stats: List[DiffStat] = []
    for line in text.splitlines():
        fields = line.split(None, 2)
        if len(fields) < 3:
            if line.strip():
                logger.warning("Skipping malformed numstat line: %r", line)
            continue
        added, removed, path = fields
        stats.append(DiffStat(path=path.strip(), added=_count(added), removed=_count(removed)))
    return DiffSummary(files=tuple(stats))


def parse_lines(text: str) -> List[str]:
    return text.splitlines()
