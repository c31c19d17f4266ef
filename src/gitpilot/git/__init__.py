"""Git interface layer — runners, identifier types, parsers, models."""

from gitpilot.git.diff_parser import DiffParser
from gitpilot.git.errors import (
    CommandFailed,
    ExecutableNotFound,
    ExecutionFailed,
    GitOperationError,
    InvalidContentHash,
    InvalidFormat,
    InvalidReferenceName,
    InvalidRemoteName,
    InvalidUrl,
    NoRemoteConfigured,
    ParseFailure,
    PathNotUtf8,
    UndecodableOutput,
)
from gitpilot.git.models import (
    BranchRecord,
    CommitRecord,
    DiffFile,
    DiffHunk,
    DiffLine,
    DiffResult,
    DiffStat,
    DiffSummary,
    FileStatus,
    FileStatusEntry,
    LineType,
    StatusSnapshot,
)
from gitpilot.git.runner import (
    AsyncProcessRunner,
    AsyncRunner,
    CapturedOutput,
    ProcessRunner,
    SyncRunner,
)
from gitpilot.git.types import ContentHash, ReferenceName, RemoteName, RemoteUrl

__all__ = [
    "AsyncProcessRunner",
    "AsyncRunner",
    "BranchRecord",
    "CapturedOutput",
    "CommandFailed",
    "CommitRecord",
    "ContentHash",
    "DiffFile",
    "DiffHunk",
    "DiffLine",
    "DiffParser",
    "DiffResult",
    "DiffStat",
    "DiffSummary",
    "ExecutableNotFound",
    "ExecutionFailed",
    "FileStatus",
    "FileStatusEntry",
    "GitOperationError",
    "InvalidContentHash",
    "InvalidFormat",
    "InvalidReferenceName",
    "InvalidRemoteName",
    "InvalidUrl",
    "LineType",
    "NoRemoteConfigured",
    "ParseFailure",
    "PathNotUtf8",
    "ProcessRunner",
    "ReferenceName",
    "RemoteName",
    "RemoteUrl",
    "StatusSnapshot",
    "SyncRunner",
    "UndecodableOutput",
]
