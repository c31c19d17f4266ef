"""Argument vectors for every repository operation.

Both :class:`~gitpilot.repository.Repository` and
:class:`~gitpilot.async_repository.AsyncRepository` build their git
invocations here, so the two handles can only differ in how they run them.
Validated identifiers contribute ``str(identifier)``; free-form text (commit
messages, start points) is passed through untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from gitpilot.git.parsers import BRANCH_INFO_FORMAT, COMMIT_FORMAT, LOG_FORMAT
from gitpilot.git.runner import path_argument
from gitpilot.git.types import ReferenceName, RemoteName, RemoteUrl

Pathspec = Union[str, Path]

# Marker paths below the control directory: (merging, rebasing, cherry-picking).
MERGE_MARKERS = ("MERGE_HEAD",)
REBASE_MARKERS = ("rebase-apply", "rebase-merge")
CHERRY_PICK_MARKERS = ("CHERRY_PICK_HEAD",)
CONTROL_DIR = ".git"


def _pathspecs(pathspecs: Iterable[Pathspec]) -> List[str]:
    return [path_argument(p) for p in pathspecs]


def clone(url: RemoteUrl, target: Pathspec) -> List[str]:
    return ["clone", str(url), path_argument(target)]


def init() -> List[str]:
    return ["init"]


def create_local_branch(name: ReferenceName) -> List[str]:
    return ["checkout", "-b", str(name)]


def switch_branch(name: ReferenceName) -> List[str]:
    return ["checkout", str(name)]


def create_branch_from_startpoint(name: ReferenceName, startpoint: str) -> List[str]:
    return ["checkout", "-b", str(name), startpoint]


def add(pathspecs: Iterable[Pathspec]) -> List[str]:
    return ["add", *_pathspecs(pathspecs)]


def remove(pathspecs: Iterable[Pathspec], force: bool = False) -> List[str]:
    args = ["rm"]
    if force:
        args.append("-f")
    return [*args, *_pathspecs(pathspecs)]


def commit_all(message: str) -> List[str]:
    return ["commit", "-am", message]


def commit_staged(message: str) -> List[str]:
    return ["commit", "-m", message]


def push() -> List[str]:
    return ["push"]


def push_to_upstream(remote: RemoteName, branch: ReferenceName) -> List[str]:
    return ["push", "-u", str(remote), str(branch)]


def add_remote(name: RemoteName, url: RemoteUrl) -> List[str]:
    return ["remote", "add", str(name), str(url)]


def fetch_remote(remote: RemoteName) -> List[str]:
    return ["fetch", str(remote)]


def list_branches() -> List[str]:
    return ["branch", "--list", "--format=%(refname:short)"]


def list_branches_info() -> List[str]:
    return ["branch", "--list", f"--format={BRANCH_INFO_FORMAT}"]


def list_tracked() -> List[str]:
    return ["ls-files"]


def show_remote_uri(remote: RemoteName) -> List[str]:
    return ["config", "--get", f"remote.{remote}.url"]


def list_remotes() -> List[str]:
    return ["remote"]


def get_hash(short: bool = False) -> List[str]:
    return ["rev-parse", "--short", "HEAD"] if short else ["rev-parse", "HEAD"]


def show_toplevel() -> List[str]:
    return ["rev-parse", "--show-toplevel"]


def get_commit(commit_ref: Optional[str] = None) -> List[str]:
    args = ["show", "--no-patch", f"--format={COMMIT_FORMAT}"]
    if commit_ref is not None:
        args.append(commit_ref)
    return args


def log(max_count: Optional[int] = None, revision: Optional[str] = None) -> List[str]:
    args = ["log", f"--format={LOG_FORMAT}"]
    if max_count is not None:
        args.append(f"--max-count={int(max_count)}")
    if revision is not None:
        args.append(revision)
    return args


def status() -> List[str]:
    return ["status", "--porcelain=v2", "--branch"]


def _diff(
    leading: Sequence[str],
    base: Optional[str],
    head: Optional[str],
    paths: Optional[Iterable[Pathspec]],
    staged: bool,
) -> List[str]:
    args = ["diff", *leading]
    if staged:
        args.append("--cached")
    args.extend(rev for rev in (base, head) if rev is not None)
    if paths:
        args.append("--")
        args.extend(_pathspecs(paths))
    return args


def diff_stat(
    base: Optional[str] = None,
    head: Optional[str] = None,
    paths: Optional[Iterable[Pathspec]] = None,
    staged: bool = False,
) -> List[str]:
    return _diff(["--numstat", "--no-color"], base, head, paths, staged)


def diff(
    base: Optional[str] = None,
    head: Optional[str] = None,
    paths: Optional[Iterable[Pathspec]] = None,
    staged: bool = False,
) -> List[str]:
    return _diff(["--no-color", "--no-ext-diff"], base, head, paths, staged)


def rebase(target: str) -> List[str]:
    return ["rebase", target]


def rebase_continue() -> List[str]:
    return ["rebase", "--continue"]


def rebase_abort() -> List[str]:
    return ["rebase", "--abort"]


def cherry_pick(commits: Iterable[str]) -> List[str]:
    return ["cherry-pick", *commits]


def cherry_pick_continue() -> List[str]:
    return ["cherry-pick", "--continue"]


def cherry_pick_abort() -> List[str]:
    return ["cherry-pick", "--abort"]
