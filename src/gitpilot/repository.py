"""Repository handle — one method per supported git operation (blocking)."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from gitpilot.git import commands
from gitpilot.git.diff_parser import DiffParser
from gitpilot.git.errors import NoRemoteConfigured
from gitpilot.git.models import (
    BranchRecord,
    CommitRecord,
    DiffResult,
    DiffSummary,
    StatusSnapshot,
)
from gitpilot.git.parsers import (
    parse_branch_list,
    parse_branch_names,
    parse_commit,
    parse_diff_stat,
    parse_lines,
    parse_log,
    parse_remote_names,
    parse_status,
)
from gitpilot.git.runner import ProcessRunner, SyncRunner
from gitpilot.git.types import ContentHash, ReferenceName, RemoteName, RemoteUrl

PathLike = Union[str, Path]


def path_exists(path: Path) -> bool:
    """Existence check where any OSError counts as "absent"."""
    try:
        return path.exists()
    except OSError:
        return False


def marker_paths(root: Path) -> Tuple[Tuple[Path, ...], Tuple[Path, ...], Tuple[Path, ...]]:
    """Return the (merge, rebase, cherry-pick) marker paths for *root*."""
    control = root / commands.CONTROL_DIR
    return (
        tuple(control / name for name in commands.MERGE_MARKERS),
        tuple(control / name for name in commands.REBASE_MARKERS),
        tuple(control / name for name in commands.CHERRY_PICK_MARKERS),
    )


def require_remotes(remotes: List[RemoteName]) -> List[RemoteName]:
    if not remotes:
        raise NoRemoteConfigured()
    return remotes


class Repository:
    """A local git working tree.

    The path is not checked at construction time; operations on a path that
    is not a repository fail with :class:`~gitpilot.git.errors.CommandFailed`.
    """

    __slots__ = ("_location", "_runner")

    def __init__(self, path: PathLike, runner: Optional[ProcessRunner] = None) -> None:
        self._location = Path(path)
        self._runner: ProcessRunner = runner or SyncRunner()

    @property
    def location(self) -> Path:
        return self._location

    @property
    def runner(self) -> ProcessRunner:
        return self._runner

    def __repr__(self) -> str:
        return f"Repository({str(self._location)!r})"

    def _run(self, args: Sequence[str]) -> None:
        self._runner.run(self._location, args)

    # ── construction ──────────────────────────────────────────────────────

    @classmethod
    def clone(
        cls, url: RemoteUrl, path: PathLike, runner: Optional[ProcessRunner] = None
    ) -> "Repository":
        """``git clone <url> <path>``, run from the current directory."""
        runner = runner or SyncRunner()
        runner.run(Path.cwd(), commands.clone(url, path))
        return cls(path, runner)

    @classmethod
    def init(cls, path: PathLike, runner: Optional[ProcessRunner] = None) -> "Repository":
        """``git init`` inside *path*."""
        runner = runner or SyncRunner()
        runner.run(path, commands.init())
        return cls(path, runner)

    @classmethod
    def discover(cls, path: PathLike = ".", runner: Optional[ProcessRunner] = None) -> "Repository":
        """Return a handle for the top level of the work tree containing *path*."""
        runner = runner or SyncRunner()
        top = runner.run(path, commands.show_toplevel()).strip()
        return cls(top, runner)

    # ── branches ──────────────────────────────────────────────────────────

    def create_local_branch(self, name: ReferenceName) -> None:
        self._run(commands.create_local_branch(name))

    def switch_branch(self, name: ReferenceName) -> None:
        self._run(commands.switch_branch(name))

    def create_branch_from_startpoint(self, name: ReferenceName, startpoint: str) -> None:
        self._run(commands.create_branch_from_startpoint(name, startpoint))

    def list_branches(self) -> List[ReferenceName]:
        return self._runner.run_and_decode(
            self._location, commands.list_branches(), parse_branch_names
        )

    def list_branches_info(self) -> List[BranchRecord]:
        return self._runner.run_and_decode(
            self._location, commands.list_branches_info(), parse_branch_list
        )

    # ── index & commits ───────────────────────────────────────────────────

    def add(self, pathspecs: Iterable[PathLike]) -> None:
        self._run(commands.add(pathspecs))

    def remove(self, pathspecs: Iterable[PathLike], force: bool = False) -> None:
        self._run(commands.remove(pathspecs, force))

    def stage_and_commit_all_modified(self, message: str) -> None:
        self._run(commands.commit_all(message))

    def commit_staged(self, message: str) -> None:
        self._run(commands.commit_staged(message))

    def list_tracked(self) -> List[str]:
        return self._runner.run_and_decode(self._location, commands.list_tracked(), parse_lines)

    def get_hash(self, short: bool = False) -> ContentHash:
        return self._runner.run_and_decode(
            self._location,
            commands.get_hash(short),
            lambda out: ContentHash.parse(out.strip()),
        )

    def get_commit(self, commit_ref: Optional[str] = None) -> CommitRecord:
        """Details of *commit_ref* (default ``HEAD``)."""
        return self._runner.run_and_decode(
            self._location, commands.get_commit(commit_ref), parse_commit
        )

    def log(self, max_count: Optional[int] = None, revision: Optional[str] = None) -> List[CommitRecord]:
        return self._runner.run_and_decode(
            self._location, commands.log(max_count, revision), parse_log
        )

    # ── remotes ───────────────────────────────────────────────────────────

    def push(self) -> None:
        self._run(commands.push())

    def push_to_upstream(self, remote: RemoteName, branch: ReferenceName) -> None:
        self._run(commands.push_to_upstream(remote, branch))

    def add_remote(self, name: RemoteName, url: RemoteUrl) -> None:
        self._run(commands.add_remote(name, url))

    def fetch_remote(self, remote: RemoteName) -> None:
        self._run(commands.fetch_remote(remote))

    def show_remote_uri(self, remote: RemoteName) -> RemoteUrl:
        return self._runner.run_and_decode(
            self._location,
            commands.show_remote_uri(remote),
            lambda out: RemoteUrl.parse(out.strip()),
        )

    def list_remotes(self) -> List[RemoteName]:
        """Configured remotes; raises NoRemoteConfigured when there are none."""
        remotes = self._runner.run_and_decode(
            self._location, commands.list_remotes(), parse_remote_names
        )
        return require_remotes(remotes)

    # ── working tree ──────────────────────────────────────────────────────

    def status(self) -> StatusSnapshot:
        """Parse ``git status --porcelain=v2 --branch`` plus in-progress markers."""
        output = self._runner.run(self._location, commands.status())
        merge, rebase, cherry_pick = marker_paths(self._location)
        return parse_status(
            output,
            merging=any(path_exists(p) for p in merge),
            rebasing=any(path_exists(p) for p in rebase),
            cherry_picking=any(path_exists(p) for p in cherry_pick),
        )

    def diff_stat(
        self,
        base: Optional[str] = None,
        head: Optional[str] = None,
        paths: Optional[Iterable[PathLike]] = None,
        staged: bool = False,
    ) -> DiffSummary:
        return self._runner.run_and_decode(
            self._location, commands.diff_stat(base, head, paths, staged), parse_diff_stat
        )

    def diff(
        self,
        base: Optional[str] = None,
        head: Optional[str] = None,
        paths: Optional[Iterable[PathLike]] = None,
        staged: bool = False,
    ) -> DiffResult:
        return self._runner.run_and_decode(
            self._location,
            commands.diff(base, head, paths, staged),
            lambda out: DiffParser(out).parse(),
        )

    # ── rebase & cherry-pick ──────────────────────────────────────────────

    def rebase(self, target: str) -> None:
        self._run(commands.rebase(target))

    def rebase_continue(self) -> None:
        self._run(commands.rebase_continue())

    def rebase_abort(self) -> None:
        self._run(commands.rebase_abort())

    def cherry_pick(self, commits: Iterable[str]) -> None:
        self._run(commands.cherry_pick(commits))

    def cherry_pick_continue(self) -> None:
        self._run(commands.cherry_pick_continue())

    def cherry_pick_abort(self) -> None:
        self._run(commands.cherry_pick_abort())

    # ── pass-through ──────────────────────────────────────────────────────

    def cmd(self, args: Iterable[str]) -> None:
        """Run arbitrary git arguments, discarding stdout."""
        self._run(list(args))

    def cmd_out(self, args: Iterable[str]) -> List[str]:
        """Run arbitrary git arguments and return stdout split into lines."""
        return self._runner.run_and_decode(self._location, list(args), parse_lines)
