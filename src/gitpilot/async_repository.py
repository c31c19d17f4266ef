"""Asyncio repository handle — same operations as :class:`Repository`, as coroutines.

Each call owns its own subprocess and buffers, so any number of operations on
one handle may be awaited concurrently. There are no timeouts here; wrap a
call in :func:`asyncio.wait_for` to bound it.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from gitpilot.git import commands
from gitpilot.git.diff_parser import DiffParser
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
from gitpilot.git.runner import AsyncProcessRunner, AsyncRunner
from gitpilot.git.types import ContentHash, ReferenceName, RemoteName, RemoteUrl
from gitpilot.repository import marker_paths, path_exists, require_remotes

PathLike = Union[str, Path]


async def _any_exists(paths: Tuple[Path, ...]) -> bool:
    for path in paths:
        if await asyncio.to_thread(path_exists, path):
            return True
    return False


class AsyncRepository:
    """A local git working tree driven through :class:`AsyncRunner`."""

    __slots__ = ("_location", "_runner")

    def __init__(self, path: PathLike, runner: Optional[AsyncProcessRunner] = None) -> None:
        self._location = Path(path)
        self._runner: AsyncProcessRunner = runner or AsyncRunner()

    @property
    def location(self) -> Path:
        return self._location

    @property
    def runner(self) -> AsyncProcessRunner:
        return self._runner

    def __repr__(self) -> str:
        return f"AsyncRepository({str(self._location)!r})"

    async def _run(self, args: Sequence[str]) -> None:
        await self._runner.run(self._location, args)

    # ── construction ──────────────────────────────────────────────────────

    @classmethod
    async def clone(
        cls, url: RemoteUrl, path: PathLike, runner: Optional[AsyncProcessRunner] = None
    ) -> "AsyncRepository":
        runner = runner or AsyncRunner()
        await runner.run(Path.cwd(), commands.clone(url, path))
        return cls(path, runner)

    @classmethod
    async def init(
        cls, path: PathLike, runner: Optional[AsyncProcessRunner] = None
    ) -> "AsyncRepository":
        runner = runner or AsyncRunner()
        await runner.run(path, commands.init())
        return cls(path, runner)

    @classmethod
    async def discover(
        cls, path: PathLike = ".", runner: Optional[AsyncProcessRunner] = None
    ) -> "AsyncRepository":
        runner = runner or AsyncRunner()
        top = (await runner.run(path, commands.show_toplevel())).strip()
        return cls(top, runner)

    # ── branches ──────────────────────────────────────────────────────────

    async def create_local_branch(self, name: ReferenceName) -> None:
        await self._run(commands.create_local_branch(name))

    async def switch_branch(self, name: ReferenceName) -> None:
        await self._run(commands.switch_branch(name))

    async def create_branch_from_startpoint(self, name: ReferenceName, startpoint: str) -> None:
        await self._run(commands.create_branch_from_startpoint(name, startpoint))

    async def list_branches(self) -> List[ReferenceName]:
        return await self._runner.run_and_decode(
            self._location, commands.list_branches(), parse_branch_names
        )

    async def list_branches_info(self) -> List[BranchRecord]:
        return await self._runner.run_and_decode(
            self._location, commands.list_branches_info(), parse_branch_list
        )

    # ── index & commits ───────────────────────────────────────────────────

    async def add(self, pathspecs: Iterable[PathLike]) -> None:
        await self._run(commands.add(pathspecs))

    async def remove(self, pathspecs: Iterable[PathLike], force: bool = False) -> None:
        await self._run(commands.remove(pathspecs, force))

    async def stage_and_commit_all_modified(self, message: str) -> None:
        await self._run(commands.commit_all(message))

    async def commit_staged(self, message: str) -> None:
        await self._run(commands.commit_staged(message))

    async def list_tracked(self) -> List[str]:
        return await self._runner.run_and_decode(
            self._location, commands.list_tracked(), parse_lines
        )

    async def get_hash(self, short: bool = False) -> ContentHash:
        return await self._runner.run_and_decode(
            self._location,
            commands.get_hash(short),
            lambda out: ContentHash.parse(out.strip()),
        )

    async def get_commit(self, commit_ref: Optional[str] = None) -> CommitRecord:
        return await self._runner.run_and_decode(
            self._location, commands.get_commit(commit_ref), parse_commit
        )

    async def log(
        self, max_count: Optional[int] = None, revision: Optional[str] = None
    ) -> List[CommitRecord]:
        return await self._runner.run_and_decode(
            self._location, commands.log(max_count, revision), parse_log
        )

    # ── remotes ───────────────────────────────────────────────────────────

    async def push(self) -> None:
        await self._run(commands.push())

    async def push_to_upstream(self, remote: RemoteName, branch: ReferenceName) -> None:
        await self._run(commands.push_to_upstream(remote, branch))

    async def add_remote(self, name: RemoteName, url: RemoteUrl) -> None:
        await self._run(commands.add_remote(name, url))

    async def fetch_remote(self, remote: RemoteName) -> None:
        await self._run(commands.fetch_remote(remote))

    async def show_remote_uri(self, remote: RemoteName) -> RemoteUrl:
        return await self._runner.run_and_decode(
            self._location,
            commands.show_remote_uri(remote),
            lambda out: RemoteUrl.parse(out.strip()),
        )

    async def list_remotes(self) -> List[RemoteName]:
        remotes = await self._runner.run_and_decode(
            self._location, commands.list_remotes(), parse_remote_names
        )
        return require_remotes(remotes)

    # ── working tree ──────────────────────────────────────────────────────

    async def status(self) -> StatusSnapshot:
        output = await self._runner.run(self._location, commands.status())
        merge, rebase, cherry_pick = marker_paths(self._location)
        return parse_status(
            output,
            merging=await _any_exists(merge),
            rebasing=await _any_exists(rebase),
            cherry_picking=await _any_exists(cherry_pick),
        )

    async def diff_stat(
        self,
        base: Optional[str] = None,
        head: Optional[str] = None,
        paths: Optional[Iterable[PathLike]] = None,
        staged: bool = False,
    ) -> DiffSummary:
        return await self._runner.run_and_decode(
            self._location, commands.diff_stat(base, head, paths, staged), parse_diff_stat
        )

    async def diff(
        self,
        base: Optional[str] = None,
        head: Optional[str] = None,
        paths: Optional[Iterable[PathLike]] = None,
        staged: bool = False,
    ) -> DiffResult:
        return await self._runner.run_and_decode(
            self._location,
            commands.diff(base, head, paths, staged),
            lambda out: DiffParser(out).parse(),
        )

    # ── rebase & cherry-pick ──────────────────────────────────────────────

    async def rebase(self, target: str) -> None:
        await self._run(commands.rebase(target))

    async def rebase_continue(self) -> None:
        await self._run(commands.rebase_continue())

    async def rebase_abort(self) -> None:
        await self._run(commands.rebase_abort())

    async def cherry_pick(self, commits: Iterable[str]) -> None:
        await self._run(commands.cherry_pick(commits))

    async def cherry_pick_continue(self) -> None:
        await self._run(commands.cherry_pick_continue())

    async def cherry_pick_abort(self) -> None:
        await self._run(commands.cherry_pick_abort())

    # ── pass-through ──────────────────────────────────────────────────────

    async def cmd(self, args: Iterable[str]) -> None:
        await self._run(list(args))

    async def cmd_out(self, args: Iterable[str]) -> List[str]:
        return await self._runner.run_and_decode(self._location, list(args), parse_lines)
