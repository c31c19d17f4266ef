"""Integration tests for AsyncRepository."""

import asyncio
from pathlib import Path

import pytest

from gitpilot.async_repository import AsyncRepository
from gitpilot.git.errors import CommandFailed, NoRemoteConfigured
from gitpilot.git.models import FileStatus
from gitpilot.git.types import ReferenceName, RemoteName, RemoteUrl
from gitpilot.repository import Repository


@pytest.fixture
def arepo(tmp_git_repo: Path) -> AsyncRepository:
    return AsyncRepository(tmp_git_repo)


class TestAsyncRepository:
    @pytest.mark.asyncio
    async def test_matches_blocking_handle(self, arepo: AsyncRepository):
        blocking = Repository(arepo.location)
        assert await arepo.get_hash() == blocking.get_hash()
        assert await arepo.get_commit() == blocking.get_commit()
        assert await arepo.status() == blocking.status()
        assert await arepo.list_branches_info() == blocking.list_branches_info()

    @pytest.mark.asyncio
    async def test_init_and_discover(self, tmp_path: Path):
        target = tmp_path / "fresh"
        target.mkdir()
        await AsyncRepository.init(target)
        sub = target / "nested"
        sub.mkdir()
        found = await AsyncRepository.discover(sub)
        assert found.location.resolve() == target.resolve()

    @pytest.mark.asyncio
    async def test_commit_flow(self, arepo: AsyncRepository):
        (arepo.location / "a.txt").write_text("a\n")
        await arepo.add(["a.txt"])
        await arepo.commit_staged("add a")
        commits = await arepo.log(max_count=2)
        assert [c.message for c in commits] == ["add a", "init"]
        assert await arepo.list_tracked() == ["README.md", "a.txt"]

    @pytest.mark.asyncio
    async def test_status_entries_and_markers(self, arepo: AsyncRepository):
        (arepo.location / "new.txt").write_text("n\n")
        (arepo.location / ".git" / "MERGE_HEAD").write_text(str(await arepo.get_hash()) + "\n")
        snapshot = await arepo.status()
        assert [(e.path, e.status) for e in snapshot.files] == [("new.txt", FileStatus.UNTRACKED)]
        assert snapshot.merging
        assert not snapshot.is_clean

    @pytest.mark.asyncio
    async def test_branches(self, arepo: AsyncRepository):
        await arepo.create_local_branch(ReferenceName.parse("topic"))
        await arepo.switch_branch(ReferenceName.parse("main"))
        names = await arepo.list_branches()
        assert [str(n) for n in names] == ["main", "topic"]

    @pytest.mark.asyncio
    async def test_remotes(self, arepo: AsyncRepository):
        with pytest.raises(NoRemoteConfigured):
            await arepo.list_remotes()
        url = RemoteUrl.parse("https://github.com/example/project.git")
        await arepo.add_remote(RemoteName.parse("origin"), url)
        assert await arepo.list_remotes() == [RemoteName.parse("origin")]
        assert await arepo.show_remote_uri(RemoteName.parse("origin")) == url

    @pytest.mark.asyncio
    async def test_diffs(self, arepo: AsyncRepository):
        (arepo.location / "README.md").write_text("# Test\nextra\n")
        summary = await arepo.diff_stat()
        assert summary.total_added == 1
        result = await arepo.diff()
        assert result.files[0].path == "README.md"

    @pytest.mark.asyncio
    async def test_command_failed(self, arepo: AsyncRepository):
        with pytest.raises(CommandFailed):
            await arepo.cmd(["no-such-subcommand"])
        assert await arepo.cmd_out(["ls-files"]) == ["README.md"]

    @pytest.mark.asyncio
    async def test_concurrent_operations(self, arepo: AsyncRepository):
        results = await asyncio.gather(
            arepo.get_hash(),
            arepo.status(),
            arepo.list_tracked(),
            arepo.get_commit(),
            arepo.list_branches_info(),
        )
        head, snapshot, tracked, commit, branches = results
        assert commit.hash == head
        assert snapshot.is_clean
        assert tracked == ["README.md"]
        assert branches[0].commit == head

    @pytest.mark.asyncio
    async def test_failure_does_not_affect_siblings(self, arepo: AsyncRepository):
        good, bad = await asyncio.gather(
            arepo.list_tracked(),
            arepo.get_commit("no-such-ref"),
            return_exceptions=True,
        )
        assert good == ["README.md"]
        assert isinstance(bad, CommandFailed)
