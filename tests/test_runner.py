"""Tests for the process runners and the shared outcome classification."""

import asyncio
import sys
from pathlib import Path

import pytest

from gitpilot.git.errors import (
    CommandFailed,
    ExecutableNotFound,
    ExecutionFailed,
    ParseFailure,
    PathNotUtf8,
    UndecodableOutput,
)
from gitpilot.git.runner import (
    AsyncRunner,
    CapturedOutput,
    SyncRunner,
    classify_spawn_error,
    interpret,
    path_argument,
)

MISSING_EXECUTABLE = "gitpilot-no-such-executable"
WRITE_INVALID_UTF8 = "import sys; sys.stdout.buffer.write(b'\\xff\\xfe')"


class TestInterpret:
    def test_success_returns_stdout(self):
        assert interpret(CapturedOutput(0, b"hello\n", b"")) == "hello\n"

    def test_non_zero_exit(self):
        with pytest.raises(CommandFailed) as exc_info:
            interpret(CapturedOutput(128, b"out\n", b"fatal: bad\n"))
        err = exc_info.value
        assert err.stdout == "out"
        assert err.stderr == "fatal: bad"
        assert err.returncode == 128

    def test_non_zero_exit_wins_over_bad_utf8(self):
        with pytest.raises(CommandFailed) as exc_info:
            interpret(CapturedOutput(1, b"\xff", b"\xfe"))
        assert "undecodable" in exc_info.value.stdout
        assert "undecodable" in exc_info.value.stderr

    def test_undecodable_stdout(self):
        with pytest.raises(UndecodableOutput):
            interpret(CapturedOutput(0, b"\xff\xfe", b""))


class TestClassifySpawnError:
    def test_missing_executable(self):
        exc = FileNotFoundError(2, "No such file or directory", "git")
        assert isinstance(classify_spawn_error(exc, "git", "/repo"), ExecutableNotFound)

    def test_missing_working_directory(self):
        exc = FileNotFoundError(2, "No such file or directory", "/repo")
        assert isinstance(classify_spawn_error(exc, "git", "/repo"), ExecutionFailed)

    def test_other_os_errors(self):
        exc = PermissionError(13, "Permission denied", "git")
        err = classify_spawn_error(exc, "git", "/repo")
        assert isinstance(err, ExecutionFailed)
        assert "Permission denied" in err.reason


class TestPathArgument:
    def test_plain_path(self, tmp_path: Path):
        assert path_argument(tmp_path / "a b.txt") == str(tmp_path / "a b.txt")

    def test_surrogate_escaped_path(self):
        with pytest.raises(PathNotUtf8):
            path_argument("bad-\udcff-name")


class TestSyncRunner:
    def test_executable_not_found(self, tmp_path: Path):
        with pytest.raises(ExecutableNotFound):
            SyncRunner(MISSING_EXECUTABLE).run(tmp_path, ["status"])

    def test_missing_working_directory(self, tmp_path: Path):
        with pytest.raises(ExecutionFailed):
            SyncRunner().run(tmp_path / "does-not-exist", ["status"])

    def test_command_failed(self, tmp_git_repo: Path):
        with pytest.raises(CommandFailed) as exc_info:
            SyncRunner().run(tmp_git_repo, ["rev-parse", "no-such-ref"])
        assert exc_info.value.returncode != 0
        assert exc_info.value.stderr

    def test_success(self, tmp_git_repo: Path):
        out = SyncRunner().run(tmp_git_repo, ["rev-parse", "--is-inside-work-tree"])
        assert out.strip() == "true"

    def test_undecodable_output(self, tmp_path: Path):
        with pytest.raises(UndecodableOutput):
            SyncRunner(sys.executable).run(tmp_path, ["-c", WRITE_INVALID_UTF8])

    def test_arguments_are_not_shell_interpreted(self, tmp_path: Path):
        out = SyncRunner(sys.executable).run(
            tmp_path, ["-c", "import sys; print(sys.argv[1])", "$(echo hi); rm -rf /"]
        )
        assert out.strip() == "$(echo hi); rm -rf /"

    def test_decoder_error_returned_verbatim(self, tmp_git_repo: Path):
        def decode(_: str):
            raise ParseFailure("raw", "decoder said no")

        with pytest.raises(ParseFailure, match="decoder said no"):
            SyncRunner().run_and_decode(tmp_git_repo, ["status"], decode)

    def test_decoder_result(self, tmp_git_repo: Path):
        lines = SyncRunner().run_and_decode(tmp_git_repo, ["ls-files"], str.splitlines)
        assert lines == ["README.md"]


class TestAsyncRunner:
    @pytest.mark.asyncio
    async def test_executable_not_found(self, tmp_path: Path):
        with pytest.raises(ExecutableNotFound):
            await AsyncRunner(MISSING_EXECUTABLE).run(tmp_path, ["status"])

    @pytest.mark.asyncio
    async def test_command_failed(self, tmp_git_repo: Path):
        with pytest.raises(CommandFailed):
            await AsyncRunner().run(tmp_git_repo, ["rev-parse", "no-such-ref"])

    @pytest.mark.asyncio
    async def test_undecodable_output(self, tmp_path: Path):
        with pytest.raises(UndecodableOutput):
            await AsyncRunner(sys.executable).run(tmp_path, ["-c", WRITE_INVALID_UTF8])

    @pytest.mark.asyncio
    async def test_run_and_decode(self, tmp_git_repo: Path):
        lines = await AsyncRunner().run_and_decode(tmp_git_repo, ["ls-files"], str.splitlines)
        assert lines == ["README.md"]

    @pytest.mark.asyncio
    async def test_cancellation_kills_child(self, tmp_path: Path):
        runner = AsyncRunner(sys.executable)
        task = asyncio.create_task(
            runner.run(tmp_path, ["-c", "import time; time.sleep(30)"])
        )
        await asyncio.sleep(0.5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
