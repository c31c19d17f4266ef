"""Git subprocess runners — blocking and asyncio variants.

Both runners hand their raw outcome to the same two functions,
:func:`classify_spawn_error` and :func:`interpret`, so the decision of what a
given (spawn result, exit status, stdout bytes) triple means lives in one
place. Only the I/O primitives differ.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Protocol, Sequence, TypeVar, Union, cast

from gitpilot.git.errors import (
    CommandFailed,
    ExecutableNotFound,
    ExecutionFailed,
    GitOperationError,
    PathNotUtf8,
    UndecodableOutput,
)

logger = logging.getLogger(__name__)

R = TypeVar("R")
PathLike = Union[str, Path]

DEFAULT_EXECUTABLE = "git"


@dataclass(frozen=True)
class CapturedOutput:
    """Raw result of a finished git process."""

    returncode: int
    stdout: bytes
    stderr: bytes


def path_argument(path: PathLike) -> str:
    """Return *path* as a str argument, or raise PathNotUtf8."""
    text = str(path)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        # os.fsdecode() maps undecodable bytes to lone surrogates.
        raise PathNotUtf8(path) from exc
    return text


def _decode_stream(data: bytes, name: str) -> str:
    try:
        return data.decode("utf-8").rstrip()
    except UnicodeDecodeError:
        return f"[{name}: undecodable UTF-8]"


def classify_spawn_error(exc: OSError, executable: str, cwd: PathLike) -> GitOperationError:
    """Map an OSError raised while starting the process to an error kind."""
    if isinstance(exc, FileNotFoundError):
        # Popen reports a missing cwd as FileNotFoundError too; its filename
        # is the directory rather than the executable.
        if exc.filename is None or str(exc.filename) != str(cwd):
            return ExecutableNotFound(executable)
    logger.warning("Failed to execute %s in %s: %s", executable, cwd, exc)
    return ExecutionFailed(str(exc))


def interpret(captured: CapturedOutput) -> str:
    """Turn a finished process into decoded stdout or raise the matching error."""
    if captured.returncode != 0:
        raise CommandFailed(
            stdout=_decode_stream(captured.stdout, "stdout"),
            stderr=_decode_stream(captured.stderr, "stderr"),
            returncode=captured.returncode,
        )
    try:
        return captured.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise UndecodableOutput() from exc


class ProcessRunner(Protocol):
    """Blocking capability: run git and return (or decode) its stdout."""

    executable: str

    def run(self, cwd: PathLike, args: Sequence[str]) -> str:
        ...

    def run_and_decode(
        self, cwd: PathLike, args: Sequence[str], decode: Callable[[str], R]
    ) -> R:
        ...


class AsyncProcessRunner(Protocol):
    """Non-blocking capability with the same contract as :class:`ProcessRunner`."""

    executable: str

    def run(self, cwd: PathLike, args: Sequence[str]) -> Awaitable[str]:
        ...

    def run_and_decode(
        self, cwd: PathLike, args: Sequence[str], decode: Callable[[str], R]
    ) -> Awaitable[R]:
        ...


class SyncRunner:
    """Runs git with :func:`subprocess.run`, blocking the calling thread."""

    def __init__(self, executable: str = DEFAULT_EXECUTABLE) -> None:
        self.executable = executable

    def capture(self, cwd: PathLike, args: Sequence[str]) -> CapturedOutput:
        argv = [self.executable, *args]
        logger.debug("running %s (cwd=%s)", argv, cwd)
        try:
            result = subprocess.run(argv, cwd=cwd, capture_output=True)
        except OSError as exc:
            raise classify_spawn_error(exc, self.executable, cwd) from exc
        return CapturedOutput(result.returncode, result.stdout, result.stderr)

    def run(self, cwd: PathLike, args: Sequence[str]) -> str:
        return interpret(self.capture(cwd, args))

    def run_and_decode(
        self, cwd: PathLike, args: Sequence[str], decode: Callable[[str], R]
    ) -> R:
        return decode(self.run(cwd, args))


class AsyncRunner:
    """Runs git with :func:`asyncio.create_subprocess_exec`.

    The coroutine only suspends while waiting for the child's output. If the
    awaiting task is cancelled the child is killed (best effort) and reaped
    before the cancellation propagates.
    """

    def __init__(self, executable: str = DEFAULT_EXECUTABLE) -> None:
        self.executable = executable

    async def capture(self, cwd: PathLike, args: Sequence[str]) -> CapturedOutput:
        logger.debug("running %s (cwd=%s)", [self.executable, *args], cwd)
        try:
            proc = await asyncio.create_subprocess_exec(
                self.executable,
                *args,
                cwd=cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise classify_spawn_error(exc, self.executable, cwd) from exc

        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            if proc.returncode is None:
                try:
                    proc.kill()
                except ProcessLookupError:
                    pass
                await asyncio.shield(proc.wait())
            raise
        # communicate() waits for exit, so returncode is set.
        return CapturedOutput(cast(int, proc.returncode), stdout, stderr)

    async def run(self, cwd: PathLike, args: Sequence[str]) -> str:
        return interpret(await self.capture(cwd, args))

    async def run_and_decode(
        self, cwd: PathLike, args: Sequence[str], decode: Callable[[str], R]
    ) -> R:
        return decode(await self.run(cwd, args))
