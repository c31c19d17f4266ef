"""Error taxonomy for git operations.

Every failure raised by the runner, the identifier validators and the output
parsers is a subclass of :class:`GitOperationError`, and each one keeps enough
context (captured streams, the offending raw string, the path) to explain
itself without running git again.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union


class GitOperationError(Exception):
    """Base class for every error raised by gitpilot."""


class ExecutableNotFound(GitOperationError):
    """The git executable could not be found on the search path."""

    def __init__(self, executable: str = "git") -> None:
        self.executable = executable
        super().__init__(
            f"'{executable}' command not found. Please ensure Git is installed "
            "and that its executable is on your PATH."
        )


class ExecutionFailed(GitOperationError):
    """The process could not be started for a reason other than a missing executable."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Unable to execute git process: {reason}")


class UndecodableOutput(GitOperationError):
    """git exited successfully but its stdout is not valid UTF-8."""

    def __init__(self) -> None:
        super().__init__("Unable to decode output from git executable as UTF-8")


class CommandFailed(GitOperationError):
    """git ran and exited with a non-zero status."""

    def __init__(self, stdout: str, stderr: str, returncode: int = 1) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(
            f"git failed with the following stdout: {stdout} stderr: {stderr}"
        )


class InvalidFormat(GitOperationError):
    """A raw string was rejected by an identifier validator."""

    kind = "identifier"

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"{self.kind} is invalid: {raw!r}")


class InvalidUrl(InvalidFormat):
    kind = "git URL"


class InvalidReferenceName(InvalidFormat):
    kind = "Ref name"


class InvalidContentHash(InvalidFormat):
    kind = "Commit hash"


class InvalidRemoteName(InvalidFormat):
    kind = "Remote name"


class NoRemoteConfigured(GitOperationError):
    """A remote listing found no configured remotes."""

    def __init__(self) -> None:
        super().__init__("No Git remote repository is available")


class PathNotUtf8(GitOperationError):
    """A filesystem path cannot be passed to git as a UTF-8 string argument."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = path
        super().__init__(
            f"Path contains non-UTF8 characters and cannot be used as a string argument: {path!r}"
        )


class ParseFailure(GitOperationError):
    """Output from a successful git command could not be parsed."""

    def __init__(self, raw: str, reason: str = "unparseable output") -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"Failed to parse git output ({reason}): {raw!r}")
