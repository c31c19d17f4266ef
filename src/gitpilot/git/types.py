"""Validated identifiers — remote URLs, reference names, hashes, remote names.

Each type is a thin immutable wrapper around the accepted string. The only way
to build one is ``Type.parse(raw)``, which raises the matching
:class:`~gitpilot.git.errors.InvalidFormat` subclass on bad input, so anything
that reaches a git argument list has already passed its format check.
"""

from __future__ import annotations

import re
from functools import total_ordering
from typing import ClassVar, Type, TypeVar

from gitpilot.git.errors import (
    InvalidContentHash,
    InvalidFormat,
    InvalidReferenceName,
    InvalidRemoteName,
    InvalidUrl,
)

_T = TypeVar("_T", bound="_Identifier")

# Adapted from https://github.com/jonschlinkert/is-git-url
_GIT_URL_RE = re.compile(
    r"^(?:git|ssh|https?|git@[-\w.]+):(//)?(.*?)(\.git)(/?|\#[-\d\w._]+?)$"
)
_CONTENT_HASH_RE = re.compile(r"^[0-9a-fA-F]{4,64}$")

_INVALID_REFERENCE_CHARS = frozenset(" ~^:\\?[]")
_INVALID_REFERENCE_SEQUENCES = ("..", "/.", "@{", "//", "/*")


def _has_control_char(value: str) -> bool:
    return any(ord(c) < 0x20 or ord(c) == 0x7F for c in value)


def is_valid_reference_name(name: str) -> bool:
    """Approximate ``git check-ref-format`` for a branch-like name.

    Leading ``-`` is always rejected so a name can never be read as an option.
    """
    if not name or name == "@":
        return False
    if name.startswith(("-", ".", "/")) or name.endswith((".", "/")):
        return False
    if name.endswith(".lock"):
        return False
    if _has_control_char(name):
        return False
    if any(c in _INVALID_REFERENCE_CHARS for c in name):
        return False
    return not any(seq in name for seq in _INVALID_REFERENCE_SEQUENCES)


def is_valid_remote_url(url: str) -> bool:
    return _GIT_URL_RE.fullmatch(url) is not None


def is_valid_content_hash(value: str) -> bool:
    return _CONTENT_HASH_RE.fullmatch(value) is not None


def is_valid_remote_name(name: str) -> bool:
    if any(c.isspace() for c in name):
        return False
    return is_valid_reference_name(name)


@total_ordering
class _Identifier:
    """Shared behaviour: equality, ordering and display follow the raw string."""

    __slots__ = ("_value",)

    error: ClassVar[Type[InvalidFormat]] = InvalidFormat

    def __init__(self, value: str) -> None:
        # Only parse() should call this.
        object.__setattr__(self, "_value", value)

    @staticmethod
    def _check(raw: str) -> bool:
        raise NotImplementedError

    @classmethod
    def is_valid(cls, raw: str) -> bool:
        return isinstance(raw, str) and cls._check(raw)

    @classmethod
    def parse(cls: Type[_T], raw: str) -> _T:
        """Validate *raw* and wrap it, raising ``cls.error`` on failure."""
        if not cls.is_valid(raw):
            raise cls.error(raw)
        return cls(raw)

    @property
    def value(self) -> str:
        return self._value

    def __setattr__(self, name, value) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __eq__(self, other) -> bool:
        if type(other) is type(self):
            return self._value == other._value
        return NotImplemented

    def __lt__(self, other) -> bool:
        if type(other) is type(self):
            return self._value < other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._value))


class RemoteUrl(_Identifier):
    """A git remote URL: ``git://``, ``ssh://``, ``http(s)://`` or ``git@host:path``.

    Local paths and ``file://`` URLs are rejected.
    """

    __slots__ = ()
    error = InvalidUrl
    _check = staticmethod(is_valid_remote_url)


class ReferenceName(_Identifier):
    """A branch (or other reference) name."""

    __slots__ = ()
    error = InvalidReferenceName
    _check = staticmethod(is_valid_reference_name)


class ContentHash(_Identifier):
    """A full or abbreviated object hash (4 to 64 hex characters)."""

    __slots__ = ()
    error = InvalidContentHash
    _check = staticmethod(is_valid_content_hash)


class RemoteName(_Identifier):
    """The name of a configured remote, e.g. ``origin``."""

    __slots__ = ()
    error = InvalidRemoteName
    _check = staticmethod(is_valid_remote_name)
