"""GitPilot — a typed wrapper around the git command-line interface."""

from gitpilot.async_repository import AsyncRepository
from gitpilot.git.errors import GitOperationError
from gitpilot.git.types import ContentHash, ReferenceName, RemoteName, RemoteUrl
from gitpilot.repository import Repository

__version__ = "0.2.0"

__all__ = [
    "AsyncRepository",
    "ContentHash",
    "GitOperationError",
    "ReferenceName",
    "RemoteName",
    "RemoteUrl",
    "Repository",
    "__version__",
]
