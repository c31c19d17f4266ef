"""JSON reporter — result models to JSON-serialisable dicts."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from gitpilot.git.models import (
    BranchRecord,
    CommitRecord,
    DiffSummary,
    StatusSnapshot,
)
from gitpilot.git.types import RemoteName


def _opt(value: Any) -> Any:
    return str(value) if value is not None else None


def commit_to_dict(commit: CommitRecord) -> Dict[str, Any]:
    return {
        "hash": str(commit.hash),
        "short_hash": str(commit.short_hash),
        "author_name": commit.author_name,
        "author_email": commit.author_email,
        "timestamp": commit.timestamp,
        "date": commit.date.isoformat(),
        "message": commit.message,
        "parents": [str(p) for p in commit.parents],
    }


def status_to_dict(status: StatusSnapshot) -> Dict[str, Any]:
    return {
        "branch": _opt(status.branch),
        "is_clean": status.is_clean,
        "merging": status.merging,
        "rebasing": status.rebasing,
        "cherry_picking": status.cherry_picking,
        "files": [
            {
                "path": entry.path,
                "status": entry.status.value,
                **({"original_path": entry.original_path} if entry.original_path else {}),
            }
            for entry in status.files
        ],
    }


def branches_to_list(branches: List[BranchRecord]) -> List[Dict[str, Any]]:
    return [
        {
            "name": str(b.name),
            "commit": str(b.commit),
            "is_head": b.is_head,
            "upstream": b.upstream,
        }
        for b in branches
    ]


def diff_summary_to_dict(summary: DiffSummary) -> Dict[str, Any]:
    return {
        "total_added": summary.total_added,
        "total_removed": summary.total_removed,
        "files": [
            {"path": s.path, "added": s.added, "removed": s.removed} for s in summary.files
        ],
    }


def remotes_to_list(remotes: List[RemoteName]) -> List[str]:
    return [str(r) for r in remotes]


def render(data: Any) -> str:
    """Return formatted JSON string."""
    return json.dumps(data, indent=2)
