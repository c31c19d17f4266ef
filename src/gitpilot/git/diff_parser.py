"""Unified diff parser — turns ``git diff`` text into DiffFile/DiffHunk models.

Handles renames, binary markers, mode-only changes, new and deleted files,
submodule pointers, ``\\ No newline at end of file`` markers, BOM and CRLF.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from gitpilot.git.models import (
    DiffFile,
    DiffFileStatus,
    DiffHunk,
    DiffLine,
    DiffResult,
    LineType,
)

logger = logging.getLogger(__name__)

_DIFF_HEADER_RE = re.compile(r"^diff --git a/(.*) b/(.*)$")
_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_BINARY_RE = re.compile(r"^Binary files .* and .* differ$")
_RENAME_FROM_RE = re.compile(r"^rename from (.+)$")
_RENAME_TO_RE = re.compile(r"^rename to (.+)$")
_OLD_MODE_RE = re.compile(r"^old mode (\d+)$")
_NEW_MODE_RE = re.compile(r"^new mode (\d+)$")
_DELETED_FILE_RE = re.compile(r"^deleted file mode (\d+)$")
_NEW_FILE_RE = re.compile(r"^new file mode (\d+)$")
_SIMILARITY_RE = re.compile(r"^(?:similarity|dissimilarity) index \d+%$")
_INDEX_RE = re.compile(r"^index [0-9a-f]+\.\.[0-9a-f]+")
_FILE_HEADER_RE = re.compile(r"^(?:--- (?:a/|/dev/null)|\+\+\+ (?:b/|/dev/null))")
_NO_NEWLINE_RE = re.compile(r"^\\ No newline at end of file$")


def _strip_bom(line: str) -> str:
    return line.lstrip("\ufeff")


class DiffParser:
    """Parse unified diff text into a :class:`DiffResult`.

    Usage::

        result = DiffParser(diff_text).parse()
        for f in result.files:
            print(f.path, f.added_lines, f.removed_lines)
    """

    def __init__(self, diff_text: str) -> None:
        self._lines = [line.rstrip("\r") for line in diff_text.splitlines()]

    def parse(self) -> DiffResult:
        files: List[DiffFile] = []
        current: Optional[DiffFile] = None
        hunk: Optional[DiffHunk] = None
        idx = 0
        total = len(self._lines)

        while idx < total:
            raw_line = self._lines[idx]

            m = _DIFF_HEADER_RE.match(raw_line)
            if m:
                current = DiffFile(path=m.group(2))
                old_path = m.group(1)
                hunk = None
                files.append(current)
                idx = self._parse_extended_headers(current, idx + 1, total)
                if current.old_path is None and old_path != current.path:
                    current.old_path = old_path
                continue

            if current is None:
                idx += 1
                continue

            if _FILE_HEADER_RE.match(raw_line) and hunk is None:
                idx += 1
                continue

            hm = _HUNK_HEADER_RE.match(raw_line)
            if hm:
                hunk = DiffHunk(
                    old_start=int(hm.group(1)),
                    old_lines=int(hm.group(2)) if hm.group(2) is not None else 1,
                    new_start=int(hm.group(3)),
                    new_lines=int(hm.group(4)) if hm.group(4) is not None else 1,
                )
                current.hunks.append(hunk)
                idx += 1
                continue

            if hunk is None or _NO_NEWLINE_RE.match(raw_line):
                idx += 1
                continue

            if raw_line.startswith("+"):
                hunk.lines.append(DiffLine(_strip_bom(raw_line[1:]), LineType.ADDED))
                current.added_lines += 1
            elif raw_line.startswith("-"):
                hunk.lines.append(DiffLine(_strip_bom(raw_line[1:]), LineType.REMOVED))
                current.removed_lines += 1
            elif raw_line.startswith(" ") or raw_line == "":
                hunk.lines.append(DiffLine(raw_line[1:], LineType.CONTEXT))
            else:
                logger.debug("Ignoring unexpected diff line: %r", raw_line)
            idx += 1

        return DiffResult(files=files)

    def _parse_extended_headers(self, diff_file: DiffFile, idx: int, total: int) -> int:
        """Consume the header block after ``diff --git`` and return the next index."""
        while idx < total:
            sub = self._lines[idx]
            if _INDEX_RE.match(sub) or _SIMILARITY_RE.match(sub):
                pass
            elif (mm := _OLD_MODE_RE.match(sub)):
                diff_file.old_mode = mm.group(1)
                diff_file.status = DiffFileStatus.MODE_CHANGED
            elif (mm := _NEW_MODE_RE.match(sub)):
                diff_file.new_mode = mm.group(1)
            elif (mm := _DELETED_FILE_RE.match(sub)):
                diff_file.old_mode = mm.group(1)
                diff_file.status = DiffFileStatus.DELETED
            elif (mm := _NEW_FILE_RE.match(sub)):
                diff_file.new_mode = mm.group(1)
                diff_file.status = DiffFileStatus.ADDED
            elif (rm := _RENAME_FROM_RE.match(sub)):
                diff_file.old_path = rm.group(1)
                diff_file.status = DiffFileStatus.RENAMED
            elif (rt := _RENAME_TO_RE.match(sub)):
                diff_file.path = rt.group(1)
            elif _BINARY_RE.match(sub):
                diff_file.is_binary = True
            else:
                break
            idx += 1
        return idx
