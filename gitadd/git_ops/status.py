"""
Short-status (``git status --porcelain``) parsing.
"""

import re
from enum import Enum
from dataclasses import dataclass
from typing import List

from loguru import logger


RENAME_SEPARATOR = " -> "

# Escapes emitted by git when it quotes a path (core.quotePath)
_QUOTED_ESCAPE = re.compile(rb"\\([0-3][0-7]{2}|.)", re.DOTALL)
_C_ESCAPES = {
    b"a": b"\a",
    b"b": b"\b",
    b"t": b"\t",
    b"n": b"\n",
    b"v": b"\v",
    b"f": b"\f",
    b"r": b"\r",
}


class StatusCode(str, Enum):
    """One column of a porcelain status line."""

    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    UNMERGED = "U"
    UNTRACKED = "?"
    CLEAN = " "
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN

    @classmethod
    def from_char(cls, char: str) -> "StatusCode":
        return cls(char)

    @property
    def symbol(self) -> str:
        """Single character used when rendering the code."""
        if self is StatusCode.CLEAN:
            return "-"
        if self is StatusCode.UNKNOWN:
            return "~"
        return self.value

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    StatusCode.MODIFIED: "modified",
    StatusCode.ADDED: "added",
    StatusCode.DELETED: "deleted",
    StatusCode.RENAMED: "renamed",
    StatusCode.COPIED: "copied",
    StatusCode.UNMERGED: "updated",
    StatusCode.UNTRACKED: "untracked",
    StatusCode.CLEAN: "clean",
    StatusCode.UNKNOWN: "unknown",
}


@dataclass(frozen=True)
class StatusEntry:
    """A single path reported by the short-status listing."""

    path: str
    index: StatusCode
    worktree: StatusCode
    raw_line: str = ""


def _unescape(match) -> bytes:
    token = match.group(1)
    if len(token) == 3:
        return bytes([int(token, 8)])
    return _C_ESCAPES.get(token, token)


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of a path.

    Paths containing spaces, quotes, backslashes, control or non-ASCII
    characters are printed as ``"..."`` with escapes; octal escapes are
    UTF-8 bytes. Unquoted paths are returned unchanged.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    raw = _QUOTED_ESCAPE.sub(_unescape, path[1:-1].encode("utf-8"))
    return raw.decode("utf-8", errors="surrogateescape")


def parse_status_line(line: str):
    """Parse one ``XY PATH`` line, returning None for lines that are too short."""
    if not line.strip() or len(line) < 3:
        return None

    path = line[3:].strip()
    # Renames and copies list "old -> new"; only the destination is kept
    if RENAME_SEPARATOR in path:
        path = path.rsplit(RENAME_SEPARATOR, 1)[1].strip()

    return StatusEntry(
        path=unquote_path(path),
        index=StatusCode.from_char(line[0]),
        worktree=StatusCode.from_char(line[1]),
        raw_line=line,
    )


def parse_status(output: str) -> List[StatusEntry]:
    """Parse a full short-status report, preserving the listing order."""
    entries = []
    for line in output.split("\n"):
        entry = parse_status_line(line)
        if entry is None:
            if line.strip():
                logger.debug(f"Skipping malformed status line: {line!r}")
            continue
        entries.append(entry)
    return entries
