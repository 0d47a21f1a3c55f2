"""
Aggregation of ``git diff --numstat`` reports into per-path line totals.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from loguru import logger

from .status import unquote_path


BINARY_SENTINEL = "-"

# "prefix/{old => new}/suffix" as printed by numstat for renames
_BRACE_RENAME = re.compile(r"^(?P<prefix>.*)\{(?P<old>[^{}]*) => (?P<new>[^{}]*)\}(?P<suffix>.*)$")
_PLAIN_RENAME = " => "


@dataclass
class NumstatTotals:
    """Added/deleted line totals and binary flags keyed by destination path."""

    added: Dict[str, int] = field(default_factory=dict)
    deleted: Dict[str, int] = field(default_factory=dict)
    binary: Dict[str, bool] = field(default_factory=dict)

    def added_for(self, path: str) -> int:
        return self.added.get(path, 0)

    def deleted_for(self, path: str) -> int:
        return self.deleted.get(path, 0)

    def is_binary(self, path: str) -> bool:
        return self.binary.get(path, False)


def destination_path(path: str) -> str:
    """Resolve numstat rename notation to the destination path."""
    match = _BRACE_RENAME.match(path)
    if match:
        resolved = match.group("prefix") + match.group("new") + match.group("suffix")
        if not match.group("new"):
            # An empty destination side leaves a doubled or leading separator
            resolved = resolved.replace("//", "/").lstrip("/")
        return resolved
    if _PLAIN_RENAME in path:
        return path.rsplit(_PLAIN_RENAME, 1)[1]
    return path


def _parse_count(value: str) -> Optional[int]:
    try:
        count = int(value)
    except ValueError:
        return None
    return count if count >= 0 else None


def accumulate_numstat(totals: NumstatTotals, output: str) -> NumstatTotals:
    """Add one numstat report into ``totals`` and return it."""
    if not output.strip():
        return totals

    for line in output.rstrip("\n").split("\n"):
        # <added>\t<deleted>\t<path>, renames may carry "<old>\t<new>"
        fields = line.split("\t")
        if len(fields) < 3:
            if line.strip():
                logger.debug(f"Skipping malformed numstat line: {line!r}")
            continue

        added_field, deleted_field = fields[0], fields[1]
        path = unquote_path(destination_path(fields[-1]))

        if added_field == BINARY_SENTINEL or deleted_field == BINARY_SENTINEL:
            totals.binary[path] = True

        added = _parse_count(added_field)
        if added is not None:
            totals.added[path] = totals.added.get(path, 0) + added

        deleted = _parse_count(deleted_field)
        if deleted is not None:
            totals.deleted[path] = totals.deleted.get(path, 0) + deleted

    return totals


def aggregate_numstat(staged_output: str, unstaged_output: str) -> NumstatTotals:
    """Sum the HEAD..index and index..worktree reports into one set of totals."""
    totals = NumstatTotals()
    accumulate_numstat(totals, staged_output)
    accumulate_numstat(totals, unstaged_output)
    return totals
