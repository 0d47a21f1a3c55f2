"""
Reconciliation of status and numstat data into per-file change records.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple
from loguru import logger

from .status import StatusCode, StatusEntry, parse_status
from .numstat import NumstatTotals, aggregate_numstat
from .repository import RepositoryProvider


@dataclass(frozen=True)
class FileChange:
    """Represents a single path with pending changes."""

    path: str
    index_status: StatusCode
    worktree_status: StatusCode
    added: int = 0
    deleted: int = 0
    binary: bool = False
    raw_line: str = ""

    @property
    def is_unstaged(self) -> bool:
        return self.worktree_status is not StatusCode.CLEAN

    @property
    def has_counts(self) -> bool:
        return self.added > 0 or self.deleted > 0


def reconcile(entries: Iterable[StatusEntry], totals: NumstatTotals) -> Tuple[FileChange, ...]:
    """Join status entries with numstat totals by path, keeping status order.

    Paths known only to numstat are ignored; the displayed set is always
    driven by the status listing.
    """
    return tuple(
        FileChange(
            path=entry.path,
            index_status=entry.index,
            worktree_status=entry.worktree,
            added=totals.added_for(entry.path),
            deleted=totals.deleted_for(entry.path),
            binary=totals.is_binary(entry.path),
            raw_line=entry.raw_line,
        )
        for entry in entries
    )


def load_file_changes(provider: RepositoryProvider) -> Tuple[FileChange, ...]:
    """Run one full load cycle: status, both numstat reports, then the join.

    Any query failure aborts the whole cycle; nothing partial is returned.
    """
    entries = parse_status(provider.status_porcelain())
    totals = aggregate_numstat(
        provider.diff_numstat(cached=True),
        provider.diff_numstat(cached=False),
    )
    changes = reconcile(entries, totals)
    logger.debug(f"Loaded {len(changes)} file change(s)")
    return changes
