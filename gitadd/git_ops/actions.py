"""
Staging actions against the repository.
"""

from typing import Iterable
from loguru import logger

from .repository import RepositoryProvider


class ActionEngine:
    """Stage and unstage paths; callers reload the file list afterwards."""

    def __init__(self, provider: RepositoryProvider):
        self.provider = provider

    def stage(self, paths: Iterable[str]) -> None:
        """Add ``paths`` to the index. An empty set is a no-op."""
        paths = list(paths)
        if not paths:
            return
        logger.debug(f"Staging {paths}")
        self.provider.add(paths)

    def unstage(self, paths: Iterable[str]) -> None:
        """Reset ``paths`` in the index back to HEAD. An empty set is a no-op."""
        paths = list(paths)
        if not paths:
            return
        logger.debug(f"Unstaging {paths}")
        self.provider.reset(paths)
