"""Shared fixtures: an in-memory repository provider with canned git output."""

import os
from typing import Dict, List, Optional, Sequence

import pytest
from loguru import logger

from gitadd.git_ops.repository import RepositoryUnavailable, SubprocessFailure


class FakeRepository:
    """RepositoryProvider returning canned text and recording mutations."""

    def __init__(self, status: str = "", staged: str = "", unstaged: str = ""):
        self.status = status
        self.staged = staged
        self.unstaged = unstaged
        self.calls: List[tuple] = []
        self.failures: Dict[str, Exception] = {}
        # Output to switch to after a successful add/reset
        self.after_mutation: Optional[Dict[str, str]] = None

    def fail(self, operation: str, error: Optional[Exception] = None) -> None:
        if error is None:
            if operation == "status":
                error = RepositoryUnavailable("Not a git repo or git error")
            else:
                error = SubprocessFailure("git", [operation], "fatal: simulated failure", 128)
        self.failures[operation] = error

    def _check(self, operation: str) -> None:
        self.calls.append((operation,))
        if operation in self.failures:
            raise self.failures[operation]

    def status_porcelain(self) -> str:
        self._check("status")
        return self.status

    def diff_numstat(self, cached: bool = False) -> str:
        self._check("diff_cached" if cached else "diff")
        return self.staged if cached else self.unstaged

    def _mutate(self, operation: str, paths: Sequence[str]) -> None:
        self.calls.append((operation, list(paths)))
        if operation in self.failures:
            raise self.failures[operation]
        if self.after_mutation is not None:
            self.status = self.after_mutation.get("status", self.status)
            self.staged = self.after_mutation.get("staged", self.staged)
            self.unstaged = self.after_mutation.get("unstaged", self.unstaged)

    def add(self, paths: Sequence[str]) -> None:
        self._mutate("add", paths)

    def reset(self, paths: Sequence[str]) -> None:
        self._mutate("reset", paths)

    @property
    def mutations(self) -> List[tuple]:
        return [call for call in self.calls if call[0] in ("add", "reset")]


@pytest.fixture
def make_repo():
    """Factory for FakeRepository instances with custom output."""
    return FakeRepository


@pytest.fixture
def fake_repo() -> FakeRepository:
    return FakeRepository(
        status="M  a.go\n?? b.txt\n",
        staged="4\t2\ta.go\n",
        unstaged="",
    )


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Keep config and log files out of the real home directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    for name in list(os.environ):
        if name.upper().startswith("GITADD_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop loguru sinks added by the code under test."""
    logger.remove()
    yield
    logger.remove()
