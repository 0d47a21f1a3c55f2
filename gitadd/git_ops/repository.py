"""
Git repository access with comprehensive error handling.

Every query and mutation runs as a separate ``git`` invocation through
GitPython; command failures are translated into this module's exceptions.
"""

from pathlib import Path
from typing import Optional, Protocol, Sequence, runtime_checkable
from git import Repo, InvalidGitRepositoryError, NoSuchPathError, GitCommandError, GitCommandNotFound
from loguru import logger


class GitRepositoryError(Exception):
    """Base exception for git repository operations."""
    pass


class RepositoryUnavailable(GitRepositoryError):
    """The working tree cannot be queried (not a repository, or git is missing)."""
    pass


class SubprocessFailure(GitRepositoryError):
    """A git invocation exited non-zero."""

    def __init__(self, command: str, args: Sequence[str], stderr: str = "", status: Optional[int] = None):
        self.command = command
        self.arguments = list(args)
        self.stderr = stderr
        self.status = status
        message = f"{command} {' '.join(self.arguments)}".strip()
        if status is not None:
            message += f": exit status {status}"
        if stderr:
            message += f"\n{stderr}"
        super().__init__(message)


ExternalToolError = SubprocessFailure


@runtime_checkable
class RepositoryProvider(Protocol):
    """Queries and mutations the load cycle and staging actions rely on."""

    def status_porcelain(self) -> str:
        """Short-status report, one ``XY PATH`` line per changed path."""
        ...

    def diff_numstat(self, cached: bool = False) -> str:
        """Numstat report, HEAD..index when ``cached`` else index..worktree."""
        ...

    def add(self, paths: Sequence[str]) -> None:
        """Add the given paths to the index."""
        ...

    def reset(self, paths: Sequence[str]) -> None:
        """Reset the given paths in the index back to HEAD."""
        ...


def _clean_stderr(error) -> str:
    """Strip GitPython's ``stderr: '...'`` decoration from a command error."""
    text = (error.stderr or "").strip()
    if text.startswith("stderr:"):
        text = text[len("stderr:"):].strip()
        if len(text) >= 2 and text[0] == text[-1] == "'":
            text = text[1:-1]
    return text.strip()


def _to_failure(error) -> SubprocessFailure:
    command = error.command
    if isinstance(command, (list, tuple)):
        parts = [str(part) for part in command]
    else:
        parts = str(command).split()
    name, args = (parts[0], parts[1:]) if parts else ("git", [])
    status = error.status if isinstance(error.status, int) else None
    return SubprocessFailure(name, args, _clean_stderr(error), status)


class GitRepository:
    """GitPython-backed repository provider."""

    def __init__(self, repo_path: Optional[Path] = None):
        """Initialize Git repository."""
        self.repo_path = repo_path or Path.cwd()
        self.repo: Optional[Repo] = None
        self._initialize_repo()

    def _initialize_repo(self) -> None:
        """Initialize the Git repository object."""
        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
            logger.debug(f"Initialized Git repository at {self.repo.working_dir}")
        except (InvalidGitRepositoryError, NoSuchPathError):
            raise RepositoryUnavailable(f"Not a Git repository: {self.repo_path}")

    @property
    def is_valid(self) -> bool:
        """Check if this is a valid, non-bare Git repository."""
        return self.repo is not None and not self.repo.bare

    def _run(self, subcommand: str, *args: str) -> str:
        logger.debug(f"Executing: git {subcommand} {' '.join(args)}")
        try:
            return getattr(self.repo.git, subcommand)(*args)
        except GitCommandNotFound as e:
            raise RepositoryUnavailable(f"git executable not found: {e}")
        except GitCommandError as e:
            failure = _to_failure(e)
            logger.warning(f"git {subcommand} failed: {failure}")
            raise failure

    def status_porcelain(self) -> str:
        """Run the short-status query."""
        if not self.is_valid:
            raise RepositoryUnavailable(f"Invalid Git repository: {self.repo_path}")
        try:
            return self._run("status", "--porcelain")
        except SubprocessFailure as e:
            raise RepositoryUnavailable(f"Not a git repo or git error: {e}")

    def diff_numstat(self, cached: bool = False) -> str:
        """Run one of the two numstat queries."""
        if cached:
            return self._run("diff", "--cached", "--numstat")
        return self._run("diff", "--numstat")

    def add(self, paths: Sequence[str]) -> None:
        """Stage the given paths."""
        self._run("add", "--", *paths)
        logger.info(f"Staged {len(paths)} path(s)")

    def reset(self, paths: Sequence[str]) -> None:
        """Unstage the given paths."""
        self._run("reset", "--", *paths)
        logger.info(f"Unstaged {len(paths)} path(s)")
