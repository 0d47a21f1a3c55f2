"""
Core gitadd engine that orchestrates all components.
"""

from pathlib import Path
from typing import Optional, Tuple
from rich.live import Live
from loguru import logger

from .config.settings import Settings
from .git_ops.actions import ActionEngine
from .git_ops.reconcile import FileChange, load_file_changes
from .git_ops.repository import GitRepository, RepositoryProvider
from .state import BrowserState, StateMachine, filter_files
from .ui.console import GitAddConsole
from .ui.keys import KeyReader, event_for_key, is_interactive_terminal


class GitAdd:
    """Core gitadd application engine."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        repo_path: Optional[Path] = None,
        provider: Optional[RepositoryProvider] = None,
        console: Optional[GitAddConsole] = None,
    ):
        """Initialize gitadd with settings and repository."""
        self.settings = settings or Settings()
        self.provider = provider or GitRepository(repo_path or self.settings.git.repo_path)
        self.engine = ActionEngine(self.provider)
        self.machine = StateMachine(self.engine, self.load)
        self.console = console or GitAddConsole(self.settings)

        logger.info("gitadd initialized")

    def load(self) -> Tuple[FileChange, ...]:
        """Run one load cycle against the repository."""
        return load_file_changes(self.provider)

    def start(self, filter_text: Optional[str] = None) -> BrowserState:
        """Initial load; failures here are fatal and propagate to the caller."""
        if filter_text is None:
            filter_text = self.settings.ui.initial_filter
        files = self.load()
        logger.info(f"Loaded {len(files)} changed path(s)")
        return BrowserState.initial(files, filter_text)

    def run(self, filter_text: Optional[str] = None) -> BrowserState:
        """Run the interactive session until the user quits."""
        if not is_interactive_terminal():
            raise GitAddError("Interactive mode needs a terminal on stdin; try `gitadd list`")

        state = self.start(filter_text)

        with KeyReader() as keys, Live(
            self.console.render(state),
            console=self.console.console,
            screen=True,
            auto_refresh=False,
        ) as live:
            while not state.done:
                event = event_for_key(keys.read_key(), state)
                if event is None:
                    continue
                state = self.machine.step(state, event)
                live.update(self.console.render(state), refresh=True)

        return state

    def show(self, filter_text: str = "") -> Tuple[FileChange, ...]:
        """Load once and print the reconciled list."""
        files = filter_files(self.load(), filter_text)
        self.console.print_file_changes(files)
        return files


class GitAddError(Exception):
    """Application-level failure that ends the program."""
    pass
