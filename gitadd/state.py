"""
Selection state for the interactive file list.

The whole UI state is one immutable ``BrowserState`` value.  ``StateMachine.step``
takes the current value and an ``Event`` and returns the next value, calling
into the repository only for refresh and staging events.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple
from loguru import logger

from .git_ops.actions import ActionEngine
from .git_ops.reconcile import FileChange
from .git_ops.repository import GitRepositoryError


class Action(Enum):
    """Everything the interactive loop can be asked to do."""

    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    REFRESH = "refresh"
    STAGE = "stage"
    UNSTAGE = "unstage"
    STAGE_ALL = "stage_all"
    UNSTAGE_ALL = "unstage_all"
    QUIT = "quit"
    FILTER_START = "filter_start"
    FILTER_CHAR = "filter_char"
    FILTER_BACKSPACE = "filter_backspace"
    FILTER_APPLY = "filter_apply"
    FILTER_CANCEL = "filter_cancel"


@dataclass(frozen=True)
class Event:
    action: Action
    text: str = ""


def filter_files(files: Sequence[FileChange], text: str) -> Tuple[FileChange, ...]:
    """Case-insensitive substring match on the path."""
    if not text:
        return tuple(files)
    needle = text.lower()
    return tuple(change for change in files if needle in change.path.lower())


@dataclass(frozen=True)
class BrowserState:
    """The displayed file list, cursor, filter and error overlay.

    ``cursor`` indexes into ``visible`` (the filtered list); -1 means no
    selection.
    """

    files: Tuple[FileChange, ...] = ()
    cursor: int = -1
    filter_text: str = ""
    filtering: bool = False
    error: Optional[str] = None
    done: bool = False

    @classmethod
    def initial(cls, files: Sequence[FileChange], filter_text: str = "") -> "BrowserState":
        state = cls(files=tuple(files), filter_text=filter_text)
        return replace(state, cursor=0 if state.visible else -1)

    @property
    def visible(self) -> Tuple[FileChange, ...]:
        return filter_files(self.files, self.filter_text)

    @property
    def selected(self) -> Optional[FileChange]:
        visible = self.visible
        if 0 <= self.cursor < len(visible):
            return visible[self.cursor]
        return None

    def with_files(self, files: Sequence[FileChange]) -> "BrowserState":
        """Replace the list wholesale and clamp the cursor to it."""
        state = replace(self, files=tuple(files), error=None)
        count = len(state.visible)
        cursor = state.cursor
        if cursor >= count:
            cursor = count - 1
        elif cursor < 0 and count:
            cursor = 0
        return replace(state, cursor=cursor)

    def with_filter(self, text: str, filtering: bool) -> "BrowserState":
        state = replace(self, filter_text=text, filtering=filtering)
        return replace(state, cursor=0 if state.visible else -1)


Loader = Callable[[], Sequence[FileChange]]


class StateMachine:
    """Applies events to ``BrowserState`` values."""

    def __init__(self, engine: ActionEngine, load: Loader):
        self.engine = engine
        self.load = load

    def step(self, state: BrowserState, event: Event) -> BrowserState:
        action = event.action
        handler = getattr(self, f"_on_{action.value}")
        return handler(state, event)

    # navigation

    def _on_up(self, state, event):
        if state.cursor > 0:
            return replace(state, cursor=state.cursor - 1)
        return state

    def _on_down(self, state, event):
        if state.cursor < len(state.visible) - 1:
            return replace(state, cursor=state.cursor + 1)
        return state

    def _on_home(self, state, event):
        return replace(state, cursor=0 if state.visible else -1)

    def _on_end(self, state, event):
        return replace(state, cursor=len(state.visible) - 1)

    def _on_quit(self, state, event):
        return replace(state, done=True)

    # repository

    def _on_refresh(self, state, event):
        try:
            files = self.load()
        except GitRepositoryError as e:
            logger.error(f"Refresh failed: {e}")
            return replace(state, error=str(e))
        return state.with_files(files)

    def _mutate(self, state: BrowserState, operation: str, paths) -> BrowserState:
        if not paths:
            return state
        try:
            getattr(self.engine, operation)(paths)
        except GitRepositoryError as e:
            # The list is left as it was; no reload after a failed mutation
            logger.error(f"{operation.capitalize()} failed: {e}")
            return replace(state, error=str(e))
        return self._on_refresh(state, None)

    def _on_stage(self, state, event):
        selected = state.selected
        if selected is None:
            return state
        return self._mutate(state, "stage", [selected.path])

    def _on_unstage(self, state, event):
        selected = state.selected
        if selected is None:
            return state
        return self._mutate(state, "unstage", [selected.path])

    def _on_stage_all(self, state, event):
        return self._mutate(state, "stage", [change.path for change in state.visible])

    def _on_unstage_all(self, state, event):
        return self._mutate(state, "unstage", [change.path for change in state.visible])

    # filter

    def _on_filter_start(self, state, event):
        return replace(state, filtering=True)

    def _on_filter_char(self, state, event):
        return state.with_filter(state.filter_text + event.text, True)

    def _on_filter_backspace(self, state, event):
        return state.with_filter(state.filter_text[:-1], True)

    def _on_filter_apply(self, state, event):
        return replace(state, filtering=False)

    def _on_filter_cancel(self, state, event):
        return state.with_filter("", False)
