"""
Console rendering of the file list with Rich components.
"""

from typing import List, Sequence, Tuple
from rich.console import Console, Group
from rich.text import Text
from rich.theme import Theme

from ..git_ops.reconcile import FileChange
from ..git_ops.status import StatusCode
from ..state import BrowserState
from ..config.settings import Settings


TITLE = "gitadd — interactive add/reset"

def _status_legend() -> str:
    codes = ", ".join(f"{code.symbol}={code.label}" for code in StatusCode if code is not StatusCode.UNKNOWN)
    return f"[Index|Work] legend: {codes}  •  counts show total +adds/-dels"


LEGEND = (
    "↑/↓ move  •  ← unstage  •  → stage  •  a stage all  •  u unstage all  •  / filter  •  r refresh  •  q quit\n"
    + _status_legend()
)

STAGED_MARK = " -›"
UNSTAGED_MARK = "‹- "

# title, blank line after the list, error line, filter line
_RESERVED_ROWS = 4
_LEGEND_ROWS = 2


def visible_window(total: int, cursor: int, rows: int) -> Tuple[int, int]:
    """Slice bounds of the rows to draw so that the cursor stays on screen."""
    if rows <= 0:
        return 0, 0
    if total <= rows or cursor < rows:
        return 0, min(total, rows)
    start = cursor - rows + 1
    return start, start + rows


class GitAddConsole:
    """Console interface for gitadd."""

    def __init__(self, settings: Settings, **console_options):
        """Initialize console with settings."""
        self.settings = settings
        self._setup_styles()
        self.console = Console(
            color_system="auto" if settings.ui.use_colors else None,
            theme=self.theme,
            **console_options
        )

    def _setup_styles(self) -> None:
        """Setup custom styles for consistent theming."""
        self.styles = {
            "title": "bold",
            "legend": "dim",
            "error": "#ff5555",
            "index": "#22c55e",
            "worktree": "#ef4444",
            "added": "#22c55e",
            "deleted": "#ef4444",
            "filter": "bold cyan",
        }

        self.theme = Theme(self.styles)

    def render_row(self, change: FileChange, focused: bool = False) -> Text:
        """Render one file as ``<marks> <path> <counts>``."""
        marks = []
        style = "index"
        if change.index_status is not StatusCode.CLEAN:
            marks.append(STAGED_MARK)
        if change.is_unstaged:
            style = "worktree"
            marks.append(UNSTAGED_MARK)

        body = Text(style=style)
        if marks:
            body.append(" ".join(marks) + " ")
        body.append(change.path)

        if change.binary:
            body.append(" ")
            body.append("(bin)", style="legend")
        elif change.has_counts:
            parts = []
            if change.added > 0:
                parts.append(Text(f"+{change.added}", style="added"))
            if change.deleted > 0:
                parts.append(Text(f"-{change.deleted}", style="deleted"))
            body.append(" ")
            body.append_text(Text(" ").join(parts))

        if focused:
            body.stylize("bold")

        line = Text("   " + ("*" if focused else " "))
        line.append_text(body)
        return line

    def render_rows(self, files: Sequence[FileChange], cursor: int = -1, rows: int = None) -> List[Text]:
        if rows is None:
            rows = len(files)
        start, end = visible_window(len(files), cursor, rows)
        return [
            self.render_row(change, focused=(index == cursor))
            for index, change in enumerate(files[start:end], start)
        ]

    def render(self, state: BrowserState) -> Group:
        """Build the full screen for the current state."""
        reserved = _RESERVED_ROWS + (_LEGEND_ROWS if self.settings.ui.show_legend else 0)
        rows = max(1, self.console.size.height - reserved)

        parts = [Text(TITLE, style="title")]
        visible = state.visible
        if visible:
            parts.extend(self.render_rows(visible, state.cursor, rows))
        else:
            parts.append(Text("   No changes" if not state.filter_text else "   No matches", style="legend"))
        parts.append(Text(""))

        if state.filtering or state.filter_text:
            cursor_mark = "▋" if state.filtering else ""
            parts.append(Text(f"Filter: {state.filter_text}{cursor_mark}", style="filter"))
        if state.error:
            parts.append(Text(f"Error: {state.error}", style="error"))
        if self.settings.ui.show_legend:
            parts.append(Text(LEGEND, style="legend"))

        return Group(*parts)

    def print_file_changes(self, files: Sequence[FileChange]) -> None:
        """Print the reconciled list once, without a cursor."""
        if not files:
            self.print_info("No changes")
            return
        for line in self.render_rows(files):
            self.console.print(line)

    def print_info(self, message: str) -> None:
        """Print info message."""
        self.console.print(Text(message, style="legend"))
