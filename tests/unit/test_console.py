"""Unit tests for console rendering."""

import io

import pytest

from gitadd.config.settings import Settings
from gitadd.git_ops.reconcile import FileChange
from gitadd.git_ops.status import StatusCode
from gitadd.state import BrowserState
from gitadd.ui.console import GitAddConsole, LEGEND, TITLE, visible_window


def _console(height: int = 30, **ui) -> GitAddConsole:
    settings = Settings(ui=ui) if ui else Settings()
    return GitAddConsole(settings, file=io.StringIO(), width=200, height=height)


def _text(console: GitAddConsole, renderable) -> str:
    console.console.print(renderable)
    return console.console.file.getvalue()


class TestVisibleWindow:
    """Test cases for scrolling."""

    @pytest.mark.parametrize(
        "total, cursor, rows, expected",
        [
            (5, 0, 10, (0, 5)),
            (20, 3, 10, (0, 10)),
            (20, 10, 10, (1, 11)),
            (20, 19, 10, (10, 20)),
            (20, -1, 10, (0, 10)),
            (5, 0, 0, (0, 0)),
        ],
    )
    def test_window_keeps_cursor_visible(self, total, cursor, rows, expected):
        assert visible_window(total, cursor, rows) == expected


class TestRenderRow:
    """Test cases for single rows."""

    def setup_method(self):
        self.console = _console()

    def test_staged_row(self):
        row = self.console.render_row(FileChange("a.go", StatusCode.MODIFIED, StatusCode.CLEAN, 4, 2))
        assert row.plain == "     -› a.go +4 -2"

    def test_unstaged_row(self):
        row = self.console.render_row(FileChange("b.go", StatusCode.CLEAN, StatusCode.MODIFIED, 0, 3))
        assert row.plain == "    ‹-  b.go -3"

    def test_partially_staged_row_has_both_marks(self):
        row = self.console.render_row(FileChange("c.go", StatusCode.MODIFIED, StatusCode.MODIFIED))
        assert row.plain == "     -› ‹-  c.go"

    def test_binary_row(self):
        row = self.console.render_row(FileChange("img.png", StatusCode.ADDED, StatusCode.CLEAN, 9, 9, True))
        assert row.plain.endswith("img.png (bin)")

    def test_focused_row_is_marked(self):
        row = self.console.render_row(FileChange("a.go", StatusCode.ADDED, StatusCode.CLEAN), focused=True)
        assert row.plain.startswith("   *")

    def test_path_with_brackets_is_not_markup(self):
        row = self.console.render_row(FileChange("[red]x[/red].txt", StatusCode.ADDED, StatusCode.CLEAN))
        assert "[red]x[/red].txt" in row.plain


class TestRender:
    """Test cases for the full screen."""

    def setup_method(self):
        self.files = (
            FileChange("a.go", StatusCode.MODIFIED, StatusCode.CLEAN, 4, 2),
            FileChange("b.txt", StatusCode.UNTRACKED, StatusCode.UNTRACKED),
        )

    def test_screen_contents(self):
        console = _console()
        output = _text(console, console.render(BrowserState.initial(self.files)))

        assert TITLE in output
        assert "*" in output.splitlines()[1]
        assert "a.go +4 -2" in output
        assert "b.txt" in output
        assert LEGEND.splitlines()[0] in output

    def test_legend_lists_status_codes(self):
        codes = LEGEND.splitlines()[1]
        assert "M=modified, A=added, D=deleted, R=renamed, C=copied, U=updated, ?=untracked, -=clean" in codes
        assert "~" not in codes

    def test_error_overlay(self):
        console = _console()
        state = BrowserState(files=self.files, cursor=0, error="git add -- a.go: exit status 128")
        output = _text(console, console.render(state))
        assert "Error: git add -- a.go: exit status 128" in output
        assert "a.go" in output

    def test_filter_line(self):
        console = _console()
        state = BrowserState(files=self.files, cursor=0, filter_text="txt", filtering=True)
        output = _text(console, console.render(state))
        assert "Filter: txt" in output
        assert "a.go" not in output.split("Filter")[0]

    def test_empty_list(self):
        console = _console()
        output = _text(console, console.render(BrowserState.initial([])))
        assert "No changes" in output

    def test_legend_can_be_hidden(self):
        console = _console(show_legend=False)
        output = _text(console, console.render(BrowserState.initial(self.files)))
        assert "legend:" not in output

    def test_long_list_is_windowed(self):
        files = tuple(FileChange(f"f{i:03}", StatusCode.ADDED, StatusCode.CLEAN) for i in range(100))
        console = _console(height=20)
        state = BrowserState(files=files, cursor=99)
        output = _text(console, console.render(state))
        assert "f099" in output
        assert "f000" not in output


class TestPrintFileChanges:
    """Test cases for the one-shot listing."""

    def test_prints_every_row(self):
        console = _console()
        console.print_file_changes([
            FileChange("a.go", StatusCode.MODIFIED, StatusCode.CLEAN, 1, 0),
            FileChange("b.go", StatusCode.CLEAN, StatusCode.DELETED, 0, 5),
        ])
        output = console.console.file.getvalue()
        assert "a.go +1" in output
        assert "b.go -5" in output
        assert "*" not in output

    def test_no_changes(self):
        console = _console()
        console.print_file_changes([])
        assert "No changes" in console.console.file.getvalue()
