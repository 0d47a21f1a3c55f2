"""
Raw terminal key input and key bindings.
"""

import os
import select
import sys
from typing import Optional

from ..state import Action, BrowserState, Event


ESCAPE_TIMEOUT = 0.05

_SEQUENCES = {
    b"\x1b[A": "up",
    b"\x1b[B": "down",
    b"\x1b[C": "right",
    b"\x1b[D": "left",
    b"\x1bOA": "up",
    b"\x1bOB": "down",
    b"\x1bOC": "right",
    b"\x1bOD": "left",
    b"\x1b[H": "home",
    b"\x1b[F": "end",
    b"\x1bOH": "home",
    b"\x1bOF": "end",
    b"\x1b[1~": "home",
    b"\x1b[4~": "end",
    b"\x1b": "esc",
    b"\r": "enter",
    b"\n": "enter",
    b"\x7f": "backspace",
    b"\x08": "backspace",
    b"\x03": "ctrl+c",
}

KEY_BINDINGS = {
    "up": Action.UP,
    "k": Action.UP,
    "down": Action.DOWN,
    "j": Action.DOWN,
    "home": Action.HOME,
    "g": Action.HOME,
    "end": Action.END,
    "G": Action.END,
    "right": Action.STAGE,
    " ": Action.STAGE,
    "left": Action.UNSTAGE,
    "a": Action.STAGE_ALL,
    "u": Action.UNSTAGE_ALL,
    "r": Action.REFRESH,
    "/": Action.FILTER_START,
    "q": Action.QUIT,
    "esc": Action.QUIT,
    "ctrl+c": Action.QUIT,
}

# Keys that keep moving the cursor while the filter is being typed
_FILTER_NAVIGATION = {"up", "down", "home", "end"}


def decode_key(data: bytes) -> str:
    """Map one raw key sequence to a key name, or a printable character."""
    if data in _SEQUENCES:
        return _SEQUENCES[data]
    if data.startswith(b"\x1b"):
        return ""
    return data.decode("utf-8", errors="replace")


def event_for_key(key: str, state: BrowserState) -> Optional[Event]:
    """Translate a key name into an event for the current state."""
    if state.filtering:
        if key == "esc":
            return Event(Action.FILTER_CANCEL)
        if key == "enter":
            return Event(Action.FILTER_APPLY)
        if key == "backspace":
            return Event(Action.FILTER_BACKSPACE)
        if key == "ctrl+c":
            return Event(Action.QUIT)
        if key in _FILTER_NAVIGATION:
            return Event(KEY_BINDINGS[key])
        if len(key) == 1 and key.isprintable():
            return Event(Action.FILTER_CHAR, key)
        return None

    if key == "esc" and state.filter_text:
        return Event(Action.FILTER_CANCEL)

    action = KEY_BINDINGS.get(key)
    return Event(action) if action else None


class KeyReader:
    """Reads single keys from a terminal in cbreak mode."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.fd = self.stream.fileno()
        self._old_settings = None

    def __enter__(self) -> "KeyReader":
        import termios
        import tty
        self._old_settings = termios.tcgetattr(self.fd)
        tty.setcbreak(self.fd)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        import termios
        if self._old_settings is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._old_settings)
            self._old_settings = None

    def _pending(self, timeout: float) -> bool:
        ready, _, _ = select.select([self.fd], [], [], timeout)
        return bool(ready)

    def _read_byte(self) -> bytes:
        return os.read(self.fd, 1)

    def read_key(self) -> str:
        """Block until a key is pressed and return its name."""
        data = self._read_byte()

        if data == b"\x1b":
            # A lone ESC has nothing queued behind it
            if not self._pending(ESCAPE_TIMEOUT):
                return "esc"
            data += self._read_byte()
            if data[-1:] in (b"[", b"O"):
                while True:
                    byte = self._read_byte()
                    if not byte:
                        break
                    data += byte
                    if 0x40 <= byte[0] <= 0x7E:
                        break
        elif data and data[0] >= 0xC0:
            # Multi-byte UTF-8 character
            extra = 1 if data[0] < 0xE0 else 2 if data[0] < 0xF0 else 3
            for _ in range(extra):
                data += self._read_byte()

        return decode_key(data)


def is_interactive_terminal(stream=None) -> bool:
    """Check whether key input can be read from ``stream``."""
    stream = stream or sys.stdin
    try:
        import termios
    except ImportError:
        return False
    try:
        termios.tcgetattr(stream.fileno())
    except (termios.error, OSError, AttributeError, ValueError):
        return False
    return True
