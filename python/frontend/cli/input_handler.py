"""Single-keypress reader for the terminal frontend.

Returns arrow keys, Enter/Space, Escape and Ctrl-C as action names and
any other printable character as itself, so card labels (``a``-``z``,
``A``-``F``) pass straight through.  Works on macOS / Linux
(tty+termios) and Windows (msvcrt).
"""

from __future__ import annotations

import os
import sys
import time

# -- key mapping ---------------------------------------------------------------

_SPECIAL: dict[str, str] = {
    "\r": "enter",
    "\n": "enter",
    " ": "flip",
    "\x03": "quit",  # Ctrl-C
    "\x7f": "backspace",
    "\x08": "backspace",
}

_ARROWS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
}

# msvcrt prefixes arrow keys with \xe0 (or \x00) followed by a scan code.
_WIN_ARROWS: dict[str, str] = {
    "H": "up",
    "P": "down",
    "M": "right",
    "K": "left",
}


def _resolve(ch: str) -> str:
    if ch in _SPECIAL:
        return _SPECIAL[ch]
    return ch if ch.isprintable() else ""


# -- platform readers ----------------------------------------------------------


def _read_windows(timeout: float | None) -> str | None:
    import msvcrt  # type: ignore[import-not-found]

    if timeout is not None:
        end = time.monotonic() + timeout
        while not msvcrt.kbhit():
            if time.monotonic() >= end:
                return None
            time.sleep(0.02)

    ch = msvcrt.getwch()
    if ch in ("\x00", "\xe0"):
        return _WIN_ARROWS.get(msvcrt.getwch(), "")
    if ch == "\x1b":
        return "escape"
    return _resolve(ch)


def _read_unix(timeout: float | None) -> str | None:
    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)

    def _pending(wait: float | None) -> bool:
        ready, _, _ = select.select([fd], [], [], wait)
        return bool(ready)

    def _read1() -> str:
        # os.read keeps select() honest about bytes still queued
        return os.read(fd, 1).decode("utf-8", errors="ignore")

    try:
        tty.setraw(fd)
        if not _pending(timeout):
            return None
        ch = _read1()

        if ch == "\x1b":
            if not _pending(0.05):
                return "escape"
            if _read1() != "[":
                return "escape"
            return _ARROWS.get(_read1(), "") if _pending(0.05) else ""

        return _resolve(ch)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


_read = _read_windows if os.name == "nt" else _read_unix


# -- public API ----------------------------------------------------------------


def get_key() -> str:
    """Block until a key is pressed and return its action name.

    Possible return values:
        "up", "down", "left", "right"  arrow keys
        "enter"                        Enter / Return
        "flip"                         Space
        "escape"                       bare Escape
        "quit"                         Ctrl-C
        "backspace"                    Backspace
        "<char>"                       any other printable character
        ""                             unrecognised key
    """
    key = _read(None)
    return key or ""


def get_key_timeout(timeout: float) -> str | None:
    """Like ``get_key`` but returns ``None`` if nothing arrives in *timeout* seconds."""
    return _read(timeout)
