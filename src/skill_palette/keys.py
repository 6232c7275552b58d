"""Keyboard input helpers for the palette.

Letters are always query input here, so unlike a plain list menu there are
no vim-style j/k bindings: navigation uses arrows and Ctrl+N / Ctrl+P.
"""

from __future__ import annotations

import readchar

CTRL_N = "\x0e"
CTRL_P = "\x10"


def is_enter(key: str) -> bool:
    """Check if key is Enter/Return."""
    return key in (readchar.key.ENTER, "\r", "\n")


def is_escape(key: str) -> bool:
    """Check if key is a bare Escape (handles terminal variations)."""
    return key in (readchar.key.ESC, "\x1b", "\x1b\x1b")


def is_up(key: str) -> bool:
    return key in (readchar.key.UP, "\x1bOA", CTRL_P)


def is_down(key: str) -> bool:
    return key in (readchar.key.DOWN, "\x1bOB", CTRL_N)


def is_backspace(key: str) -> bool:
    """Check if key is backspace (handles terminal variations)."""
    return key in (readchar.key.BACKSPACE, "\x7f", "\b")


def is_printable(key: str) -> bool:
    """Single character at or above the space character (no control sequences)."""
    return len(key) == 1 and ord(key) >= 32
