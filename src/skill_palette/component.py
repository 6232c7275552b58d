"""Interactive palette component.

Wraps a PaletteState with the lifecycle a terminal host needs: rendering
after each key, an inactivity timeout, external cancellation and a single
``done`` callback when the palette closes.
"""

from __future__ import annotations

import logging
import queue
import sys
import threading
import time
from typing import Callable

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel

from .palette import create_palette_state, handle_palette_input
from .render import render_palette
from .theme import DEFAULT_THEME, Theme
from .types import Cancel, PaletteAction, Skill, SkillUsage

logger = logging.getLogger(__name__)

DEFAULT_INACTIVITY_TIMEOUT = 60.0

# Delivered by KeyReader on Ctrl+C or when the key source fails
INTERRUPT = object()


class PaletteComponent:
    """Skill palette bound to a ``done`` callback.

    Args:
        skills: Catalog to pick from.
        queued_name: Name of the currently queued skill, if any.
        recents: Usage records, most recent first.
        done: Called exactly once with the terminal action.
        theme: Visual theme.
        inactivity_timeout: Seconds without input before the palette
            cancels itself; None disables the timeout.
        clock: Monotonic time source.
    """

    def __init__(
        self,
        skills: list[Skill],
        queued_name: str | None,
        recents: list[SkillUsage],
        done: Callable[[PaletteAction], None],
        theme: Theme | None = None,
        inactivity_timeout: float | None = DEFAULT_INACTIVITY_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.state = create_palette_state(skills, queued_name, recents)
        self.theme = theme or DEFAULT_THEME
        self._done = done
        self._clock = clock
        self._timeout = inactivity_timeout
        self._deadline: float | None = None
        self.action: PaletteAction | None = None
        self._reset_inactivity()

    @property
    def finished(self) -> bool:
        return self.action is not None

    def _reset_inactivity(self) -> None:
        if self._timeout is None:
            self._deadline = None
        else:
            self._deadline = self._clock() + self._timeout

    def seconds_until_timeout(self) -> float | None:
        """Time left before the inactivity timeout, None when there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def check_inactivity(self) -> bool:
        """Cancel the palette if the inactivity timeout has elapsed."""
        remaining = self.seconds_until_timeout()
        if self.finished or remaining is None or remaining > 0:
            return False
        logger.debug("Palette closed after inactivity timeout")
        self.cancel()
        return True

    def handle_input(self, data: str) -> None:
        if self.finished:
            return
        self._reset_inactivity()

        action = handle_palette_input(self.state, data)
        if action is not None:
            self._finish(action)

    def cancel(self) -> None:
        """Close the palette from outside the key path (timeout, host shutdown)."""
        self._finish(Cancel())

    def _finish(self, action: PaletteAction) -> None:
        if self.finished:
            return
        self.action = action
        self.dispose()
        self._done(action)

    def render(self, width: int) -> Panel:
        return render_palette(self.state, width, self.theme)

    def dispose(self) -> None:
        self._deadline = None

    def run(self, console: Console, keys: KeyReader | None = None) -> PaletteAction:
        """Show the palette and block until it closes.

        Args:
            console: Console to draw on.
            keys: Key source shared across sessions; a private reader over
                the terminal is used (and closed) when omitted.

        Returns:
            The terminal action.
        """
        own_keys = keys is None
        if keys is None:
            keys = KeyReader()

        try:
            with Live(
                self.render(console.width), console=console, refresh_per_second=20, transient=True
            ) as live:
                while not self.finished:
                    key = keys.get(timeout=self.seconds_until_timeout())
                    if key is None:
                        self.check_inactivity()
                        continue

                    if key is INTERRUPT:
                        self.cancel()
                        break

                    self.handle_input(key)
                    if not self.finished:
                        live.update(self.render(console.width))
        finally:
            if own_keys:
                keys.close()

        return self.action


class KeyReader:
    """Reads key presses on a background thread, one read per request.

    A read only starts when a session asks for a key, so nothing is read
    from the terminal between sessions. A read still in flight when a
    session times out delivers its key to the next ``get`` call.

    Args:
        read_key: Blocking key source; defaults to ``readchar.readkey``.
    """

    def __init__(self, read_key: Callable[[], str] | None = None):
        self._read_key = read_key or readchar.readkey
        self._uses_terminal = read_key is None
        self._keys: queue.Queue = queue.Queue()
        self._wanted = threading.Event()
        self._closed = threading.Event()
        self._pending = False
        self._thread: threading.Thread | None = None
        self._saved_attrs = None

    @property
    def pending(self) -> bool:
        """Whether a requested key has not been delivered yet."""
        return self._pending

    def get(self, timeout: float | None = None):
        """Next key, ``INTERRUPT`` on Ctrl+C or a failed read, None on timeout."""
        if self._closed.is_set():
            return INTERRUPT
        if self._thread is None:
            self._start()
        if not self._pending:
            self._pending = True
            self._wanted.set()
        try:
            key = self._keys.get(timeout=timeout)
        except queue.Empty:
            return None
        self._pending = False
        return key

    def close(self) -> None:
        """Stop the reader; restores the terminal if a read is still blocked."""
        if self._closed.is_set():
            return
        self._closed.set()
        self._wanted.set()
        if self._pending and self._saved_attrs is not None:
            _restore_terminal(self._saved_attrs)

    def _start(self) -> None:
        if self._uses_terminal:
            self._saved_attrs = _terminal_attrs()
        self._thread = threading.Thread(target=self._loop, daemon=True)
        self._thread.start()

    def _loop(self) -> None:
        while True:
            self._wanted.wait()
            self._wanted.clear()
            if self._closed.is_set():
                return
            try:
                key = self._read_key()
            except (KeyboardInterrupt, EOFError):
                key = INTERRUPT
            except Exception as e:
                # No terminal to read from (e.g. stdin is not a tty)
                logger.warning(f"Key read failed: {e}")
                key = INTERRUPT
            self._keys.put(key)


def _terminal_attrs():
    if sys.platform == "win32" or not sys.stdin.isatty():
        return None
    import termios

    return termios.tcgetattr(sys.stdin.fileno())


def _restore_terminal(attrs) -> None:
    import termios

    try:
        termios.tcsetattr(sys.stdin.fileno(), termios.TCSADRAIN, attrs)
    except (termios.error, OSError) as e:
        logger.debug(f"Could not restore terminal: {e}")
