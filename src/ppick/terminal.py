"""Terminal abstraction for raw-mode interaction with the controlling tty.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal`` that
opens ``/dev/tty`` directly (so stdin and stdout stay free for piping),
switches it to raw mode and the alternate screen, and restores everything
on :meth:`ProcessTerminal.stop`.

Input is read with a blocking ``select`` on the tty and on a signal
wake-up pipe.  SIGINT, SIGTERM and SIGQUIT are delivered as a ``"quit"``
:class:`SignalEvent` and SIGWINCH as ``"resize"``, on the reading thread;
the signal handlers themselves do nothing.
"""

from __future__ import annotations

import codecs
import logging
import os
import selectors
import signal
import termios
import tty
from dataclasses import dataclass
from types import FrameType
from typing import Any, Iterator, Literal, Protocol

from ppick.errors import TerminalUnavailableError
from ppick.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_ALT_SCREEN_ENABLE = "\x1b[?1049h"
_ALT_SCREEN_DISABLE = "\x1b[?1049l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_SCREEN = "\x1b[2J\x1b[H"

DEFAULT_TTY = "/dev/tty"
# Seconds to wait for the rest of an escape sequence before a lone Escape.
ESCAPE_DELAY = 0.01

_QUIT_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGQUIT)
_RESIZE_SIGNALS = (signal.SIGWINCH,)


@dataclass(frozen=True)
class SignalEvent:
    name: Literal["quit", "resize"]


TerminalInput = str | SignalEvent


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal I/O operations."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def write(self, data: str) -> None: ...

    def events(self) -> Iterator[TerminalInput]: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


def _ignore_signal(signum: int, frame: FrameType | None) -> None:
    """Installed so the wake-up fd fires instead of the default action."""


class ProcessTerminal:
    """Concrete terminal backed by the controlling tty of the process."""

    def __init__(
        self,
        tty_path: str = DEFAULT_TTY,
        *,
        escape_delay: float = ESCAPE_DELAY,
    ) -> None:
        self._tty_path = tty_path
        self._escape_delay = escape_delay
        self._fd: int | None = None
        self._original_termios: list | None = None
        self._wake_r: int | None = None
        self._wake_w: int | None = None
        self._prev_wakeup_fd: int | None = None
        self._prev_handlers: dict[int, Any] = {}
        self._selector: selectors.BaseSelector | None = None
        self._buffer = StdinBuffer()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._write_log_path: str = os.environ.get("PPICK_WRITE_LOG", "")

    # -- context manager ----------------------------------------------------

    def __enter__(self) -> ProcessTerminal:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._require_fd()).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self._require_fd()).lines
        except (ValueError, OSError):
            return 24

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Open the tty, enable raw mode and route signals to the read loop."""
        try:
            self._fd = os.open(self._tty_path, os.O_RDWR | os.O_NOCTTY)
        except OSError as exc:
            raise TerminalUnavailableError(
                f"failed to open {self._tty_path}"
            ) from exc

        try:
            self._original_termios = termios.tcgetattr(self._fd)
            tty.setraw(self._fd)
        except termios.error as exc:
            os.close(self._fd)
            self._fd = None
            raise TerminalUnavailableError(
                f"{self._tty_path} is not a terminal"
            ) from exc

        self._install_signal_pipe()
        self._selector = selectors.DefaultSelector()
        self._selector.register(self._fd, selectors.EVENT_READ)
        self._selector.register(self._wake_r, selectors.EVENT_READ)

        self._raw_write(_ALT_SCREEN_ENABLE + _CLEAR_SCREEN)
        logger.debug("Terminal started on %s", self._tty_path)

    def stop(self) -> None:
        """Restore terminal state and clean up all handlers.

        Safe to call more than once and after a failed :meth:`start`.
        """
        if self._fd is None:
            return

        self._raw_write(_SHOW_CURSOR + _ALT_SCREEN_DISABLE)

        if self._selector is not None:
            self._selector.close()
            self._selector = None

        self._remove_signal_pipe()

        if self._original_termios is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._original_termios)
            self._original_termios = None

        os.close(self._fd)
        self._fd = None
        self._buffer.clear()
        logger.debug("Terminal restored")

    # -- write --------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write data to the tty and optionally to the write log."""
        self._raw_write(data)

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(data)
            except OSError:
                logger.warning("Cannot append to %s", self._write_log_path)
                self._write_log_path = ""

    # -- input --------------------------------------------------------------

    def events(self) -> Iterator[TerminalInput]:
        """Block for input; yield complete key sequences and signal events."""
        fd = self._require_fd()
        selector = self._require_selector()

        while True:
            timeout = self._escape_delay if self._buffer.pending else None
            ready = selector.select(timeout)

            if not ready:
                yield from self._buffer.flush()
                continue

            for key, _mask in ready:
                if key.fd == self._wake_r:
                    yield from self._drain_signals()
                    continue

                raw = os.read(fd, 4096)
                if not raw:
                    # Hangup: nobody is left to pick anything.
                    yield SignalEvent("quit")
                    return
                yield from self._buffer.process(self._decoder.decode(raw))

    # -- private: signals ---------------------------------------------------

    def _install_signal_pipe(self) -> None:
        self._wake_r, self._wake_w = os.pipe()
        os.set_blocking(self._wake_r, False)
        os.set_blocking(self._wake_w, False)
        self._prev_wakeup_fd = signal.set_wakeup_fd(self._wake_w)
        for signum in _QUIT_SIGNALS + _RESIZE_SIGNALS:
            self._prev_handlers[signum] = signal.signal(signum, _ignore_signal)

    def _remove_signal_pipe(self) -> None:
        for signum, handler in self._prev_handlers.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._prev_handlers.clear()

        if self._prev_wakeup_fd is not None:
            signal.set_wakeup_fd(self._prev_wakeup_fd)
            self._prev_wakeup_fd = None

        for fd in (self._wake_r, self._wake_w):
            if fd is not None:
                os.close(fd)
        self._wake_r = self._wake_w = None

    def _drain_signals(self) -> Iterator[SignalEvent]:
        if self._wake_r is None:
            return
        try:
            data = os.read(self._wake_r, 512)
        except BlockingIOError:
            return
        resized = False
        for signum in data:
            if signum in _QUIT_SIGNALS:
                logger.debug("Received signal %d", signum)
                yield SignalEvent("quit")
                return
            if signum in _RESIZE_SIGNALS:
                resized = True
        if resized:
            yield SignalEvent("resize")

    # -- private: raw write ------------------------------------------------

    def _require_fd(self) -> int:
        if self._fd is None:
            raise RuntimeError("terminal is not started")
        return self._fd

    def _require_selector(self) -> selectors.BaseSelector:
        if self._selector is None:
            raise RuntimeError("terminal is not started")
        return self._selector

    def _raw_write(self, data: str) -> None:
        """Write all of *data* directly to the tty, bypassing buffering."""
        if self._fd is None:
            return
        view = memoryview(data.encode("utf-8"))
        while view:
            try:
                written = os.write(self._fd, view)
            except InterruptedError:
                continue
            except OSError as exc:
                logger.debug("Write to %s failed: %s", self._tty_path, exc)
                return
            view = view[written:]
