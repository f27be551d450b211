"""Terminal plumbing: raw mode, byte input sources, and output.

Provides the :class:`RawMode` guard that puts the controlling terminal into
raw mode for the duration of a read session and restores it on every exit
path, the :class:`InputSource` protocol the session reads bytes from, and a
small :class:`ProcessTerminal` for writing to ``sys.stdout``.
"""

from __future__ import annotations

import logging
import os
import select
import sys
import termios
import tty
from types import TracebackType
from typing import Protocol

from lineedit.errors import InputEnded, RawModeUnavailable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Raw mode
# ---------------------------------------------------------------------------


class RawMode:
    """Scoped raw-mode acquisition for one terminal file descriptor.

    Use as a context manager. Acquisition failures are logged and the
    session carries on in whatever mode the terminal is already in;
    :meth:`release` restores the saved attributes at most once.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._saved: list | None = None

    @property
    def active(self) -> bool:
        return self._saved is not None

    def _enable(self) -> None:
        try:
            saved = termios.tcgetattr(self.fd)
            tty.setraw(self.fd, termios.TCSAFLUSH)
        except (termios.error, OSError, ValueError) as exc:
            raise RawModeUnavailable(f"cannot enter raw mode on fd {self.fd}: {exc}") from exc
        self._saved = saved

    def acquire(self) -> bool:
        """Enter raw mode. Returns False when the terminal could not be switched."""
        if self._saved is not None:
            return True
        try:
            self._enable()
        except RawModeUnavailable as exc:
            logger.warning("%s; continuing without raw mode", exc)
            return False
        logger.debug("raw mode enabled on fd %d", self.fd)
        return True

    def release(self) -> None:
        """Restore the saved terminal attributes. Safe to call repeatedly."""
        if self._saved is None:
            return
        saved, self._saved = self._saved, None
        try:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, saved)
        except (termios.error, OSError) as exc:
            logger.warning("failed to restore terminal mode on fd %d: %s", self.fd, exc)
            return
        logger.debug("raw mode released on fd %d", self.fd)

    def __enter__(self) -> RawMode:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.release()


# ---------------------------------------------------------------------------
# Input sources
# ---------------------------------------------------------------------------


class InputSource(Protocol):
    """Where a read session gets its bytes from."""

    def read_byte(self) -> int:
        """Block until one byte is available. Raises InputEnded at end-of-stream."""
        ...

    def poll(self, timeout: float) -> bool:
        """Return True if a byte can be read within *timeout* seconds."""
        ...

    def fileno(self) -> int | None:
        """Descriptor of the underlying terminal, or None when there is none."""
        ...


class FileInput:
    """Unbuffered byte input from a file descriptor (stdin by default)."""

    def __init__(self, fd: int | None = None) -> None:
        self._fd = sys.stdin.fileno() if fd is None else fd

    def fileno(self) -> int | None:
        return self._fd

    def read_byte(self) -> int:
        data = os.read(self._fd, 1)
        if not data:
            raise InputEnded(f"end of input on fd {self._fd}")
        return data[0]

    def poll(self, timeout: float) -> bool:
        ready, _, _ = select.select([self._fd], [], [], timeout)
        return bool(ready)


class BytesInput:
    """Scripted input: replays a fixed byte string, then reports end-of-stream."""

    def __init__(self, data: bytes | str) -> None:
        self._data = data.encode("utf-8") if isinstance(data, str) else data
        self._pos = 0

    def fileno(self) -> int | None:
        return None

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read_byte(self) -> int:
        if self._pos >= len(self._data):
            raise InputEnded("end of scripted input")
        byte = self._data[self._pos]
        self._pos += 1
        return byte

    def poll(self, timeout: float) -> bool:
        return self._pos < len(self._data)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal output operations."""

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...


class ProcessTerminal:
    """Terminal output backed by ``sys.stdout``."""

    def write(self, data: str) -> None:
        sys.stdout.write(data)
        sys.stdout.flush()

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (ValueError, OSError):
            return 80
