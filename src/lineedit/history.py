"""Bounded command history and the up/down navigation cursor."""

from __future__ import annotations

import logging
from typing import Iterator

from lineedit.errors import OutOfRangeError
from lineedit.line_buffer import LineBuffer

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 100


class HistoryStore:
    """Previously accepted lines, oldest first.

    Consecutive duplicates are suppressed and the oldest entry is evicted
    once ``max_size`` is reached. One store is shared by every read session
    of a process; sessions run one after another, so no locking is done.
    """

    def __init__(self, max_size: int = DEFAULT_HISTORY_SIZE) -> None:
        if max_size < 1:
            raise ValueError(f"history size must be at least 1, got {max_size}")
        self._entries: list[str] = []
        self._max_size = max_size

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def count(self) -> int:
        return len(self._entries)

    def append(self, line: str) -> bool:
        """Add an accepted line. Returns False when the line was suppressed."""
        if not line:
            return False
        # Don't add consecutive duplicates
        if self._entries and self._entries[-1] == line:
            return False
        if len(self._entries) >= self._max_size:
            evicted = self._entries.pop(0)
            logger.debug("history full, evicted %r", evicted)
        self._entries.append(line)
        return True

    def entry_at(self, index: int) -> str:
        if not 0 <= index < len(self._entries):
            raise OutOfRangeError("history index", index, 0, len(self._entries) - 1)
        return self._entries[index]

    def search_backward(self, query: str, scan_from: int) -> int | None:
        """Return the most recent index below *scan_from* whose entry contains *query*."""
        if not 0 <= scan_from <= len(self._entries):
            raise OutOfRangeError("scan start", scan_from, 0, len(self._entries))
        for index in range(scan_from - 1, -1, -1):
            if query in self._entries[index]:
                return index
        return None

    def clear(self) -> None:
        self._entries.clear()


class HistoryNavigator:
    """Up/Down browsing over a :class:`HistoryStore` for one read session.

    ``position == count`` means the user is editing the live line. The live
    line is snapshotted when browsing starts and restored when browsing
    returns to it.
    """

    def __init__(self, history: HistoryStore) -> None:
        self._history = history
        self._position: int = history.count()
        self._saved_line: str | None = None

    @property
    def position(self) -> int:
        return self._position

    @property
    def saved_line(self) -> str | None:
        return self._saved_line

    @property
    def is_browsing(self) -> bool:
        return self._position < self._history.count()

    def reset(self) -> None:
        """Return to the live line and forget the snapshot (session start)."""
        self._position = self._history.count()
        self._saved_line = None

    def previous(self, buffer: LineBuffer) -> bool:
        """Load the next older entry into *buffer*. Returns False at the oldest."""
        if self._position == 0:
            return False
        # Capture the live line when first entering history browsing mode
        if self._position == self._history.count():
            self._saved_line = buffer.to_string()
        self._position -= 1
        buffer.set_content(self._history.entry_at(self._position))
        return True

    def next(self, buffer: LineBuffer) -> bool:
        """Load the next newer entry, or the saved live line. Returns False on the live line."""
        if self._position >= self._history.count():
            return False
        self._position += 1
        if self._position == self._history.count():
            buffer.set_content(self._saved_line or "")
        else:
            buffer.set_content(self._history.entry_at(self._position))
        return True
