"""Reverse incremental history search (Ctrl+R).

A :class:`ReverseSearch` lives only while the session is in search mode.
It never touches the live buffer until :meth:`ReverseSearch.accept`; the
match shown while typing is display state only.
"""

from __future__ import annotations

from lineedit.history import HistoryStore
from lineedit.line_buffer import LineBuffer


class ReverseSearch:
    """Substring search backward through history, driven one key at a time.

    Every re-scan walks ``entries[scan_from - 1 .. 0]`` and stops at the
    first hit, so the match is always the most recent entry older than
    ``scan_from`` that contains the query.
    """

    def __init__(self, history: HistoryStore) -> None:
        self._history = history
        self.query: str = ""
        self.scan_from: int = history.count()
        self.match_index: int | None = None

    @property
    def match_text(self) -> str | None:
        if self.match_index is None:
            return None
        return self._history.entry_at(self.match_index)

    @property
    def failed(self) -> bool:
        return bool(self.query) and self.match_index is None

    def _rescan(self) -> None:
        if not self.query:
            self.match_index = None
            return
        self.match_index = self._history.search_backward(self.query, self.scan_from)

    def type_char(self, char: str) -> None:
        self.query += char
        self._rescan()

    def erase_char(self) -> None:
        if not self.query:
            return
        self.query = self.query[:-1]
        # Restart from the newest entry with the shortened query
        self.scan_from = self._history.count()
        self._rescan()

    def repeat(self) -> None:
        """Continue to the next older match (trigger key pressed again)."""
        if self.match_index is None:
            return
        self.scan_from = self.match_index
        self._rescan()

    def accept(self, buffer: LineBuffer) -> bool:
        """Load the current match into *buffer*. Returns False when there was none."""
        text = self.match_text
        if text is None:
            return False
        buffer.set_content(text)
        return True

    def cancel(self) -> None:
        self.match_index = None
