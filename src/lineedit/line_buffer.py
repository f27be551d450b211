"""Editable line buffer with a cursor.

The buffer holds a sequence of logical characters and a cursor index that is
the insertion/deletion point. Every operation keeps
``0 <= cursor <= length <= capacity``; calls that would break it raise
:class:`~lineedit.errors.OutOfRangeError` instead of clamping.
"""

from __future__ import annotations

from lineedit.errors import OutOfRangeError

INITIAL_CAPACITY = 256


class LineBuffer:
    """Ordered characters plus a cursor, with monotonically growing capacity."""

    def __init__(self, text: str = "", *, capacity: int = INITIAL_CAPACITY) -> None:
        self._chars: list[str] = []
        self._cursor: int = 0
        self._capacity: int = max(1, capacity)
        if text:
            self.set_content(text)

    # -- properties ---------------------------------------------------------

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def length(self) -> int:
        return len(self._chars)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_empty(self) -> bool:
        return not self._chars

    def __len__(self) -> int:
        return len(self._chars)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"LineBuffer({self.to_string()!r}, cursor={self._cursor})"

    # -- primitives ---------------------------------------------------------

    def _ensure_capacity(self, size: int) -> None:
        # Grows by doubling, never shrinks
        if size <= self._capacity:
            return
        new_capacity = self._capacity
        while new_capacity < size:
            new_capacity *= 2
        self._capacity = new_capacity

    def insert(self, char: str) -> None:
        """Insert one logical character at the cursor and advance past it."""
        if len(char) != 1:
            raise ValueError(f"insert() takes a single character, got {char!r}")
        self._ensure_capacity(len(self._chars) + 1)
        self._chars.insert(self._cursor, char)
        self._cursor += 1

    def insert_text(self, text: str) -> None:
        """Insert *text* at the cursor, one character at a time."""
        self._ensure_capacity(len(self._chars) + len(text))
        for char in text:
            self.insert(char)

    def delete_forward(self, count: int = 1) -> None:
        """Remove *count* characters starting at the cursor."""
        if count < 0 or self._cursor + count > len(self._chars):
            raise OutOfRangeError(
                "forward delete end", self._cursor + count, self._cursor, len(self._chars)
            )
        del self._chars[self._cursor : self._cursor + count]

    def delete_backward(self, count: int = 1) -> None:
        """Remove *count* characters ending just before the cursor."""
        if count < 0 or self._cursor - count < 0:
            raise OutOfRangeError("backward delete start", self._cursor - count, 0, self._cursor)
        del self._chars[self._cursor - count : self._cursor]
        self._cursor -= count

    def move_to(self, index: int) -> None:
        """Place the cursor at *index*."""
        if not 0 <= index <= len(self._chars):
            raise OutOfRangeError("cursor", index, 0, len(self._chars))
        self._cursor = index

    def set_content(self, text: str) -> None:
        """Replace the whole content and put the cursor at the end."""
        self._ensure_capacity(len(text))
        self._chars = list(text)
        self._cursor = len(self._chars)

    def to_string(self) -> str:
        return "".join(self._chars)

    def char_at(self, index: int) -> str:
        if not 0 <= index < len(self._chars):
            raise OutOfRangeError("character index", index, 0, len(self._chars) - 1)
        return self._chars[index]

    # -- editing commands ---------------------------------------------------

    def move_left(self) -> None:
        if self._cursor > 0:
            self._cursor -= 1

    def move_right(self) -> None:
        if self._cursor < len(self._chars):
            self._cursor += 1

    def move_to_start(self) -> None:
        self._cursor = 0

    def move_to_end(self) -> None:
        self._cursor = len(self._chars)

    def kill_to_end(self) -> None:
        """Delete from the cursor to the end of the line (Ctrl+K)."""
        self.delete_forward(len(self._chars) - self._cursor)

    def kill_line(self) -> None:
        """Delete the whole line (Ctrl+U)."""
        self._cursor = 0
        self.delete_forward(len(self._chars))
