"""Error kinds raised by the line editor."""

from __future__ import annotations


class LineEditError(Exception):
    """Base class for line editor errors."""


class OutOfRangeError(LineEditError, IndexError):
    """An index violates buffer or history bounds.

    This is a programming error: callers are expected to check bounds
    before calling, so it is never converted into a user-facing outcome.
    """

    def __init__(self, what: str, index: int, low: int, high: int) -> None:
        super().__init__(f"{what} {index} out of range [{low}, {high}]")
        self.index = index
        self.low = low
        self.high = high


class InputEnded(LineEditError, EOFError):
    """The input stream reached end-of-stream while reading."""


class RawModeUnavailable(LineEditError, OSError):
    """The terminal raw-mode capability could not be obtained."""
