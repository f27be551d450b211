"""Decoding of raw terminal bytes into key identifiers.

Key identifiers use the ``"ctrl+a"`` / ``"left"`` / ``"x"`` format that
:mod:`lineedit.keybindings` binds to editor actions. Decoding is an explicit
state machine fed one byte at a time, so it works the same whether bytes come
from a blocking read, a ``select`` loop, or a scripted test source.
"""

from __future__ import annotations

import codecs
from typing import Literal

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str

# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ESC = 0x1B
DEL = 0x7F
BS = 0x08
TAB = 0x09
LF = 0x0A
CR = 0x0D

# Longest CSI body accepted before the sequence is dropped as garbage
MAX_SEQUENCE_LENGTH = 16

# Escape sequence bodies (text after ESC) -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "[A": "up",
    "[B": "down",
    "[C": "right",
    "[D": "left",
    "[H": "home",
    "[F": "end",
    "OA": "up",
    "OB": "down",
    "OC": "right",
    "OD": "left",
    "OH": "home",
    "OF": "end",
    "[1~": "home",
    "[7~": "home",
    "[4~": "end",
    "[8~": "end",
    "[2~": "insert",
    "[3~": "delete",
    "[5~": "pageUp",
    "[6~": "pageDown",
}

# Single control bytes with a name of their own
CONTROL_KEYS: dict[int, str] = {
    0x00: "ctrl+space",
    BS: "backspace",
    TAB: "tab",
    LF: "enter",
    CR: "enter",
    DEL: "backspace",
}

DecoderState = Literal["ground", "escape", "csi", "ss3"]


def control_key(byte: int) -> KeyId | None:
    """Name a single control byte, or ``None`` if it has no key meaning."""
    if byte in CONTROL_KEYS:
        return CONTROL_KEYS[byte]
    # Ctrl + letter (0x01 - 0x1a)
    if 1 <= byte <= 26:
        return "ctrl+" + chr(byte + ord("a") - 1)
    return None


def is_printable(char: str) -> bool:
    return len(char) == 1 and char.isprintable()


class KeyDecoder:
    """Turns a byte stream into key identifiers.

    ``feed`` consumes one byte and returns the keys it completes (usually zero
    or one). A lone ESC is ambiguous until the next byte arrives; callers that
    see no more input within their escape timeout call :meth:`flush` to have
    it reported as ``"escape"``.
    """

    def __init__(self) -> None:
        self._state: DecoderState = "ground"
        self._sequence: str = ""
        self._utf8 = codecs.getincrementaldecoder("utf-8")()

    @property
    def state(self) -> DecoderState:
        return self._state

    @property
    def pending_escape(self) -> bool:
        return self._state == "escape"

    def reset(self) -> None:
        self._state = "ground"
        self._sequence = ""
        self._utf8.reset()

    def feed(self, byte: int) -> list[KeyId]:
        if self._state == "escape":
            return self._feed_escape(byte)
        if self._state in ("csi", "ss3"):
            return self._feed_sequence(byte)
        return self._feed_ground(byte)

    def feed_bytes(self, data: bytes) -> list[KeyId]:
        keys: list[KeyId] = []
        for byte in data:
            keys.extend(self.feed(byte))
        return keys

    def flush(self) -> list[KeyId]:
        """Resolve a pending lone ESC; drop any unfinished sequence."""
        state = self._state
        self.reset()
        if state == "escape":
            return [Key.escape]
        return []

    # -- states -------------------------------------------------------------

    def _feed_ground(self, byte: int) -> list[KeyId]:
        if byte == ESC:
            self._utf8.reset()
            self._state = "escape"
            return []

        if byte < 0x20 or byte == DEL:
            self._utf8.reset()
            key = control_key(byte)
            return [key] if key else []

        if byte < 0x80:
            self._utf8.reset()
            return [chr(byte)]

        try:
            char = self._utf8.decode(bytes([byte]), final=False)
        except UnicodeDecodeError:
            self._utf8.reset()
            return []
        if char and is_printable(char):
            return [char]
        return []

    def _feed_escape(self, byte: int) -> list[KeyId]:
        if byte == ord("["):
            self._state = "csi"
            self._sequence = "["
            return []
        if byte == ord("O"):
            self._state = "ss3"
            self._sequence = "O"
            return []
        # Not a sequence: ESC on its own, then decode the byte afresh
        self._state = "ground"
        return [Key.escape, *self.feed(byte)]

    def _feed_sequence(self, byte: int) -> list[KeyId]:
        self._sequence += chr(byte)

        if self._state == "ss3":
            return self._finish_sequence()

        if 0x40 <= byte <= 0x7E:
            return self._finish_sequence()
        if len(self._sequence) >= MAX_SEQUENCE_LENGTH:
            self._state = "ground"
            self._sequence = ""
        return []

    def _finish_sequence(self) -> list[KeyId]:
        key = LEGACY_KEY_SEQUENCES.get(self._sequence)
        self._state = "ground"
        self._sequence = ""
        return [key] if key else []
