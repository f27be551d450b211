"""Terminal column measurement.

The buffer counts logical characters while the terminal counts columns;
:func:`visible_width` converts between the two when the renderer places the
cursor.
"""

from __future__ import annotations

import re
import unicodedata
from functools import lru_cache

import grapheme
import wcwidth

# Sequences the renderer writes itself: SGR, erase-line, cursor movement
_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")

_ZWJ = 0x200D
_VS16 = 0xFE0F


def _is_emoji_cluster(cluster: str) -> bool:
    for ch in cluster:
        cp = ord(ch)
        if cp in (_ZWJ, _VS16):
            return True
        # Skin-tone modifiers, regional indicators (flags)
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return True
    return ord(cluster[0]) >= 0x1F000


def cluster_width(cluster: str) -> int:
    """Columns taken by one grapheme cluster (0, 1 or 2)."""
    if not cluster:
        return 0
    first = cluster[0]
    if len(cluster) == 1:
        if unicodedata.category(first) == "Cc":
            return 0
        return max(wcwidth.wcwidth(first), 0)
    if _is_emoji_cluster(cluster):
        return 2
    if unicodedata.category(first)[0] == "M" or unicodedata.category(first) == "Cf":
        return 0
    return max(wcwidth.wcwidth(first), 0)


@lru_cache(maxsize=512)
def _measure(text: str) -> int:
    return sum(cluster_width(c) for c in grapheme.graphemes(text))


def visible_width(text: str) -> int:
    """Number of terminal columns *text* occupies, ignoring ANSI sequences."""
    text = _ANSI_RE.sub("", text)
    if text.isascii() and text.isprintable():
        return len(text)
    return _measure(text)
