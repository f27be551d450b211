"""Renderer contract and the single-line ANSI renderer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from lineedit.terminal import ProcessTerminal, Terminal
from lineedit.utils import visible_width

if TYPE_CHECKING:
    from lineedit.session import ReadResult

_CLEAR_LINE = "\r\x1b[K"
_CURSOR_LEFT_FMT = "\x1b[{}D"


@dataclass(frozen=True)
class LineView:
    """Snapshot of everything a renderer needs for one frame."""

    prompt: str
    text: str
    cursor: int
    searching: bool = False
    search_query: str = ""
    search_match: str | None = None
    search_failed: bool = False


class Renderer(Protocol):
    def render(self, view: LineView) -> None: ...

    def finish(self, result: ReadResult) -> None: ...


def search_prompt(view: LineView) -> str:
    label = "failed reverse-i-search" if view.search_failed else "reverse-i-search"
    return f"({label})`{view.search_query}': "


class AnsiRenderer:
    """Redraws the prompt and buffer on one terminal line.

    Each frame returns to column 0, clears the line, writes prompt and text,
    then moves the cursor back over whatever follows the cursor.
    """

    def __init__(self, terminal: Terminal | None = None) -> None:
        self._terminal = terminal or ProcessTerminal()

    def render(self, view: LineView) -> None:
        if view.searching:
            self._terminal.write(_CLEAR_LINE + search_prompt(view) + (view.search_match or ""))
            return

        out = _CLEAR_LINE + view.prompt + view.text
        tail = visible_width(view.text[view.cursor :])
        if tail > 0:
            out += _CURSOR_LEFT_FMT.format(tail)
        self._terminal.write(out)

    def finish(self, result: ReadResult) -> None:
        if result.reason == "interrupt":
            self._terminal.write("^C\r\n")
        else:
            self._terminal.write("\r\n")
