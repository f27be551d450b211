"""Session controller: one "read a line" interaction.

:class:`ReadSession` is the editing state machine. It owns the line buffer,
the history navigation cursor and, while searching, the reverse search
state; it receives decoded key identifiers and ends in either ``accepted``
or ``cancelled``. :class:`LineEditor` drives sessions from an input source,
holding the process-wide history and the terminal guard.
"""

from __future__ import annotations

import logging
import os
from contextlib import nullcontext
from dataclasses import dataclass
from typing import ContextManager, Literal

from lineedit.errors import InputEnded
from lineedit.history import HistoryNavigator, HistoryStore
from lineedit.keybindings import EditorAction, EditorKeybindingsManager
from lineedit.keys import KeyDecoder, KeyId, is_printable
from lineedit.line_buffer import LineBuffer
from lineedit.render import AnsiRenderer, LineView, Renderer
from lineedit.search import ReverseSearch
from lineedit.settings import DEFAULT_PROMPT, EditorSettings
from lineedit.terminal import FileInput, InputSource, RawMode

logger = logging.getLogger(__name__)

SessionState = Literal["reading", "accepted", "cancelled"]
CancelReason = Literal["interrupt", "eof"]


@dataclass(frozen=True)
class ReadResult:
    """Outcome of a read session."""

    kind: Literal["accepted", "cancelled"]
    text: str = ""
    reason: CancelReason | None = None

    @property
    def accepted(self) -> bool:
        return self.kind == "accepted"


class ReadSession:
    """Line-editing state machine for a single read.

    Every key is handled completely before the next one; ``handle_key``
    returns True when the visible state changed and a render is due.
    """

    def __init__(
        self,
        history: HistoryStore,
        *,
        keybindings: EditorKeybindingsManager | None = None,
        prompt: str = DEFAULT_PROMPT,
    ) -> None:
        self.history = history
        self.prompt = prompt
        self.buffer = LineBuffer()
        self.navigator = HistoryNavigator(history)
        self.search: ReverseSearch | None = None
        self.state: SessionState = "reading"
        self.result: ReadResult | None = None
        self._kb = keybindings or EditorKeybindingsManager()

    @property
    def done(self) -> bool:
        return self.state != "reading"

    @property
    def searching(self) -> bool:
        return self.search is not None

    def view(self) -> LineView:
        if self.search is not None:
            return LineView(
                prompt=self.prompt,
                text=self.buffer.to_string(),
                cursor=self.buffer.cursor,
                searching=True,
                search_query=self.search.query,
                search_match=self.search.match_text,
                search_failed=self.search.failed,
            )
        return LineView(prompt=self.prompt, text=self.buffer.to_string(), cursor=self.buffer.cursor)

    # -- terminal transitions -----------------------------------------------

    def _accept(self) -> None:
        text = self.buffer.to_string()
        self.history.append(text)
        self.state = "accepted"
        self.result = ReadResult(kind="accepted", text=text)
        logger.debug("line accepted (%d chars)", len(text))

    def _cancel(self, reason: CancelReason) -> None:
        # Partial search state goes with the session
        self.search = None
        self.state = "cancelled"
        self.result = ReadResult(kind="cancelled", reason=reason)
        logger.debug("read cancelled: %s", reason)

    def interrupt(self) -> None:
        if not self.done:
            self._cancel("interrupt")

    def end_of_input(self) -> None:
        if not self.done:
            self._cancel("eof")

    # -- dispatch -----------------------------------------------------------

    def handle_key(self, key: KeyId) -> bool:
        if self.done:
            return False

        action = self._kb.action_for(key)
        if action == "interrupt":
            self._cancel("interrupt")
            return True

        if self.search is not None:
            return self._handle_search_key(key, action)

        if action is None:
            if is_printable(key):
                self.buffer.insert(key)
                return True
            return False

        return self._handle_action(action)

    def _handle_action(self, action: EditorAction) -> bool:  # noqa: C901
        buf = self.buffer

        if action == "submit":
            self._accept()
            return True

        if action == "cursorLeft":
            buf.move_left()
        elif action == "cursorRight":
            buf.move_right()
        elif action == "cursorLineStart":
            buf.move_to_start()
        elif action == "cursorLineEnd":
            buf.move_to_end()
        elif action == "deleteCharBackward":
            if buf.cursor == 0:
                return False
            buf.delete_backward(1)
        elif action == "deleteCharForward":
            if buf.cursor >= buf.length:
                return False
            buf.delete_forward(1)
        elif action == "deleteCharOrEof":
            if buf.is_empty:
                self._cancel("eof")
                return True
            if buf.cursor >= buf.length:
                return False
            buf.delete_forward(1)
        elif action == "deleteToLineEnd":
            if buf.cursor >= buf.length:
                return False
            buf.kill_to_end()
        elif action == "deleteLine":
            if buf.is_empty:
                return False
            buf.kill_line()
        elif action == "historyPrevious":
            return self.navigator.previous(buf)
        elif action == "historyNext":
            return self.navigator.next(buf)
        elif action == "reverseSearch":
            self.search = ReverseSearch(self.history)
        else:
            # searchCancel outside search mode
            return False
        return True

    def _handle_search_key(self, key: KeyId, action: EditorAction | None) -> bool:
        search = self.search
        assert search is not None

        if action == "reverseSearch":
            search.repeat()
        elif action == "submit":
            search.accept(self.buffer)
            self.search = None
        elif action == "searchCancel":
            search.cancel()
            self.search = None
        elif action == "deleteCharBackward":
            search.erase_char()
        elif action is None and is_printable(key):
            search.type_char(key)
        else:
            return False
        return True


class LineEditor:
    """Reads lines from a terminal with editing, history and reverse search.

    The editor owns the history store, so lines accepted by one
    :meth:`read_line` call are available to the next.
    """

    def __init__(
        self,
        history: HistoryStore | None = None,
        *,
        settings: EditorSettings | None = None,
        renderer: Renderer | None = None,
        keybindings: EditorKeybindingsManager | None = None,
    ) -> None:
        self.settings = settings or EditorSettings()
        self.history = history if history is not None else HistoryStore(self.settings.history_size)
        self.keybindings = keybindings or EditorKeybindingsManager(self.settings.keybindings)
        self.renderer: Renderer = renderer or AnsiRenderer()

    def _raw_mode(self, source: InputSource) -> ContextManager[object]:
        fd = source.fileno()
        if fd is None or not os.isatty(fd):
            return nullcontext()
        return RawMode(fd)

    def read_line(self, source: InputSource | None = None, *, prompt: str | None = None) -> ReadResult:
        """Run one read session and return its result.

        Cancellation (Ctrl+C, Ctrl+D on an empty line, end of input, or a
        ``KeyboardInterrupt`` while blocked) is reported as a ``cancelled``
        result, never raised.
        """
        source = source or FileInput()
        session = ReadSession(
            self.history,
            keybindings=self.keybindings,
            prompt=self.settings.prompt if prompt is None else prompt,
        )
        decoder = KeyDecoder()

        with self._raw_mode(source):
            self.renderer.render(session.view())
            try:
                while not session.done:
                    keys = decoder.feed(source.read_byte())
                    if decoder.pending_escape and not source.poll(self.settings.escape_timeout):
                        keys.extend(decoder.flush())
                    for key in keys:
                        changed = session.handle_key(key)
                        if session.done:
                            break
                        if changed:
                            self.renderer.render(session.view())
            except InputEnded:
                session.end_of_input()
            except KeyboardInterrupt:
                session.interrupt()

            assert session.result is not None
            self.renderer.finish(session.result)
        return session.result
