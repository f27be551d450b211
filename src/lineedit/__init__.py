"""lineedit -- interactive terminal line editor.

Raw keystrokes in, a finished line out: cursor editing, bounded history
with Up/Down browsing, and Ctrl+R reverse incremental search.
"""

from .errors import InputEnded, LineEditError, OutOfRangeError, RawModeUnavailable
from .history import DEFAULT_HISTORY_SIZE, HistoryNavigator, HistoryStore
from .keybindings import (
    DEFAULT_EDITOR_KEYBINDINGS,
    EditorAction,
    EditorKeybindingsManager,
)
from .keys import Key, KeyDecoder, KeyId
from .line_buffer import LineBuffer
from .render import AnsiRenderer, LineView, Renderer
from .search import ReverseSearch
from .session import LineEditor, ReadResult, ReadSession
from .settings import EditorSettings, SettingsManager
from .terminal import BytesInput, FileInput, InputSource, ProcessTerminal, RawMode, Terminal
from .utils import visible_width

__all__ = [
    # errors
    "InputEnded",
    "LineEditError",
    "OutOfRangeError",
    "RawModeUnavailable",
    # history
    "DEFAULT_HISTORY_SIZE",
    "HistoryNavigator",
    "HistoryStore",
    # keybindings
    "DEFAULT_EDITOR_KEYBINDINGS",
    "EditorAction",
    "EditorKeybindingsManager",
    # keys
    "Key",
    "KeyDecoder",
    "KeyId",
    # line buffer
    "LineBuffer",
    # render
    "AnsiRenderer",
    "LineView",
    "Renderer",
    # search
    "ReverseSearch",
    # session
    "LineEditor",
    "ReadResult",
    "ReadSession",
    # settings
    "EditorSettings",
    "SettingsManager",
    # terminal
    "BytesInput",
    "FileInput",
    "InputSource",
    "ProcessTerminal",
    "RawMode",
    "Terminal",
    # utils
    "visible_width",
]
