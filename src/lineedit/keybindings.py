"""Mapping between decoded key ids and editor actions."""

from __future__ import annotations

from typing import Literal

from lineedit.keys import KeyId

EditorAction = Literal[
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    "deleteCharOrEof",
    "deleteToLineEnd",
    "deleteLine",
    # History
    "historyPrevious",
    "historyNext",
    "reverseSearch",
    "searchCancel",
    # Session
    "submit",
    "interrupt",
]

EditorKeybindingsConfig = dict[EditorAction, KeyId | list[KeyId]]

DEFAULT_EDITOR_KEYBINDINGS: dict[EditorAction, KeyId | list[KeyId]] = {
    # Cursor movement
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    # Deletion
    "deleteCharBackward": "backspace",
    "deleteCharForward": "delete",
    "deleteCharOrEof": "ctrl+d",
    "deleteToLineEnd": "ctrl+k",
    "deleteLine": "ctrl+u",
    # History
    "historyPrevious": ["up", "ctrl+p"],
    "historyNext": ["down", "ctrl+n"],
    "reverseSearch": "ctrl+r",
    "searchCancel": ["escape", "ctrl+g"],
    # Session
    "submit": "enter",
    "interrupt": "ctrl+c",
}

_KEY_ALIASES: dict[str, str] = {
    "esc": "escape",
    "return": "enter",
    "del": "delete",
    "pageup": "pageUp",
    "pagedown": "pageDown",
}


def normalize_key_id(key_id: str) -> KeyId:
    """Canonicalize a configured key id: ``"Ctrl+A"`` -> ``"ctrl+a"``, ``"esc"`` -> ``"escape"``."""
    *modifiers, name = key_id.strip().split("+")
    if len(name) > 1:
        name = _KEY_ALIASES.get(name.lower(), name.lower())
    elif modifiers:
        name = name.lower()
    return "+".join([m.lower() for m in modifiers] + [name])


def _as_key_list(keys: KeyId | list[KeyId]) -> list[KeyId]:
    return [normalize_key_id(k) for k in ([keys] if isinstance(keys, str) else keys)]


class EditorKeybindingsManager:
    """Two-way lookup between editor actions and decoded key ids.

    A config entry replaces the default keys of its action entirely. When two
    actions end up claiming the same key, the one listed first in
    :data:`DEFAULT_EDITOR_KEYBINDINGS` wins.
    """

    def __init__(self, config: EditorKeybindingsConfig | None = None) -> None:
        self._keys_by_action: dict[EditorAction, list[KeyId]] = {}
        self._action_by_key: dict[KeyId, EditorAction] = {}
        self.set_config(config or {})

    def set_config(self, config: EditorKeybindingsConfig) -> None:
        unknown = [a for a in config if a not in DEFAULT_EDITOR_KEYBINDINGS]
        if unknown:
            raise ValueError(f"Unknown editor action: {unknown[0]!r}")

        bound = {**DEFAULT_EDITOR_KEYBINDINGS, **config}
        self._keys_by_action = {
            action: _as_key_list(bound[action]) for action in DEFAULT_EDITOR_KEYBINDINGS
        }
        self._action_by_key = {}
        for action, keys in self._keys_by_action.items():
            for key in keys:
                self._action_by_key.setdefault(key, action)

    def action_for(self, key_id: KeyId) -> EditorAction | None:
        return self._action_by_key.get(key_id)

    def matches(self, key_id: KeyId, action: EditorAction) -> bool:
        return key_id in self._keys_by_action.get(action, [])

    def get_keys(self, action: EditorAction) -> list[KeyId]:
        return list(self._keys_by_action.get(action, []))
