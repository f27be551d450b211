"""Editor settings, layered from JSON files and command-line overrides.

Layers, lowest to highest: the user file (``~/.lineedit/settings.json``),
the project file (``<cwd>/.lineedit/settings.json``), then overrides passed
in by the caller. Saving rewrites only the keys this process changed, so a
concurrent edit to the user file is kept.
"""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from lineedit.history import DEFAULT_HISTORY_SIZE

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".lineedit"
SETTINGS_FILE_NAME = "settings.json"

DEFAULT_PROMPT = "> "
DEFAULT_ESCAPE_TIMEOUT_MS = 10


@dataclass
class EditorSettings:
    """Resolved settings for a :class:`~lineedit.session.LineEditor`."""

    history_size: int = DEFAULT_HISTORY_SIZE
    prompt: str = DEFAULT_PROMPT
    escape_timeout_ms: int = DEFAULT_ESCAPE_TIMEOUT_MS
    keybindings: dict[str, str | list[str]] = field(default_factory=dict)

    @property
    def escape_timeout(self) -> float:
        return self.escape_timeout_ms / 1000.0


def deep_merge_settings(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Layer *overrides* on top of *base* and return a new dict.

    Nested objects are merged key by key; lists and scalars are replaced.
    ``None`` in *overrides* means "not set" and leaves *base* alone.
    """
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge_settings(current, value)
        else:
            merged[key] = value
    return merged


def read_settings_file(path: Path) -> tuple[dict[str, Any], Exception | None]:
    """Parse one settings file.

    A missing file is an empty layer. An unreadable one is also an empty
    layer, with the error returned next to it rather than raised.
    """
    if not path.exists():
        return {}, None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        return {}, exc
    if not isinstance(data, dict):
        return {}, ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")
    return data, None


def default_config_dir() -> Path:
    return Path.home() / CONFIG_DIR_NAME


class SettingsManager:
    """Merged view over the user file, the project file and overrides.

    Build one with :meth:`create` (file backed) or :meth:`in_memory`.
    """

    def __init__(
        self,
        *,
        user_path: Path | None,
        project_path: Path | None,
        user_settings: dict[str, Any],
        persist: bool = True,
        load_error: Exception | None = None,
    ) -> None:
        self._user_path = user_path
        self._project_path = project_path
        self._user = dict(user_settings)
        self._persist = persist
        self._load_error = load_error
        self._dirty: set[str] = set()
        self._overrides: dict[str, Any] = {}

        if load_error is not None:
            logger.warning("ignoring unreadable settings file %s: %s", user_path, load_error)
        self._merged = self._merge()

    @classmethod
    def create(cls, cwd: str, config_dir: str | None = None) -> SettingsManager:
        user_path = Path(config_dir) if config_dir else default_config_dir()
        user_path = user_path / SETTINGS_FILE_NAME
        user_settings, error = read_settings_file(user_path)
        return cls(
            user_path=user_path,
            project_path=Path(cwd) / CONFIG_DIR_NAME / SETTINGS_FILE_NAME,
            user_settings=user_settings,
            load_error=error,
        )

    @classmethod
    def in_memory(cls, settings: dict[str, Any] | None = None) -> SettingsManager:
        """Settings that never touch the filesystem (tests, embedding)."""
        return cls(user_path=None, project_path=None, user_settings=settings or {}, persist=False)

    # -- layers ---------------------------------------------------------------

    def _project_layer(self) -> dict[str, Any]:
        if self._project_path is None:
            return {}
        layer, error = read_settings_file(self._project_path)
        if error is not None:
            logger.warning("ignoring unreadable project settings %s: %s", self._project_path, error)
        return layer

    def _merge(self) -> dict[str, Any]:
        merged = deep_merge_settings(self._user, self._project_layer())
        return deep_merge_settings(merged, self._overrides)

    def reload(self) -> None:
        """Re-read both files; overrides stay in effect."""
        if self._user_path is not None:
            self._user, self._load_error = read_settings_file(self._user_path)
        self._dirty.clear()
        self._merged = self._merge()

    def apply_overrides(self, overrides: dict[str, Any]) -> None:
        self._overrides = deep_merge_settings(self._overrides, overrides)
        self._merged = deep_merge_settings(self._merged, overrides)

    @property
    def settings(self) -> dict[str, Any]:
        return self._merged

    @property
    def load_error(self) -> Exception | None:
        return self._load_error

    def get_user_settings(self) -> dict[str, Any]:
        return deepcopy(self._user)

    # -- persistence ----------------------------------------------------------

    def _set(self, key: str, value: Any) -> None:
        self._user[key] = value
        self._dirty.add(key)
        self._write_user_file()
        self._merged = self._merge()

    def _write_user_file(self) -> None:
        if not self._persist or self._user_path is None:
            return
        if self._load_error is not None:
            # Leave a file we could not parse for the user to fix
            return

        on_disk, _ = read_settings_file(self._user_path)
        for key in self._dirty:
            on_disk[key] = self._user.get(key)
        on_disk = {k: v for k, v in on_disk.items() if v is not None}

        self._user_path.parent.mkdir(parents=True, exist_ok=True)
        self._user_path.write_text(
            json.dumps(on_disk, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )
        logger.debug("wrote %s to %s", sorted(self._dirty), self._user_path)

    # -- typed accessors ------------------------------------------------------

    def get_history_size(self) -> int:
        value = self._merged.get("historySize")
        if isinstance(value, int) and not isinstance(value, bool) and value >= 1:
            return value
        return DEFAULT_HISTORY_SIZE

    def get_prompt(self) -> str:
        value = self._merged.get("prompt")
        return value if isinstance(value, str) else DEFAULT_PROMPT

    def get_escape_timeout_ms(self) -> int:
        value = self._merged.get("escapeTimeoutMs")
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value
        return DEFAULT_ESCAPE_TIMEOUT_MS

    def get_keybindings(self) -> dict[str, str | list[str]]:
        value = self._merged.get("keybindings")
        return dict(value) if isinstance(value, dict) else {}

    def set_history_size(self, size: int) -> None:
        self._set("historySize", size)

    def set_prompt(self, prompt: str) -> None:
        self._set("prompt", prompt)

    def set_keybindings(self, keybindings: dict[str, str | list[str]]) -> None:
        self._set("keybindings", keybindings)

    def to_editor_settings(self) -> EditorSettings:
        return EditorSettings(
            history_size=self.get_history_size(),
            prompt=self.get_prompt(),
            escape_timeout_ms=self.get_escape_timeout_ms(),
            keybindings=self.get_keybindings(),
        )
