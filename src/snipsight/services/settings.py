"""User settings for snippet insertion and the editor window."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

__all__ = ["Settings", "SettingsStore"]

LOGGER = logging.getLogger(__name__)
_DEFAULT_SETTINGS_PATH = Path.home() / ".snipsight" / "settings.json"
_SETTINGS_VERSION = 1
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FONT_SIZE_RANGE = (6, 72)


def _env_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


def _env_text(value: str) -> str:
    return value.strip()


# Environment variable -> (settings field, parser). Applied after CLI overrides.
_ENV_OVERRIDES: Mapping[str, tuple[str, Callable[[str], Any]]] = {
    "SNIPSIGHT_USE_THING_AT_POINT": ("use_thing_at_point", _env_bool),
    "SNIPSIGHT_ALWAYS_OVERWRITE_THING_AT_POINT": ("always_overwrite_thing_at_point", _env_bool),
    "SNIPSIGHT_DEFAULT_MODE": ("default_mode", _env_text),
    "SNIPSIGHT_DEBUG_LOGGING": ("debug_logging", _env_bool),
    "SNIPSIGHT_THEME": ("theme", _env_text),
}


@dataclass(slots=True)
class Settings:
    """User-configurable settings persisted between sessions.

    ``use_thing_at_point`` lets the symbol at the caret seed the picker query
    and be overwritten by a snippet whose key matches it;
    ``always_overwrite_thing_at_point`` overwrites that symbol whatever
    snippet is chosen.
    """

    use_thing_at_point: bool = False
    always_overwrite_thing_at_point: bool = False
    default_mode: str = "text"
    theme: str = "default"
    font_family: str = "JetBrains Mono"
    font_size: int = 13
    debug_logging: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.default_mode = (self.default_mode or "").strip().lower() or "text"
        self.theme = (self.theme or "").strip().lower() or "default"
        low, high = _FONT_SIZE_RANGE
        self.font_size = max(low, min(int(self.font_size), high))


class SettingsStore:
    """Reads and writes :class:`Settings` as versioned JSON."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Return persisted settings with CLI ``overrides`` then environment applied.

        Missing or corrupt files yield defaults. Payloads written by another
        version are rewritten in the current format.
        """

        payload = self._read_payload()
        settings = self._from_payload(payload)
        if payload and payload.get("version") != _SETTINGS_VERSION:
            try:
                self.save(settings)
            except OSError as exc:  # pragma: no cover - depends on filesystem
                LOGGER.warning("Failed to migrate settings payload: %s", exc)

        if overrides:
            settings = _merge(settings, overrides, source="CLI")
        env_overrides = {
            name: parser(os.environ[env_name])
            for env_name, (name, parser) in _ENV_OVERRIDES.items()
            if env_name in os.environ
        }
        if env_overrides:
            settings = _merge(settings, env_overrides, source="environment")
        return settings

    def save(self, settings: Settings) -> Path:
        """Write ``settings`` atomically (temp file + rename)."""

        data = asdict(settings)
        data["version"] = _SETTINGS_VERSION
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def update(self, settings: Settings, **changes: Any) -> Settings:
        """Persist ``settings`` with ``changes`` applied and return the new value."""

        updated = _merge(settings, changes, source="runtime")
        if updated != settings:
            self.save(updated)
        return updated

    def _read_payload(self) -> Dict[str, Any]:
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not contain an object", self._path)
            return {}
        return payload

    @staticmethod
    def _from_payload(payload: Mapping[str, Any]) -> Settings:
        known = {entry.name for entry in fields(Settings)}
        try:
            return Settings(**{key: value for key, value in payload.items() if key in known})
        except (TypeError, ValueError) as exc:
            LOGGER.warning("Settings payload contained unexpected data: %s", exc)
            return Settings()


def _merge(settings: Settings, overrides: Mapping[str, Any], *, source: str) -> Settings:
    known = {entry.name for entry in fields(Settings)}
    changes = {key: value for key, value in overrides.items() if key in known and value is not None}
    if isinstance(changes.get("metadata"), Mapping):
        changes["metadata"] = {**settings.metadata, **changes["metadata"]}
    if not changes:
        return settings
    LOGGER.debug("Applying %s settings overrides: %s", source, sorted(changes))
    return replace(settings, **changes)
