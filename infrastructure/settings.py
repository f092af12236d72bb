"""Settings access helpers for JSON-based configuration.

Application settings ship as the `appsettings.json` resource. A library keeps
its own `System/album_settings.json` whose `index_html` and `ffmpeg` sections
override the application values key by key.
"""

from __future__ import annotations

from dataclasses import asdict, fields
import json
from pathlib import Path
from typing import Any

from loguru import logger

from core.errors import ConfigurationError
from core.settings import (
    AppSettings,
    FFmpegAudioSettings,
    FFmpegSettings,
    IndexHtmlSettings,
    LocalizationSettings,
)
from infrastructure.resource import Resource

APP_SETTINGS_RESOURCE = "appsettings.json"


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings file not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            text = f.read()
        self._data = _loads(text, self._path)

    @classmethod
    def from_text(cls, text: str, source: str = "<text>") -> JsonSettings:
        """Build settings from JSON `text` without touching the filesystem."""
        instance = cls.__new__(cls)
        instance._path = Path(source)
        instance._data = _loads(text, source)
        return instance

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node


class AppSettingsProvider:
    """Loads typed `AppSettings` and merges library-level overrides."""

    def __init__(self, resource: Resource) -> None:
        self._resource = resource
        self._cache: AppSettings | None = None

    def load_main_settings(self) -> AppSettings:
        """Application settings from the packaged resource (cached)."""
        if self._cache is not None:
            return self._cache

        text = self._resource.read_text(APP_SETTINGS_RESOURCE)
        if not text.strip():
            raise ConfigurationError(f"{APP_SETTINGS_RESOURCE} can't be empty.")
        self._cache = build_app_settings(JsonSettings.from_text(text, APP_SETTINGS_RESOURCE).data)
        return self._cache

    def load_album_settings(self, path: str | Path) -> AppSettings:
        """Application settings overridden by the library settings file at `path`.

        A missing or empty file yields the application settings unchanged.
        """
        main = self.load_main_settings()
        settings_path = Path(path)
        if not settings_path.exists():
            logger.warning("Library settings not found: {}", settings_path)
            return main
        text = settings_path.read_text(encoding="utf-8")
        if not text.strip():
            return main

        overrides = JsonSettings.from_text(text, str(settings_path))
        base = settings_to_dict(main)
        for section in ("index_html", "ffmpeg"):
            value = overrides.get(section)
            if isinstance(value, dict):
                base[section] = _merge(base[section], value)
        return build_app_settings(base)

    def create_library_settings_json(self) -> str:
        """JSON stored as a new library's `album_settings.json`."""
        data = settings_to_dict(self.load_main_settings())
        return json.dumps(
            {"index_html": data["index_html"], "ffmpeg": data["ffmpeg"]},
            ensure_ascii=False,
            indent=2,
        )


def build_app_settings(data: dict[str, Any]) -> AppSettings:
    """Typed settings from a parsed JSON mapping; unknown keys are ignored."""
    ffmpeg_data = dict(data.get("ffmpeg") or {})
    audio = _from_mapping(FFmpegAudioSettings, ffmpeg_data.pop("audio", None))
    try:
        return AppSettings(
            culture_info=str(data.get("culture_info") or "en-US"),
            localization=_from_mapping(LocalizationSettings, data.get("localization")),
            index_html=_from_mapping(IndexHtmlSettings, data.get("index_html")),
            ffmpeg=FFmpegSettings(**_known_fields(FFmpegSettings, ffmpeg_data), audio=audio),
        )
    except (TypeError, ValueError) as ex:
        raise ConfigurationError(f"Invalid settings: {ex}") from ex


def settings_to_dict(settings: AppSettings) -> dict[str, Any]:
    """Plain JSON-ready mapping of `settings`."""
    return asdict(settings)


def _from_mapping(cls: type, data: Any) -> Any:
    if not isinstance(data, dict):
        return cls()
    return cls(**_known_fields(cls, data))


def _known_fields(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls) if f.init}
    return {k: v for k, v in data.items() if k in names}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _loads(text: str, source: object) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as ex:
        raise ConfigurationError(f"Invalid JSON in {source}: {ex}") from ex
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings root must be an object: {source}")
    return data
