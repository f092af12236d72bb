"""Shared plumbing for the album services."""

from __future__ import annotations

from collections.abc import Callable
import os

from loguru import logger

from core.settings import AppSettings, LocalizationSettings
from infrastructure.settings import AppSettingsProvider


class AlbumServiceBase:
    """Holds the loaded settings and writes scaffold files.

    Attributes:
        settings_provider: Source of application and library settings.
        settings: Application settings loaded at construction.
        notify: Receives user-facing progress messages (stdout by default).
    """

    def __init__(
        self,
        settings_provider: AppSettingsProvider,
        notify: Callable[[str], None] = print,
    ) -> None:
        self.settings_provider = settings_provider
        self.settings: AppSettings = settings_provider.load_main_settings()
        self.notify = notify

    @property
    def localization(self) -> LocalizationSettings:
        return self.settings.localization

    def create_file(
        self, full_path: str, relative_path: str, text: str, is_force: bool = False
    ) -> bool:
        """Write `text` to `full_path` unless it exists (or `is_force` is set).

        Returns:
            bool: True when the file was written.
        """
        if os.path.exists(full_path) and not is_force:
            logger.debug("File already exists: {}", full_path)
            self.notify(self.localization.format("file_found", relative_path))
            return False

        with open(full_path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        logger.info("File written: {}", full_path)
        self.notify(self.localization.format("file_added", relative_path))
        return True
