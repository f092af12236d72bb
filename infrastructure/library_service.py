"""Album library scaffolding."""

from __future__ import annotations

from collections.abc import Callable
import os

from core.models import AlbumLibrary
from core.services.interfaces import CreateAlbumLibraryRequest
from infrastructure.resource import Resource
from infrastructure.service_base import AlbumServiceBase
from infrastructure.settings import AppSettingsProvider


class AlbumLibraryService(AlbumServiceBase):
    """Creates the `System` folder with shared assets, settings and a README."""

    def __init__(
        self,
        resource: Resource,
        settings_provider: AppSettingsProvider,
        notify: Callable[[str], None] = print,
    ) -> None:
        super().__init__(settings_provider, notify)
        self._resource = resource

    def create(self, request: CreateAlbumLibraryRequest) -> AlbumLibrary:
        """Create (or, with `is_force`, overwrite) the library scaffold."""
        library = AlbumLibrary(request.root_path)
        os.makedirs(library.system_path, exist_ok=True)

        files = (
            (library.style_path, self._resource.read_text(AlbumLibrary.STYLE_FILE_NAME)),
            (library.script_path, self._resource.read_text(AlbumLibrary.SCRIPT_FILE_NAME)),
            (library.readme_path, self._resource.read_text(AlbumLibrary.README_TEMPLATE_NAME)),
            (library.settings_path, self.settings_provider.create_library_settings_json()),
        )
        for full_path, text in files:
            relative_path = library.get_relative_path(full_path)
            self.create_file(full_path, relative_path, text, request.is_force)
        return library
