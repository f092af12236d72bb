from __future__ import annotations

from datetime import datetime
import os

import pytest

from core.models import AlbumLibrary, MediaFile
from core.settings import AppSettings
from infrastructure.resource import Resource
from infrastructure.settings import AppSettingsProvider


def make_media(name: str, created_at: datetime, is_image: bool | None = None) -> MediaFile:
    if is_image is None:
        is_image = not name.lower().endswith((".mp4", ".mov", ".webm", ".mkv", ".avi", ".m4v"))
    return MediaFile(name, os.path.join("/media", name), is_image, created_at)


def write_media(directory, name: str, when: datetime) -> str:
    """Create a placeholder media file with a fixed modification time."""
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, name)
    with open(path, "wb") as f:
        f.write(b"not really media")
    stamp = when.timestamp()
    os.utime(path, (stamp, stamp))
    return path


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings()


@pytest.fixture
def library(tmp_path) -> AlbumLibrary:
    return AlbumLibrary(str(tmp_path))


@pytest.fixture
def resource() -> Resource:
    return Resource()


@pytest.fixture
def page_template(resource) -> str:
    return resource.read_text("index_template.html")


@pytest.fixture
def settings_provider(resource) -> AppSettingsProvider:
    return AppSettingsProvider(resource)


@pytest.fixture
def messages() -> list[str]:
    return []
