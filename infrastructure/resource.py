"""Access to files shipped in the `resources` directory next to this module."""

from __future__ import annotations

from pathlib import Path

RESOURCES_DIR = Path(__file__).parent / "resources"


class Resource:
    """Reads packaged text resources (templates, assets, default settings)."""

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else RESOURCES_DIR

    def read_text(self, resource_name: str) -> str:
        """Return the UTF-8 text of `resource_name` (a path relative to the base dir)."""
        if not resource_name or not resource_name.strip():
            raise ValueError("Resource name can't be empty.")
        full_path = self._base_dir.joinpath(*resource_name.replace("\\", "/").split("/"))
        if not full_path.is_file():
            raise FileNotFoundError(
                f'Resource with a name "{resource_name}" doesn\'t exist at the path: {full_path}'
            )
        return full_path.read_text(encoding="utf-8")
