"""Replace a file by its processed copy while keeping the original metadata."""

from __future__ import annotations

import os
import shutil

from loguru import logger
from send2trash import send2trash


class FileSwapper:
    """Swaps `original_path` with `temp_path`, keeping a backup until it succeeds.

    On commit the original is renamed to `backup_path`, the temp file takes its
    place and inherits the original timestamps and mode; the backup then goes to
    the recycle bin. Any failure restores the original.
    """

    def __init__(self, original_path: str, temp_path: str, backup_path: str) -> None:
        self.original_path = os.path.abspath(original_path)
        self.temp_path = os.path.abspath(temp_path)
        self.backup_path = os.path.abspath(backup_path)

    @classmethod
    def for_file(cls, path: str) -> FileSwapper:
        """Swapper using `<name>.__tmp__<ext>` and `<name>.__old__<ext>` next to `path`."""
        directory, file_name = os.path.split(os.path.abspath(path))
        base_name, extension = os.path.splitext(file_name)
        return cls(
            path,
            os.path.join(directory, f"{base_name}.__tmp__{extension}"),
            os.path.join(directory, f"{base_name}.__old__{extension}"),
        )

    def clean_residual(self) -> None:
        """Remove temp/backup files left by an interrupted run."""
        _safe_delete(self.temp_path)
        _safe_delete(self.backup_path)

    def commit(self) -> bool:
        """Move the temp file over the original.

        Returns:
            bool: True when the original was replaced; False after a rollback.
        """
        try:
            _safe_delete(self.backup_path)
            os.replace(self.original_path, self.backup_path)
            os.replace(self.temp_path, self.original_path)
        except OSError as ex:
            logger.warning("Error replacing file {}: {}", self.original_path, ex)
            _safe_delete(self.temp_path)
            self._rollback()
            return False

        try:
            shutil.copystat(self.backup_path, self.original_path)
        except OSError as ex:
            logger.debug("Can't restore metadata of {}: {}", self.original_path, ex)
        self._dispose_backup()
        return True

    def _rollback(self) -> None:
        try:
            if os.path.exists(self.backup_path) and not os.path.exists(self.original_path):
                os.replace(self.backup_path, self.original_path)
            else:
                _safe_delete(self.backup_path)
        except OSError as ex:
            logger.error("Rollback failed for {}: {}", self.original_path, ex)

    def _dispose_backup(self) -> None:
        if not os.path.exists(self.backup_path):
            return
        try:
            send2trash(self.backup_path)
        except OSError as ex:
            logger.warning("Recycle bin unavailable for {}, deleting: {}", self.backup_path, ex)
            _safe_delete(self.backup_path)


def _safe_delete(path: str) -> None:
    try:
        if os.path.isfile(path):
            os.remove(path)
    except OSError as ex:
        logger.debug("Can't delete {}: {}", path, ex)
