"""Video compression through an external ffmpeg process."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import Enum
import os
import shlex
import subprocess

from loguru import logger

from core.errors import ConfigurationError
from core.media_types import VIDEO_EXTENSIONS, is_video
from core.services.interfaces import CompressVideoRequest
from core.settings import FFmpegSettings, LocalizationSettings
from infrastructure.file_swapper import FileSwapper
from infrastructure.service_base import AlbumServiceBase
from infrastructure.settings import AppSettingsProvider


class VideoQuality(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Constant rate factor per quality, lower is better
CRF_BY_QUALITY = {VideoQuality.LOW: 28, VideoQuality.MEDIUM: 20, VideoQuality.HIGH: 17}


class ProcessRunner:
    """Runs an executable and returns its exit code."""

    def run(self, executable: str, arguments: Sequence[str]) -> int:
        logger.debug("Running {} {}", executable, " ".join(arguments))
        completed = subprocess.run([executable, *arguments], check=False)
        return completed.returncode


class FFmpegCompressor:
    """Re-encodes a video with the configured ffmpeg argument template."""

    def __init__(self, process_runner: ProcessRunner, settings: FFmpegSettings) -> None:
        if not settings.path or not settings.path.strip():
            raise ConfigurationError("ffmpeg path can't be empty.")
        if not settings.arguments or not settings.arguments.strip():
            raise ConfigurationError("ffmpeg arguments can't be empty.")
        self._process_runner = process_runner
        self._settings = settings

    def compress(self, input_path: str, output_path: str, quality: VideoQuality) -> bool:
        """Compress `input_path` into `output_path`.

        Audio is copied as is first; when that fails it is re-encoded with the
        configured codec and bitrate.

        Returns:
            bool: True when ffmpeg succeeded and produced `output_path`.
        """
        attempts = (True,) if self._settings.audio.copy else (True, False)
        try:
            return any(
                self._compress(input_path, output_path, quality, copy_audio)
                for copy_audio in attempts
            )
        except OSError as ex:
            logger.warning("Can't run ffmpeg: {}", ex)
            return False

    def build_arguments(
        self, input_path: str, output_path: str, quality: VideoQuality, copy_audio: bool
    ) -> list[str]:
        """Argument list for one ffmpeg run."""
        audio = self._settings.audio
        audio_arguments = (
            ["-c:a", "copy"]
            if copy_audio
            else ["-c:a", audio.codec, "-b:a", f"{audio.bitrate_kbps}k"]
        )

        arguments: list[str] = []
        for token in shlex.split(self._settings.arguments):
            if token == "{{audio}}":
                arguments.extend(audio_arguments)
                continue
            arguments.append(
                token.replace("{{inputPath}}", input_path)
                .replace("{{outputPath}}", output_path)
                .replace("{{crf}}", str(CRF_BY_QUALITY[quality]))
            )
        return arguments

    def _compress(
        self, input_path: str, output_path: str, quality: VideoQuality, copy_audio: bool
    ) -> bool:
        arguments = self.build_arguments(input_path, output_path, quality, copy_audio)
        exit_code = self._process_runner.run(self._settings.path, arguments)
        if exit_code != 0:
            logger.info(
                "ffmpeg exited with {} for {} (copy audio: {})", exit_code, input_path, copy_audio
            )
        return exit_code == 0 and os.path.isfile(output_path)


class VideoCompressor:
    """Compresses single files or whole folders in place."""

    def __init__(
        self,
        compressor: FFmpegCompressor,
        localization: LocalizationSettings,
        notify: Callable[[str], None] = print,
        quality: VideoQuality = VideoQuality.MEDIUM,
    ) -> None:
        self._compressor = compressor
        self._localization = localization
        self._notify = notify
        self._quality = quality

    def process_folder(self, folder_path: str) -> int:
        """Compress every video directly inside `folder_path`; return the count replaced."""
        files = sorted(
            os.path.join(folder_path, name)
            for name in os.listdir(folder_path)
            if os.path.isfile(os.path.join(folder_path, name))
            and is_video(name)
            and not _is_swap_file(name)
        )
        if not files:
            self._notify(self._localization.format("no_video_in_directory", folder_path))
            return 0

        self._notify(
            self._localization.format("count_of_video_files_found", len(files))
            + " "
            + self._localization.starting_compression
        )
        replaced = sum(1 for path in files if self.process_file(path))
        self._notify(self._localization.video_files_compressed)
        return replaced

    def process_file(self, path: str) -> bool:
        """Compress one video and swap it in; False leaves the original untouched."""
        swapper = FileSwapper.for_file(path)
        swapper.clean_residual()

        self._notify(f">> {self._localization.processing}: {os.path.basename(path)}")
        if not self._compressor.compress(swapper.original_path, swapper.temp_path, self._quality):
            logger.warning("Compression failed: {}", path)
            swapper.clean_residual()
            return False
        return swapper.commit()


class VideoService(AlbumServiceBase):
    """Entry point of the `compress` command."""

    def __init__(
        self,
        settings_provider: AppSettingsProvider,
        compressor: VideoCompressor | None = None,
        process_runner: ProcessRunner | None = None,
        notify: Callable[[str], None] = print,
    ) -> None:
        super().__init__(settings_provider, notify)
        self._compressor = compressor or VideoCompressor(
            FFmpegCompressor(process_runner or ProcessRunner(), self.settings.ffmpeg),
            self.localization,
            notify,
        )

    def compress(self, request: CompressVideoRequest) -> int:
        """Compress the file or folder of `request`; return the number of videos replaced."""
        path = request.path
        if os.path.isfile(path):
            if not is_video(path):
                self.notify(
                    self.localization.format(
                        "only_video_formats_supports", ", ".join(VIDEO_EXTENSIONS)
                    )
                )
                return 0
            return 1 if self._compressor.process_file(path) else 0
        if os.path.isdir(path):
            return self._compressor.process_folder(path)

        self.notify(self.localization.path_not_found)
        return 0


def _is_swap_file(name: str) -> bool:
    stem = os.path.splitext(name)[0]
    return stem.endswith((".__tmp__", ".__old__"))
