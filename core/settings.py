"""Typed settings consumed by the gallery page engine and the services.

Values are loaded from JSON by `infrastructure.settings`; the defaults below
mirror the packaged `appsettings.json`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.errors import ConfigurationError


@dataclass(frozen=True)
class LocalizationSettings:
    """User-facing messages and page labels."""

    file_added: str = "File added: {}"
    file_found: str = "File already exists: {}"
    directory_not_found: str = "Directory not found."
    root_path_input: str = "Library root path (empty for the current directory):"
    album_name_input: str = "Album name:"
    album_name_empty_input_error: str = "Album name can't be empty."
    no_media_in_file_directory: str = "No media files found in {}"
    gallery_updated: str = "Gallery updated: {}"
    album_failed: str = "Album {} failed: {}"
    command_not_specified: str = "Command is not specified."
    command_not_recognized: str = "Command is not recognized."
    unrecognized_order_album_field: str = "Unrecognized album order \"{}\", ordering by date."
    error: str = "Error: {}"
    help: str = (
        "Commands:\n"
        "  init [root] [-f|--force]       create a library\n"
        "  new [root] [name]              create an album\n"
        "  fill [root] [name] [-g [-k]] [-oa name|date]\n"
        "                                 update album pages (-k: go on after a failed album)\n"
        "  compress [path]                compress videos with ffmpeg\n"
        "  help                           show this message\n"
        "Options:\n"
        "  -v, --verbose                  log to the console"
    )
    published: str = "Published"
    media_view: str = "Media viewer"
    close_media_view: str = "Close"
    scale_media_view: str = "Fit to screen"
    full_screen_media_view: str = "Full screen"
    switch_image_media_view: str = "Switch media"
    path_input: str = "Path to a video file or a folder:"
    path_not_found: str = "Path not found."
    only_video_formats_supports: str = "Only video formats are supported: {}"
    no_video_in_directory: str = "No video files found in {}"
    count_of_video_files_found: str = "Video files found: {}."
    starting_compression: str = "Starting compression."
    video_files_compressed: str = "Video files compressed."
    processing: str = "Processing"

    def format(self, key: str, *args: object) -> str:
        """Return message `key` formatted with `args`."""
        return str(getattr(self, key)).format(*args)


@dataclass(frozen=True)
class IndexHtmlSettings:
    """Grouping parameters and markup templates for generated pages.

    Attributes:
        group_time_window: Minutes after a group's first file that still join it.
        max_group_size: Maximum number of media items in one group.
        group_block: Group wrapper, `{{groupBlock}}` receives the group content.
        media_block: Row wrapper, `{{mediaItems}}` receives the items.
        image_item: Image card, `{{mediaFilePath}}` receives `Files/<name>`.
        video_item: Video card, `{{mediaFilePath}}` receives `Files/<name>`.
        text_item: Commented placeholder for hand-written prose.
        album_block: Album listing, `{{albumItems}}` receives album cards.
        album_item: Album card with `{{albumPath}}`, `{{albumName}}`, `{{mediaCount}}`.
    """

    group_time_window: int = 2
    max_group_size: int = 10
    group_block: str = '<div class="group">\n    {{groupBlock}}\n</div>'
    media_block: str = '<div class="photos">\n    {{mediaItems}}\n</div>'
    image_item: str = (
        '<article class="card" data-type="image" data-src="{{mediaFilePath}}">\n'
        '    <a class="media" href="{{mediaFilePath}}">\n'
        '        <img src="{{mediaFilePath}}" loading="lazy" />\n'
        "    </a>\n"
        "</article>"
    )
    video_item: str = (
        '<article class="card" data-type="video" data-src="{{mediaFilePath}}">\n'
        '    <a class="media" href="{{mediaFilePath}}">\n'
        '        <video src="{{mediaFilePath}}" muted playsinline preload="metadata"></video>\n'
        '        <span class="play" aria-hidden="true"></span>\n'
        '        <span class="video-ribbon" aria-hidden="true">VIDEO</span>\n'
        "    </a>\n"
        "</article>"
    )
    text_item: str = (
        "<!--\n"
        '<div class="story">\n'
        "    <p>Place text here.</p>\n"
        "</div>\n"
        "-->"
    )
    album_block: str = '<div class="photos photos--folders">{{albumItems}}</div>'
    album_item: str = (
        '<article class="card folder"><a class="media" href="{{albumPath}}">'
        '<div class="folder-icon" aria-hidden="true"></div>'
        '<div class="folder-text"><div class="folder-name">{{albumName}}</div>'
        '<div class="folder-count">{{mediaCount}}</div></div></a></article>'
    )

    def __post_init__(self) -> None:
        if self.group_time_window < 0:
            raise ConfigurationError("Group time window can't be negative.")
        if self.max_group_size < 1:
            raise ConfigurationError("Group size must be at least 1.")

    @property
    def supports_albums(self) -> bool:
        """True when both album templates are configured."""
        return bool(self.album_block.strip()) and bool(self.album_item.strip())


@dataclass(frozen=True)
class FFmpegAudioSettings:
    """Audio handling of the compressor.

    The source audio is copied first and re-encoded with `codec` at
    `bitrate_kbps` when copying fails, unless `copy` forbids re-encoding.
    """

    copy: bool = False
    codec: str = "aac"
    bitrate_kbps: int = 192


@dataclass(frozen=True)
class FFmpegSettings:
    """ffmpeg executable and its argument template."""

    path: str = "ffmpeg"
    arguments: str = (
        "-y -i {{inputPath}} -c:v libx264 -preset slow -crf {{crf}} {{audio}} "
        "-movflags +faststart {{outputPath}}"
    )
    audio: FFmpegAudioSettings = field(default_factory=FFmpegAudioSettings)


@dataclass(frozen=True)
class AppSettings:
    """All settings of one run; albums may override `index_html` and `ffmpeg`."""

    culture_info: str = "en-US"
    localization: LocalizationSettings = field(default_factory=LocalizationSettings)
    index_html: IndexHtmlSettings = field(default_factory=IndexHtmlSettings)
    ffmpeg: FFmpegSettings = field(default_factory=FFmpegSettings)

    @property
    def locale(self) -> str:
        """Babel locale identifier derived from `culture_info`."""
        return (self.culture_info or "en-US").replace("-", "_")
