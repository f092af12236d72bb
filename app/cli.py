"""Command line interface: init, new, fill, compress and help.

Exit codes: 0 success, 1 no command, 2 unrecognized command or bad arguments,
3 runtime error.
"""

from __future__ import annotations

import argparse
from collections.abc import Callable, Sequence
import os
import sys
from typing import NoReturn

from loguru import logger

from core.errors import AlbumError
from core.media_types import VIDEO_EXTENSIONS
from core.models import OrderAlbumField
from core.services.interfaces import (
    CompressVideoRequest,
    CreateAlbumLibraryRequest,
    CreatePhotoAlbumRequest,
    FillGlobalPhotoAlbumRequest,
    FillPhotoAlbumRequest,
)
from core.settings import LocalizationSettings
from infrastructure.album_service import PhotoAlbumService
from infrastructure.library_service import AlbumLibraryService
from infrastructure.logging import init_logging
from infrastructure.resource import Resource
from infrastructure.settings import AppSettingsProvider
from infrastructure.video_service import VideoService

EXIT_OK = 0
EXIT_NO_COMMAND = 1
EXIT_USAGE = 2
EXIT_ERROR = 3

HELP_COMMANDS = ("help", "--help", "-h")


class UsageError(Exception):
    """Raised by the argument parser instead of exiting the process."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    # -v is accepted before or after the command name
    verbose = argparse.ArgumentParser(add_help=False)
    verbose.add_argument("-v", "--verbose", action="store_true", default=argparse.SUPPRESS)

    parser = _Parser(prog="photo-album-creator", add_help=False)
    parser.add_argument("-v", "--verbose", action="store_true")
    commands = parser.add_subparsers(dest="command", parser_class=_Parser)

    init = commands.add_parser("init", add_help=False, parents=[verbose])
    init.add_argument("root", nargs="?")
    init.add_argument("-f", "--force", action="store_true")

    new = commands.add_parser("new", add_help=False, parents=[verbose])
    new.add_argument("root", nargs="?")
    new.add_argument("name", nargs="?")

    fill = commands.add_parser("fill", add_help=False, parents=[verbose])
    fill.add_argument("root", nargs="?")
    fill.add_argument("name", nargs="?")
    fill.add_argument("-g", "--global", dest="is_global", action="store_true")
    fill.add_argument("-k", "--keep-going", action="store_true")
    fill.add_argument("-oa", "--order-album", dest="order_album")

    compress = commands.add_parser("compress", add_help=False, parents=[verbose])
    compress.add_argument("path", nargs="?")

    commands.add_parser("help", add_help=False, parents=[verbose])
    return parser


class CommandLineApp:
    """Resolves arguments (prompting for missing ones) and runs the services."""

    def __init__(
        self,
        resource: Resource | None = None,
        settings_provider: AppSettingsProvider | None = None,
        input_func: Callable[[str], str] = input,
        notify: Callable[[str], None] = print,
    ) -> None:
        self._resource = resource or Resource()
        self._settings_provider = settings_provider or AppSettingsProvider(self._resource)
        self._input = input_func
        self._notify = notify
        self._localization: LocalizationSettings = (
            self._settings_provider.load_main_settings().localization
        )

    def run(self, argv: Sequence[str]) -> int:
        """Run one command and return its exit code."""
        loc = self._localization
        argv = list(argv)
        if argv and argv[0].lower() in HELP_COMMANDS:
            self._notify(loc.help)
            return EXIT_OK

        try:
            args = build_parser().parse_args(argv)
        except UsageError as ex:
            logger.info("Bad arguments {}: {}", argv, ex)
            self._notify(loc.command_not_recognized)
            self._notify(loc.help)
            return EXIT_USAGE

        if args.command is None:
            self._notify(loc.command_not_specified)
            self._notify(loc.help)
            return EXIT_NO_COMMAND
        if args.command == "help":
            self._notify(loc.help)
            return EXIT_OK

        logger.info("Command: {}", args.command)
        try:
            return self._dispatch(args)
        except (AlbumError, OSError, ValueError) as ex:
            logger.exception("Command {} failed", args.command)
            self._notify(loc.format("error", ex))
            return EXIT_ERROR

    def _dispatch(self, args: argparse.Namespace) -> int:
        if args.command == "init":
            library_service = self._library_service()
            library_service.create(
                CreateAlbumLibraryRequest(self._root_path(args.root, must_exist=False), args.force)
            )
            return EXIT_OK

        if args.command == "new":
            root_path = self._root_path(args.root)
            self._album_service().create(
                CreatePhotoAlbumRequest(root_path, self._album_name(args.name))
            )
            return EXIT_OK

        if args.command == "fill":
            return self._fill(args)

        # compress
        path = args.path
        if path is None:
            self._notify(
                self._localization.format(
                    "only_video_formats_supports", ", ".join(VIDEO_EXTENSIONS)
                )
            )
            path = self._ask(self._localization.path_input)
        VideoService(self._settings_provider, notify=self._notify).compress(
            CompressVideoRequest(path)
        )
        return EXIT_OK

    def _fill(self, args: argparse.Namespace) -> int:
        order_album_field = OrderAlbumField.DATE
        if args.order_album:
            parsed = OrderAlbumField.parse(args.order_album)
            if parsed is None:
                self._notify(
                    self._localization.format("unrecognized_order_album_field", args.order_album)
                )
            else:
                order_album_field = parsed

        root_path = self._root_path(args.root)
        service = self._album_service()
        if args.is_global:
            result = service.fill_global(
                FillGlobalPhotoAlbumRequest(root_path, order_album_field, args.keep_going)
            )
            return EXIT_ERROR if result.failed else EXIT_OK

        name = self._album_name(args.name)
        service.fill(FillPhotoAlbumRequest(root_path, name, order_album_field))
        return EXIT_OK

    def _library_service(self) -> AlbumLibraryService:
        return AlbumLibraryService(self._resource, self._settings_provider, self._notify)

    def _album_service(self) -> PhotoAlbumService:
        return PhotoAlbumService(
            self._resource,
            self._settings_provider,
            self._library_service(),
            notify=self._notify,
        )

    def _root_path(self, value: str | None, must_exist: bool = True) -> str:
        """Root from the arguments, else asked until an existing directory is given.

        An empty answer selects the current directory.
        """
        if value is not None and value.strip():
            if must_exist and not os.path.isdir(value):
                raise AlbumError(self._localization.directory_not_found + f" {value}")
            return os.path.abspath(value)

        while True:
            answer = self._ask(self._localization.root_path_input)
            if not answer:
                return os.getcwd()
            if os.path.isdir(answer):
                return os.path.abspath(answer)
            self._notify(self._localization.directory_not_found)

    def _album_name(self, value: str | None) -> str:
        if value is not None and value.strip():
            return value.strip()

        while True:
            answer = self._ask(self._localization.album_name_input)
            if answer:
                return answer
            self._notify(self._localization.album_name_empty_input_error)

    def _ask(self, prompt: str) -> str:
        return self._input(prompt + " ").strip()


def main(argv: Sequence[str] | None = None) -> int:
    """Console entry point."""
    if argv is None:
        argv = sys.argv[1:]
    verbose = any(arg in ("-v", "--verbose") for arg in argv)
    init_logging(level="DEBUG" if verbose else "INFO", console=verbose)
    return CommandLineApp().run(argv)
