from __future__ import annotations

from datetime import datetime
import os

from conftest import write_media
import pytest

from app.cli import CommandLineApp, build_parser
from core.settings import LocalizationSettings

HELP = LocalizationSettings().help


def make_app(messages, answers=()):
    pending = list(answers)

    def ask(prompt):
        messages.append(prompt.strip())
        return pending.pop(0)

    return CommandLineApp(input_func=ask, notify=messages.append)


def test_no_command(messages):
    assert make_app(messages).run([]) == 1
    assert messages == ["Command is not specified.", HELP]


@pytest.mark.parametrize("argv", [["bogus"], ["fill", "a", "b", "c"], ["init", "--nope"]])
def test_unrecognized_command_or_arguments(messages, argv):
    assert make_app(messages).run(argv) == 2
    assert messages == ["Command is not recognized.", HELP]


@pytest.mark.parametrize("argv", [["help"], ["--help"], ["-h"]])
def test_help(messages, argv):
    assert make_app(messages).run(argv) == 0
    assert messages == [HELP]


def test_init_with_root_argument(messages, tmp_path):
    root = tmp_path / "library"

    assert make_app(messages).run(["init", str(root), "--force"]) == 0

    assert (root / "System" / "styles.css").is_file()
    assert (root / "README.md").is_file()


def test_new_prompts_for_missing_values(messages, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    code = make_app(messages, answers=["", "  ", "Trip"]).run(["new"])

    assert code == 0
    assert (tmp_path / "Trip" / "index.html").is_file()
    assert "Album name can't be empty." in messages


def test_root_prompt_repeats_until_directory_exists(messages, tmp_path):
    answers = [str(tmp_path / "absent"), str(tmp_path), "Trip"]

    assert make_app(messages, answers).run(["new"]) == 0

    assert messages.count("Directory not found.") == 1
    assert (tmp_path / "Trip" / "Files").is_dir()


def test_fill_album(messages, tmp_path):
    write_media(tmp_path / "Trip" / "Files", "a.jpg", datetime(2024, 5, 1, 9, 0))

    assert make_app(messages).run(["fill", str(tmp_path), "Trip", "-oa", "name"]) == 0

    assert "Files/a.jpg" in (tmp_path / "Trip" / "index.html").read_text(encoding="utf-8")
    assert messages[-1] == f"Gallery updated: {os.path.join('Trip', 'index.html')}"


def test_fill_unknown_order_falls_back_to_date(messages, tmp_path):
    assert make_app(messages).run(["fill", str(tmp_path), "Trip", "--order-album", "size"]) == 0

    assert messages[0] == 'Unrecognized album order "size", ordering by date.'


def test_fill_global(messages, tmp_path):
    write_media(tmp_path / "A" / "Files", "a.jpg", datetime(2024, 5, 1))

    assert make_app(messages).run(["fill", str(tmp_path), "-g"]) == 0

    assert (tmp_path / "A" / "index.html").is_file()
    assert "A/index.html" in (tmp_path / "index.html").read_text(encoding="utf-8")


def test_fill_global_keep_going_reports_failure(messages, tmp_path):
    write_media(tmp_path / "A" / "Files", "a.jpg", datetime(2024, 5, 1))
    (tmp_path / "A" / "index.html").write_text(" ", encoding="utf-8")

    assert make_app(messages).run(["fill", str(tmp_path), "--global", "--keep-going"]) == 3

    assert (tmp_path / "index.html").is_file()


def test_runtime_error_exit_code(messages, tmp_path):
    (tmp_path / "Trip").mkdir()
    (tmp_path / "Trip" / "index.html").write_text("<html><body></body></html>", encoding="utf-8")

    assert make_app(messages).run(["fill", str(tmp_path), "Trip"]) == 3

    assert messages[-1] == "Error: Gallery container element not found in HTML template."


def test_missing_root_argument_is_an_error(messages, tmp_path):
    assert make_app(messages).run(["fill", str(tmp_path / "absent"), "Trip"]) == 3
    assert messages[-1].startswith("Error: Directory not found.")


def test_compress_missing_path(messages, tmp_path):
    assert make_app(messages).run(["compress", str(tmp_path / "absent")]) == 0
    assert messages == ["Path not found."]


def test_verbose_flag_accepted_before_and_after_command():
    parser = build_parser()

    assert parser.parse_args(["-v", "init"]).verbose
    assert parser.parse_args(["init", "-v"]).verbose
    assert not parser.parse_args(["init"]).verbose
