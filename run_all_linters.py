#!/usr/bin/env python3
"""Run the formatters, linters and the test suite in one go.

Steps, in order: black, isort, ruff, pylint and pytest. Every step runs even
when an earlier one fails; the exit code is 1 when any step failed.
"""

from pathlib import Path
import subprocess
import sys

ROOT = Path(__file__).parent
PACKAGES = ["app", "core", "infrastructure"]

STEPS = [
    ("black --check", ["black", ".", "--check"]),
    ("isort --check-only", ["isort", ".", "--check-only"]),
    ("ruff check", ["ruff", "check", "."]),
    ("pylint", ["pylint", *PACKAGES]),
    ("pytest", ["pytest", "-q"]),
]


def run_step(title: str, args: list[str]) -> tuple[bool, str]:
    """Run `python -m <args>` in the project root; return (passed, output)."""
    cmd = [sys.executable, "-m", *args]
    print(f"\n{'=' * 60}\n{title}: {' '.join(cmd)}\n{'=' * 60}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False, cwd=ROOT)
    except OSError as e:
        print(f"FAILED to start: {e}")
        return False, str(e)

    output = (result.stdout + result.stderr).strip()
    passed = result.returncode == 0
    print("passed" if passed else "FAILED")
    print(output or "(no output)")
    return passed, output


def main() -> None:
    results = [(title, *run_step(title, args)) for title, args in STEPS]

    print(f"\n{'=' * 60}\nSummary\n{'=' * 60}")
    for title, passed, _ in results:
        print(f"{title:<20} {'ok' if passed else 'FAILED'}")

    failed = [(title, output) for title, passed, output in results if not passed]
    for title, output in failed:
        if output:
            print(f"\n--- {title} ---\n{output}")
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
