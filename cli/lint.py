"""Code quality commands (ruff)."""

import subprocess
import sys

SOURCE_DIRS = ["jobly/", "cli/", "scripts/", "tests/"]


def _ruff(*args: str) -> int:
    return subprocess.run([sys.executable, "-m", "ruff", *args, *SOURCE_DIRS], check=False).returncode


def main() -> None:
    """Lint; pass --fix through to apply safe fixes."""
    sys.exit(_ruff("check", *sys.argv[1:]))


def format_code() -> None:
    sys.exit(_ruff("format"))
