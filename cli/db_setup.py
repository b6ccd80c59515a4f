"""Database setup commands.

Usage:
    db-init     # Create tables in the database named by DATABASE_URL_APP
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

_SCRIPTS_DIR = Path(__file__).parent.parent / "scripts"


def db_init() -> None:
    """Apply SQL migrations to DATABASE_URL_APP."""
    cmd = [sys.executable, str(_SCRIPTS_DIR / "setup_database.py")]
    sys.exit(subprocess.run(cmd, check=False).returncode)
