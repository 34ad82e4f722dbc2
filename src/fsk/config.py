"""Configuration for fsk.

Environment lookups live here and nowhere else. The CLI resolves them once at
startup and hands plain values to the storage and editor layers.
"""

import os
from pathlib import Path

from .errors import ConfigurationError

# Suffix every note file carries on disk. Titles never include it.
NOTE_EXTENSION = ".md"

# Separator used in titles, independent of the host OS.
TITLE_SEPARATOR = "/"

# Database location relative to the user's home directory: ~/.fsk/db/
APP_DIR_NAME = ".fsk"
DB_DIR_NAME = "db"

# Editor used when $EDITOR is unset or blank.
DEFAULT_EDITOR = "nano"

# Environment variables
DB_ROOT_ENV = "FSK_DB_ROOT"
EDITOR_ENV = "EDITOR"


def get_db_root() -> Path:
    """Get the note database root directory.

    Discovery order:
    1. FSK_DB_ROOT environment variable (explicit override)
    2. ~/.fsk/db/

    The directory is not created here; the storage layer creates it lazily
    before the first write.

    Raises:
        ConfigurationError: If the home directory cannot be determined.
    """
    root = os.environ.get(DB_ROOT_ENV)
    if root:
        return Path(root).expanduser()

    try:
        home = Path.home()
    except RuntimeError as e:
        raise ConfigurationError(
            f"Cannot determine the home directory ({e}). "
            f"Set HOME or {DB_ROOT_ENV} to choose where notes are stored."
        ) from e

    return home / APP_DIR_NAME / DB_DIR_NAME


def get_editor_command() -> str:
    """Get the editor command line from $EDITOR, falling back to DEFAULT_EDITOR."""
    editor = os.environ.get(EDITOR_ENV, "").strip()
    return editor or DEFAULT_EDITOR
