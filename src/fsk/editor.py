"""Interface to the external text editor.

The launcher resolves the note path, makes sure its directory exists and
hands the file to the editor, blocking until the editor exits. Spawning goes
through a ProcessRunner so tests can record invocations instead of starting
a real editor.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from typing import Protocol

from .errors import EditorExitError, EditorSpawnError
from .storage import Storage

log = logging.getLogger(__name__)


class ProcessRunner(Protocol):
    """Runs a command to completion and returns its exit status."""

    def run(self, argv: Sequence[str]) -> int: ...


class SubprocessRunner:
    """Run a child process attached to the current terminal."""

    def run(self, argv: Sequence[str]) -> int:
        # Standard streams are inherited; OSError propagates to the caller.
        completed = subprocess.run(list(argv), check=False)
        return completed.returncode


def split_editor_command(command: str) -> list[str]:
    """Split an $EDITOR value such as ``code --wait`` into argv form."""
    try:
        return shlex.split(command)
    except ValueError as e:
        raise EditorSpawnError(command, f"cannot parse editor command ({e})") from e


class EditorLauncher:
    """Open notes for interactive editing."""

    def __init__(self, storage: Storage, editor_command: str, runner: ProcessRunner | None = None):
        self.storage = storage
        self.editor_command = editor_command
        self.runner = runner or SubprocessRunner()

    def edit(self, title: str) -> bool:
        """Open a note in the editor and wait for it to close.

        The note file does not need to exist; the editor creates it on save.

        Returns:
            True if the note file exists once the editor has exited.

        Raises:
            InvalidTitle: If the title is malformed.
            StorageIOError: If the note's directory cannot be created.
            EditorSpawnError: If the editor cannot be launched.
            EditorExitError: If the editor exits with a non-zero status.
        """
        path = self.storage.ensure_parent(title)

        argv = split_editor_command(self.editor_command)
        if not argv:
            raise EditorSpawnError(self.editor_command, "editor command is empty")
        argv.append(str(path))

        log.debug("Executing: %s", shlex.join(argv))
        try:
            status = self.runner.run(argv)
        except OSError as e:
            raise EditorSpawnError(self.editor_command, e.strerror or str(e)) from e

        if status != 0:
            raise EditorExitError(self.editor_command, status)

        saved = self.storage.exists(title)
        if saved:
            log.info("Note '%s' saved", title)
        else:
            log.info("Editor closed without creating '%s'", title)
        return saved
