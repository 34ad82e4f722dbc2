"""Error types for fsk.

Every failure a command can report is an FskError carrying a stable error
code, a human-readable message and optional details. The CLI maps each code
to a distinct process exit code:

    NOT_FOUND           3
    INVALID_TITLE       4
    IO_ERROR            5
    EDITOR_SPAWN_ERROR  6
    EDITOR_EXIT_ERROR   7
    CONFIGURATION_ERROR 1
"""

import json
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes used in JSON error output."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INVALID_TITLE = "INVALID_TITLE"
    IO_ERROR = "IO_ERROR"
    EDITOR_SPAWN_ERROR = "EDITOR_SPAWN_ERROR"
    EDITOR_EXIT_ERROR = "EDITOR_EXIT_ERROR"


EXIT_CODES: dict[ErrorCode, int] = {
    ErrorCode.CONFIGURATION_ERROR: 1,
    ErrorCode.NOT_FOUND: 3,
    ErrorCode.INVALID_TITLE: 4,
    ErrorCode.IO_ERROR: 5,
    ErrorCode.EDITOR_SPAWN_ERROR: 6,
    ErrorCode.EDITOR_EXIT_ERROR: 7,
}


class FskError(Exception):
    """Base class for all errors surfaced to the user."""

    code: ErrorCode = ErrorCode.IO_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.code]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"error": self.code.value, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class ConfigurationError(FskError):
    """Raised when required configuration cannot be determined."""

    code = ErrorCode.CONFIGURATION_ERROR


class InvalidTitle(FskError):
    """Raised when a title is empty, has empty segments or tries to escape the root."""

    code = ErrorCode.INVALID_TITLE

    def __init__(self, title: str, reason: str):
        super().__init__(f"Invalid title '{title}': {reason}", {"title": title, "reason": reason})
        self.title = title
        self.reason = reason


class NotFound(FskError):
    code = ErrorCode.NOT_FOUND

    def __init__(self, title: str):
        super().__init__(
            f"Note not found: {title}",
            {"title": title, "suggestion": "Use 'fsk list' to browse notes."},
        )
        self.title = title


class StorageIOError(FskError):
    """Raised for permission, read/write and directory-creation failures."""

    code = ErrorCode.IO_ERROR

    @classmethod
    def from_os_error(cls, action: str, path: Any, error: OSError) -> "StorageIOError":
        reason = error.strerror or str(error)
        return cls(f"Failed to {action} {path}: {reason}", {"path": str(path), "errno": error.errno})


class EditorSpawnError(FskError):
    """Raised when the editor executable cannot be found or launched."""

    code = ErrorCode.EDITOR_SPAWN_ERROR

    def __init__(self, command: str, reason: str):
        super().__init__(
            f"Failed to launch editor '{command}': {reason}",
            {"editor": command, "suggestion": "Check your $EDITOR environment variable."},
        )
        self.command = command


class EditorExitError(FskError):
    """Raised when the editor exits with a non-zero status.

    This is informational: the editor may have saved the note regardless.
    """

    code = ErrorCode.EDITOR_EXIT_ERROR

    def __init__(self, command: str, status: int):
        super().__init__(
            f"Editor '{command}' exited with status {status}; the note may still have been saved",
            {"editor": command, "status": status},
        )
        self.command = command
        self.status = status
