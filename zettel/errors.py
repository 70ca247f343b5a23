"""
Error types and error logging for zettel.

Store and session operations raise the exceptions below. The CLI turns
them into clean messages; anything unexpected is written with its full
traceback to the error log in the store directory.
"""

import os
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class ZettelError(Exception):
    """Base class for all zettel errors."""


class ValidationError(ZettelError):
    """An address fails the grammar (empty, alpha-first, non-alternating)."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Invalid address: {address!r} (expected e.g. 1a2b)")


class ConflictError(ZettelError):
    """An address is already held by another note."""

    def __init__(self, address: str, owner_id: Optional[str] = None):
        self.address = address
        self.owner_id = owner_id
        super().__init__(f'"{address}" is already taken')


class NoteNotFoundError(ZettelError, KeyError):
    """No note with the given identity."""

    def __init__(self, note_id: str):
        self.note_id = note_id
        super().__init__(f"Note not found: {note_id}")

    def __str__(self) -> str:
        return self.args[0]


class PersistenceError(ZettelError):
    """The backing store could not save; the change was rolled back."""


class SessionError(ZettelError):
    """An edit session is already open, or none is open."""


def _error_log_path(store_path: Optional[Path] = None) -> Path:
    """Resolve error log path: explicit store, then ZETTEL_STORE_PATH, then ~/.zettel."""
    store = store_path or os.environ.get("ZETTEL_STORE_PATH")
    if store:
        return Path(store) / "zettel-errors.log"
    return Path.home() / ".zettel" / "zettel-errors.log"


def log_exception(exc: Exception, context: str = "", store_path: Optional[Path] = None) -> Path:
    """
    Log exception with full traceback to file.

    Args:
        exc: The exception that occurred
        context: Optional context string (e.g., command name)
        store_path: Store directory to log into (e.g. from --store)

    Returns:
        Path to the error log file
    """
    log_path = _error_log_path(store_path)
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a") as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"[{timestamp}]")
            if context:
                f.write(f" {context}")
            f.write("\n")
            f.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    except OSError:
        pass  # Can't write error log; don't crash over it
    return log_path
