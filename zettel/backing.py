"""
Backing stores: where the note set lives between runs.

The contract is a single key-value blob. load() returns the full note
list, or an empty list when the blob is missing or unreadable; a corrupt
blob must never stop the outliner from starting. save() writes the full
note list and raises OSError on failure.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from .types import Note

logger = logging.getLogger(__name__)

STORAGE_KEY = "zettel_notes_v1"


@runtime_checkable
class BackingStoreProtocol(Protocol):
    """Persistence for the flat note list."""

    def load(self) -> list[Note]: ...

    def save(self, notes: Sequence[Note]) -> None: ...


def _decode(raw: str) -> list[Note]:
    """Decode a stored blob. Raises ValueError/KeyError/TypeError when malformed."""
    data = json.loads(raw)
    if isinstance(data, dict):
        data = data.get(STORAGE_KEY, [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of notes, got {type(data).__name__}")
    return [Note.from_dict(d) for d in data]


def _encode(notes: Sequence[Note]) -> str:
    return json.dumps({STORAGE_KEY: [n.to_dict() for n in notes]}, indent=2, ensure_ascii=False)


class MemoryBackingStore:
    """In-process blob, for tests and for embedding without a filesystem."""

    def __init__(self, blob: str = ""):
        self.blob = blob
        self.saves = 0

    def load(self) -> list[Note]:
        if not self.blob:
            return []
        try:
            return _decode(self.blob)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring corrupt note data: %s", e)
            return []

    def save(self, notes: Sequence[Note]) -> None:
        self.blob = _encode(notes)
        self.saves += 1


class JsonFileBackingStore:
    """
    JSON file holding every note.

    Writes go to a temporary file in the same directory and are moved into
    place with os.replace(), so a crash mid-write leaves the previous file
    intact.
    """

    def __init__(self, path: Path):
        """
        Args:
            path: Path to the JSON file (created on first save)
        """
        self.path = Path(path)

    def load(self) -> list[Note]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s, starting empty: %s", self.path, e)
            return []
        if not raw.strip():
            return []
        try:
            notes = _decode(raw)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring corrupt note file %s: %s", self.path, e)
            return []
        logger.debug("Loaded %d notes from %s", len(notes), self.path)
        return notes

    def save(self, notes: Sequence[Note]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(_encode(notes))
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
