"""
Shared pytest fixtures for zettel tests.

Stores run against an in-memory backing blob unless a test needs the
filesystem, in which case they use tmp_path.
"""

import pytest

from zettel.backing import MemoryBackingStore
from zettel.store import NoteStore
from zettel.types import Note


class FailingBackingStore(MemoryBackingStore):
    """Backing store whose save() raises once fail_saves is set."""

    def __init__(self, blob: str = ""):
        super().__init__(blob)
        self.fail_saves = False

    def save(self, notes):
        if self.fail_saves:
            raise OSError("disk full")
        super().save(notes)


@pytest.fixture
def backing():
    """Fresh in-memory backing store."""
    return MemoryBackingStore()


@pytest.fixture
def store(backing):
    """Empty NoteStore over the in-memory backing store."""
    return NoteStore(backing)


@pytest.fixture
def failing_backing():
    return FailingBackingStore()


def _notes_at(*address_groups: str) -> list[Note]:
    return [
        Note(id=f"n{i}", addresses=tuple(group.split()), content=f"note {i}")
        for i, group in enumerate(address_groups)
    ]


@pytest.fixture
def notes_at():
    """Build notes n0, n1, ... from space-separated address lists, one per note."""
    return _notes_at
