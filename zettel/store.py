"""
The note store: a flat collection of notes keyed by identity.

The store is the source of truth for:
- Note identity
- Which addresses each note holds (every address belongs to at most one note)
- Note content

Every mutation validates the whole submission first, applies it, and then
saves the complete note set through the backing store before returning.
If the save fails the mutation is rolled back, so the in-memory state and
the persisted state never disagree.
"""

import logging
import threading
from typing import AbstractSet, Iterable, Optional

from .address import canonicalize, is_valid
from .backing import BackingStoreProtocol, MemoryBackingStore
from .errors import ConflictError, NoteNotFoundError, PersistenceError, ValidationError
from .tree import Row, build_rows
from .types import Note, new_note_id

logger = logging.getLogger(__name__)


class NoteStore:
    """
    Notes held in insertion order behind a single owner.

    Mutations happen only at the commit points create(), update() and
    remove(). Reads copy the note set under the same lock, so a read from
    another thread (the navigation debouncer) always sees either the state
    before a commit or the state after it.
    """

    def __init__(self, backing: Optional[BackingStoreProtocol] = None):
        """
        Args:
            backing: Where notes are loaded from and saved to.
                Defaults to an in-memory blob.
        """
        self._backing = backing if backing is not None else MemoryBackingStore()
        self._lock = threading.RLock()
        self._notes: dict[str, Note] = {}
        for note in self._backing.load():
            self._admit(note)
        logger.debug("Note store opened with %d notes", len(self._notes))

    def _admit(self, note: Note) -> None:
        """Add a loaded note, dropping whatever breaks the store's invariants."""
        if note.id in self._notes:
            logger.warning("Dropping duplicate note id %s from stored data", note.id)
            return
        taken = {canonicalize(a) for n in self._notes.values() for a in n.addresses}
        kept = []
        for address in note.addresses:
            norm = canonicalize(address)
            if not is_valid(norm):
                logger.warning("Dropping invalid address %r of %s from stored data", address, note.id)
            elif norm in taken or norm in kept:
                logger.warning("Dropping address %s of %s: already held", norm, note.id)
            else:
                kept.append(norm)
        if not kept:
            logger.warning("Dropping note %s from stored data: no usable addresses", note.id)
            return
        self._notes[note.id] = Note(id=note.id, addresses=tuple(kept), content=note.content)

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._notes

    # -- Reads --

    def get(self, note_id: str) -> Optional[Note]:
        return self._notes.get(note_id)

    def notes(self) -> list[Note]:
        """Snapshot of all notes in insertion order."""
        with self._lock:
            return list(self._notes.values())

    def rows(self, exclude: AbstractSet[str] = frozenset()) -> list[Row]:
        """Derive the display tree, optionally hiding some note ids."""
        return build_rows(self.notes(), exclude)

    def is_address_taken(self, address: str, excluding: Optional[str] = None) -> Optional[Note]:
        """
        The note holding an address, ignoring the note `excluding`.

        Returns None if the address is free.
        """
        norm = canonicalize(address)
        for note in self.notes():
            if note.id == excluding:
                continue
            if norm in (canonicalize(a) for a in note.addresses):
                return note
        return None

    def find_by_address(self, address: str) -> Optional[Note]:
        """The note holding an address, if any."""
        return self.is_address_taken(address)

    # -- Writes --

    def _check(self, addresses: Iterable[str], excluding: Optional[str]) -> tuple[str, ...]:
        """Validate a submission; return canonical addresses or raise on the first failure."""
        canonical = []
        for address in addresses:
            norm = canonicalize(address)
            if not is_valid(norm):
                raise ValidationError(address)
            if norm in canonical:
                raise ConflictError(norm)
            owner = self.is_address_taken(norm, excluding=excluding)
            if owner is not None:
                raise ConflictError(norm, owner.id)
            canonical.append(norm)
        if not canonical:
            raise ValidationError("")
        return tuple(canonical)

    def _commit(self, previous: dict[str, Note]) -> None:
        try:
            self._backing.save(list(self._notes.values()))
        except OSError as e:
            self._notes = previous
            raise PersistenceError(f"Failed to save notes: {e}") from e

    def create(self, addresses: Iterable[str], content: str) -> str:
        """
        Add a new note.

        Raises:
            ValidationError: An address is invalid, or none were given
            ConflictError: An address is already held (or repeated)
            PersistenceError: The backing store failed; nothing changed

        Returns:
            The new note's id
        """
        with self._lock:
            canonical = self._check(addresses, excluding=None)
            note_id = new_note_id()
            while note_id in self._notes:
                note_id = new_note_id()

            previous = dict(self._notes)
            self._notes[note_id] = Note(id=note_id, addresses=canonical, content=content)
            self._commit(previous)
        logger.info("Created %s at %s", note_id, " ".join(canonical))
        return note_id

    def update(self, note_id: str, addresses: Iterable[str], content: str) -> Note:
        """
        Replace a note's addresses and content together.

        The note's own current addresses don't count as conflicts, so it may
        keep any of them.

        Raises:
            NoteNotFoundError: No such note
            ValidationError, ConflictError, PersistenceError: as for create()
        """
        with self._lock:
            if note_id not in self._notes:
                raise NoteNotFoundError(note_id)
            canonical = self._check(addresses, excluding=note_id)

            previous = dict(self._notes)
            note = Note(id=note_id, addresses=canonical, content=content)
            self._notes[note_id] = note
            self._commit(previous)
        logger.info("Updated %s at %s", note_id, " ".join(canonical))
        return note

    def remove(self, note_id: str) -> bool:
        """Delete a note. Returns False (and does nothing) if it doesn't exist."""
        with self._lock:
            if note_id not in self._notes:
                return False
            previous = dict(self._notes)
            del self._notes[note_id]
            self._commit(previous)
        logger.info("Removed %s", note_id)
        return True
