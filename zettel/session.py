"""
Edit workflows on top of the note store.

- submit_new_note(): the new-note bar. Address field plus content.
- EditSession: editing one existing note. While open, the note is hidden
  from the tree so its addresses show up as free; commit writes the draft
  back in one update, cancel discards it.
- check_address_field(): live conflict feedback while an address field is
  being typed.
"""

import logging
from typing import Callable, NamedTuple, Optional

from .address import is_valid, parse_address_list
from .errors import SessionError, ValidationError
from .store import NoteStore
from .tree import Row
from .types import Note

logger = logging.getLogger(__name__)


class Conflict(NamedTuple):
    """An address in a field that another note already holds."""
    address: str
    owner: Note


def check_address_field(store: NoteStore, text: str, excluding: Optional[str] = None) -> list[Conflict]:
    """
    Conflicts for every valid address in a whitespace-separated field.

    Invalid tokens are skipped here; they are still in the middle of being
    typed. Submission is where they get rejected.
    """
    conflicts = []
    for address in parse_address_list(text):
        if not is_valid(address):
            continue
        owner = store.is_address_taken(address, excluding=excluding)
        if owner is not None:
            conflicts.append(Conflict(address, owner))
    return conflicts


def submit_new_note(store: NoteStore, address_text: str, content: str) -> str:
    """
    Create a note from the new-note bar.

    Raises:
        ValidationError: The address field is empty or holds an invalid address
        ValueError: The content is empty
        ConflictError: An address is taken

    Returns:
        The new note id
    """
    addresses = parse_address_list(address_text)
    if not addresses:
        raise ValidationError(address_text.strip())
    content = content.strip()
    if not content:
        raise ValueError("Note content is empty")
    return store.create(addresses, content)


class EditSession:
    """
    A single open edit of one note.

    The draft lives only in the session. Nothing reaches the store until
    commit() succeeds; a failed commit leaves the session open so the user
    can fix the field and try again.
    """

    def __init__(
        self,
        store: NoteStore,
        note_id: str,
        *,
        clicked_address: Optional[str] = None,
        on_close: Optional[Callable[["EditSession"], None]] = None,
    ):
        note = store.get(note_id)
        if note is None:
            raise SessionError(f"Cannot edit missing note: {note_id}")
        self._store = store
        self._on_close = on_close
        self.note_id = note_id
        self.clicked_address = clicked_address
        self.original_addresses = note.addresses
        self.original_content = note.content
        self.closed = False

    @property
    def hidden(self) -> frozenset[str]:
        """Note ids to leave out of the tree while this session is open."""
        return frozenset() if self.closed else frozenset({self.note_id})

    @property
    def address_text(self) -> str:
        """The address field as it starts out."""
        return " ".join(self.original_addresses)

    def rows(self) -> list[Row]:
        """The tree as seen while editing (this note hidden)."""
        return self._store.rows(exclude=self.hidden)

    def check(self, text: str) -> list[Conflict]:
        """Live conflicts for the draft address field, ignoring this note."""
        return check_address_field(self._store, text, excluding=self.note_id)

    def commit(self, address_text: str, content: str) -> Optional[Note]:
        """
        Write the draft back.

        An address field with no addresses at all reverts the edit, the same
        as cancel(), and returns None.

        Raises:
            ValidationError, ConflictError, PersistenceError: the session
                stays open and the store is unchanged
        """
        self._ensure_open()
        addresses = parse_address_list(address_text)
        if not addresses:
            logger.debug("Empty address field, reverting edit of %s", self.note_id)
            self.cancel()
            return None
        note = self._store.update(self.note_id, addresses, content)
        self._close()
        return note

    def cancel(self) -> None:
        """Discard the draft."""
        self._ensure_open()
        self._close()

    def _ensure_open(self) -> None:
        if self.closed:
            raise SessionError("Edit session is already closed")

    def _close(self) -> None:
        self.closed = True
        if self._on_close is not None:
            self._on_close(self)
