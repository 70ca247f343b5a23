"""
Outliner: the single owner of a zettelkasten.

Wires configuration, the backing file, the note store, the one open edit
session and the navigation debouncer together. A UI (or the CLI) talks to
this object and renders what rows() returns.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from .address import canonicalize
from .backing import BackingStoreProtocol, JsonFileBackingStore
from .config import StoreConfig, get_default_store_path, load_or_create_config
from .errors import NoteNotFoundError, SessionError
from .logging_config import configure_ops_log
from .navigate import Debouncer, Hint, active_token, resolve
from .session import Conflict, EditSession, check_address_field, submit_new_note
from .store import NoteStore
from .tree import Row
from .types import Note

logger = logging.getLogger(__name__)


class Outliner:
    """
    A zettelkasten outline backed by a store directory.

    Usage:
        zk = Outliner()                      # ~/.zettel or ZETTEL_STORE_PATH
        zk.add("1 1a", "First note")
        for row in zk.rows():
            print("  " * row.render_depth, row.address)
    """

    def __init__(
        self,
        store_path: Optional[Path] = None,
        *,
        config: Optional[StoreConfig] = None,
        backing: Optional[BackingStoreProtocol] = None,
    ):
        """
        Args:
            store_path: Store directory (defaults per config.get_default_store_path)
            config: Pre-loaded configuration; skips reading zettel.toml
            backing: Backing store to use instead of the JSON notes file
        """
        if config is None:
            if backing is not None and store_path is None:
                # Memory-only embedding: defaults, nothing written to disk
                config = StoreConfig(path=get_default_store_path())
            else:
                config = load_or_create_config(store_path)
        self.config = config
        self._ops_log_handler = None
        if backing is None:
            backing = JsonFileBackingStore(self.config.notes_path)
            self._ops_log_handler = configure_ops_log(self.config.path)
        self.store = NoteStore(backing)
        self._session: Optional[EditSession] = None
        self._debouncer = Debouncer(self.config.scroll_debounce_ms / 1000.0)

    # -- Tree --

    def rows(self) -> list[Row]:
        """Current tree, with the note under edit hidden."""
        exclude = self._session.hidden if self._session else frozenset()
        return self.store.rows(exclude=exclude)

    def get(self, note_id: str) -> Optional[Note]:
        return self.store.get(note_id)

    def note_at(self, address: str) -> Optional[Note]:
        """The note holding an address."""
        return self.store.find_by_address(address)

    @property
    def default_address(self) -> str:
        """Address to prefill in the new-note field."""
        return canonicalize(self.config.default_address)

    # -- Writes --

    def add(self, address_text: str, content: str) -> str:
        """Create a note from a whitespace-separated address field. Returns its id."""
        return submit_new_note(self.store, address_text, content)

    def remove(self, note_id: str) -> bool:
        if self._session is not None and self._session.note_id == note_id:
            raise SessionError(f"Note {note_id} is being edited")
        return self.store.remove(note_id)

    def check(self, address_text: str, excluding: Optional[str] = None) -> list[Conflict]:
        """Live conflicts for an address field."""
        return check_address_field(self.store, address_text, excluding=excluding)

    # -- Editing --

    @property
    def session(self) -> Optional[EditSession]:
        return self._session

    def open_edit(self, note_id: str, clicked_address: Optional[str] = None) -> EditSession:
        """
        Start editing a note. Only one edit may be open at a time.

        Raises:
            SessionError: Another edit is open
            NoteNotFoundError: No such note
        """
        if self._session is not None:
            raise SessionError(f"Already editing {self._session.note_id}")
        if note_id not in self.store:
            raise NoteNotFoundError(note_id)
        self._session = EditSession(
            self.store, note_id,
            clicked_address=clicked_address,
            on_close=self._session_closed,
        )
        logger.debug("Opened edit of %s", note_id)
        return self._session

    def _session_closed(self, session: EditSession) -> None:
        if self._session is session:
            self._session = None

    # -- Navigation --

    def navigate(self, target: str) -> Optional[Hint]:
        """Where to scroll for a typed address."""
        return resolve(self.rows(), target)

    def follow_cursor(self, text: str, cursor: int, callback: Callable[[Hint], None]) -> None:
        """
        Debounced navigation for the token under the cursor in an address field.

        Each call replaces any navigation still waiting; callback gets the
        Hint for the last one. Nothing is scheduled for a blank token or an
        empty tree.
        """
        token = active_token(text, cursor)
        if not token:
            return
        self._debouncer.schedule(self._navigate_to, token, callback)

    def flush_navigation(self) -> None:
        """Run a pending debounced navigation immediately."""
        self._debouncer.flush()

    def _navigate_to(self, token: str, callback: Callable[[Hint], None]) -> None:
        hint = self.navigate(token)
        if hint is not None:
            callback(hint)

    def close(self) -> None:
        """Cancel pending navigation and detach the operations log."""
        self._debouncer.cancel()
        if self._ops_log_handler is not None:
            logging.getLogger("zettel").removeHandler(self._ops_log_handler)
            self._ops_log_handler.close()
            self._ops_log_handler = None

    def __enter__(self) -> "Outliner":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
