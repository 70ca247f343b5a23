"""
Zettel

A Luhmann-style zettelkasten outliner. Notes carry hierarchical addresses
(1, 1a, 1a2, 1a2b, ...) and the outline is derived from those addresses
alone; no parent/child links are stored.

Quick Start:
    from zettel import Outliner

    zk = Outliner()                 # uses ~/.zettel, or ZETTEL_STORE_PATH
    zk.add("1", "Top of a train of thought")
    zk.add("1a", "A branch")
    for row in zk.rows():
        print("  " * row.render_depth + row.address)

CLI Usage:
    zettel add "text" --at 1a
    zettel tree
    zettel goto 1a5

Environment Variables:
    ZETTEL_STORE_PATH  - Override default store location
    ZETTEL_VERBOSE     - Set to 1 for debug logging
"""

from .address import canonicalize, compare, depth, is_valid, parse, segments_to_address
from .api import Outliner
from .errors import ConflictError, NoteNotFoundError, PersistenceError, SessionError, ValidationError, ZettelError
from .navigate import Hint, resolve
from .store import NoteStore
from .tree import Row, build_rows
from .types import Note

__version__ = "0.3.0"
__all__ = [
    "Outliner",
    "NoteStore",
    "Note",
    "Row",
    "Hint",
    "build_rows",
    "resolve",
    "parse",
    "is_valid",
    "depth",
    "canonicalize",
    "compare",
    "segments_to_address",
    "ZettelError",
    "ValidationError",
    "ConflictError",
    "NoteNotFoundError",
    "PersistenceError",
    "SessionError",
]
