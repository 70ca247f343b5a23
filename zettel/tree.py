"""
Derive the display tree from a flat set of notes.

There is no tree object. Every (note, address) pair becomes a Row, rows
are sorted with the address comparator, and indentation comes from the
address depth. An address whose direct parent is missing is an orphan:
it is indented under its deepest existing ancestor instead, or shown at
top level when none of its ancestors exist.
"""

from dataclasses import dataclass
from typing import AbstractSet, Iterable

from .address import canonicalize, depth, parse, segments_to_address, sort_key
from .types import Note


@dataclass(frozen=True)
class Row:
    """One line of the tree: a note shown at one of its addresses."""
    note_id: str
    address: str
    render_depth: int
    is_orphan: bool

    @property
    def depth(self) -> int:
        """Segment count of the address."""
        return depth(self.address)


def is_orphan(address: str, present: AbstractSet[str]) -> bool:
    """True if the address is below top level and its direct parent is absent."""
    segments = parse(address)
    if len(segments) <= 1:
        return False
    return segments_to_address(segments[:-1]) not in present


def render_depth(address: str, present: AbstractSet[str]) -> int:
    """
    Zero-based indentation for an address given the addresses that exist.

    Non-orphans indent at depth - 1. Orphans look for the deepest existing
    ancestor, trying prefixes of length depth-2 down to 1, and sit one level
    below it. Without any existing ancestor they sit at the top.
    """
    segments = parse(address)
    n = len(segments)
    if not is_orphan(address, present):
        return max(n - 1, 0)
    for length in range(n - 2, 0, -1):
        if segments_to_address(segments[:length]) in present:
            return length
    return 0


def build_rows(notes: Iterable[Note], exclude: AbstractSet[str] = frozenset()) -> list[Row]:
    """
    Build the sorted row list for display.

    Args:
        notes: All notes in the store
        exclude: Note ids to leave out (e.g. the note being edited)

    Returns:
        Rows in tree order
    """
    pairs = []
    for note in notes:
        if note.id in exclude:
            continue
        for address in note.addresses:
            pairs.append((note.id, address))
    pairs.sort(key=lambda pair: sort_key(pair[1]))

    # Parent lookups use the numeric-value form, so "01" also stands in for "1"
    present = set()
    for _, address in pairs:
        present.add(canonicalize(address))
        present.add(segments_to_address(parse(address)))
    return [
        Row(
            note_id=note_id,
            address=address,
            render_depth=render_depth(address, present),
            is_orphan=is_orphan(address, present),
        )
        for note_id, address in pairs
    ]
