"""
Navigation while an address is being typed.

As the user types into an address field the view follows along: to the
row itself if it exists, else to its nearest existing ancestor, else to
the row just before where the address would be inserted. Cursor moves
arrive in bursts, so resolution is debounced through a single timer slot
where the newest request replaces any pending one.
"""

import logging
import re
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from .address import canonicalize, compare, parse, segments_to_address
from .tree import Row

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.08

MATCH_EXACT = "exact"
MATCH_ANCESTOR = "ancestor"
MATCH_NEIGHBOR = "neighbor"


@dataclass(frozen=True)
class Hint:
    """Where to scroll for a typed address, and how it was found."""
    row: Row
    match: str   # MATCH_EXACT, MATCH_ANCESTOR or MATCH_NEIGHBOR

    @property
    def address(self) -> str:
        return self.row.address


def _nearest_neighbor(rows: Sequence[Row], target: str) -> Row:
    best = None
    for row in rows:
        if compare(row.address, target) <= 0:
            best = row
        else:
            break
    return best if best is not None else rows[0]


def resolve(rows: Sequence[Row], target: str) -> Optional[Hint]:
    """
    Find the best existing row to navigate to for a (possibly partial) address.

    Tries, in order: the exact address, each strict prefix longest first,
    and finally the last row that sorts at or before the target (the first
    row when the target sorts before everything).

    Args:
        rows: Rows in tree order, as returned by build_rows()
        target: Address text as typed

    Returns:
        A Hint, or None when there are no rows
    """
    if not rows:
        return None

    by_address = {}
    for row in rows:
        by_address.setdefault(canonicalize(row.address), row)
    for row in rows:
        by_address.setdefault(segments_to_address(parse(row.address)), row)

    norm = canonicalize(target)
    if norm in by_address:
        return Hint(by_address[norm], MATCH_EXACT)

    segments = parse(norm)
    for length in range(len(segments) - 1, 0, -1):
        prefix = segments_to_address(segments[:length])
        if prefix in by_address:
            return Hint(by_address[prefix], MATCH_ANCESTOR)

    return Hint(_nearest_neighbor(rows, norm), MATCH_NEIGHBOR)


def active_token(text: str, cursor: int) -> Optional[str]:
    """
    The whitespace-separated token under the cursor.

    A cursor touching either end of a token counts as inside it. A cursor
    past the last token selects the last token. Returns None for a blank
    field or a cursor sitting in whitespace between tokens.
    """
    tokens = [(m.group(), m.start(), m.end()) for m in re.finditer(r"\S+", text)]
    for tok, start, end in tokens:
        if start <= cursor <= end:
            return tok
    if tokens and cursor >= tokens[-1][2]:
        return tokens[-1][0]
    return None


class Debouncer:
    """
    Run the most recently scheduled callback after a quiet period.

    Each schedule() cancels whatever is pending. There is one slot, so this
    is last-write-wins rather than a queue.
    """

    def __init__(self, delay: float = DEFAULT_DEBOUNCE_SECONDS):
        self.delay = delay
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[tuple[Callable[..., Any], tuple]] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def schedule(self, fn: Callable[..., Any], *args: Any) -> None:
        """Replace any pending call with fn(*args), to run after the delay."""
        with self._lock:
            self._cancel_locked()
            self._pending = (fn, args)
            timer = threading.Timer(self.delay, self._fire, args=(self._pending,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        with self._lock:
            self._cancel_locked()

    def flush(self) -> None:
        """Run the pending call now instead of waiting."""
        with self._lock:
            pending = self._pending
            self._cancel_locked()
        if pending is not None:
            fn, args = pending
            fn(*args)

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._pending = None

    def _fire(self, scheduled: tuple[Callable[..., Any], tuple]) -> None:
        with self._lock:
            # A newer schedule() or cancel() superseded this timer
            if self._pending is not scheduled:
                return
            self._timer = None
            self._pending = None
        fn, args = scheduled
        try:
            fn(*args)
        except Exception as e:
            logger.warning("Debounced callback failed: %s", e)
