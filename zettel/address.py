"""
Luhmann address parsing, grammar and ordering.

An address is a run of alternating numeric and alphabetic segments that
always starts with a number: 1, 1a, 1a2, 1a2b, 12c3, ...

The depth of an address is its segment count. The tree of notes is never
stored; it falls out of sorting every address with `compare`, because a
child's address always extends its parent's by exactly one segment.
"""

import functools
import re
from typing import Iterable, NamedTuple, Optional, Union

NUMERIC = "num"
ALPHA = "alpha"

_SEGMENT_RE = re.compile(r"[0-9]+|[a-z]+")


class Segment(NamedTuple):
    """One typed component of an address."""
    kind: str                  # NUMERIC or ALPHA
    value: Union[int, str]     # int for NUMERIC, letters for ALPHA

    def __str__(self) -> str:
        return str(self.value)


def canonicalize(raw: str) -> str:
    """Trim and lowercase. Does not validate."""
    return raw.strip().lower()


def parse(raw: str) -> list[Segment]:
    """
    Split an address into typed segments.

    Digit runs become one numeric segment (leading zeros are dropped from
    the value), letter runs become one alpha segment, and anything else is
    skipped, so "1.a-2" parses the same as "1a2". Never raises.

        >>> parse("01a2")
        [Segment(kind='num', value=1), Segment(kind='alpha', value='a'), Segment(kind='num', value=2)]
    """
    segments = []
    for match in _SEGMENT_RE.finditer(canonicalize(raw)):
        text = match.group()
        if text.isdigit():
            segments.append(Segment(NUMERIC, int(text)))
        else:
            segments.append(Segment(ALPHA, text))
    return segments


def is_valid(raw: str) -> bool:
    """True if the address is non-empty and alternates numeric/alpha from a number."""
    if not raw or not raw.strip():
        return False
    segments = parse(raw)
    if not segments:
        return False
    for i, seg in enumerate(segments):
        expected = NUMERIC if i % 2 == 0 else ALPHA
        if seg.kind != expected:
            return False
    return True


def depth(raw: str) -> int:
    """Number of segments. Only meaningful for valid addresses."""
    return len(parse(raw))


def segments_to_address(segments: Iterable[Segment]) -> str:
    """Render segments back to an address string (numbers lose leading zeros)."""
    return "".join(str(seg.value) for seg in segments)


def parent_address(raw: str) -> Optional[str]:
    """The structural parent of an address, or None for top-level addresses."""
    segments = parse(raw)
    if len(segments) <= 1:
        return None
    return segments_to_address(segments[:-1])


def ancestor_addresses(raw: str) -> list[str]:
    """Every strict prefix of the address, longest first."""
    segments = parse(raw)
    return [segments_to_address(segments[:n]) for n in range(len(segments) - 1, 0, -1)]


def parse_address_list(text: str) -> list[str]:
    """Split a whitespace-separated address field into canonical addresses."""
    return [canonicalize(tok) for tok in text.split() if tok]


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def _compare_segments(sa: list[Segment], sb: list[Segment]) -> int:
    for xa, xb in zip(sa, sb):
        if xa.kind == xb.kind:
            if xa.value != xb.value:
                return -1 if xa.value < xb.value else 1
        else:
            # Numbers sort before letters at the same position
            return -1 if xa.kind == NUMERIC else 1
    if len(sa) != len(sb):
        return -1 if len(sa) < len(sb) else 1
    return 0


def compare(a: str, b: str) -> int:
    """
    Compare two addresses segment by segment. Returns -1, 0 or 1.

    Numeric segments compare by value and alpha segments as strings. When
    the types differ at a position the numeric side is smaller, which keeps
    the order total for malformed or half-typed input. A prefix sorts
    before its extensions, so "1a" < "1a2" < "1b".
    """
    return _compare_segments(parse(a), parse(b))


sort_key = functools.cmp_to_key(compare)
