"""
Data types for the zettelkasten.
"""

import secrets
import string
import time
from dataclasses import dataclass, field
from typing import Any

NOTE_ID_PREFIX = "n_"

_BASE36 = string.digits + string.ascii_lowercase


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, r = divmod(n, 36)
        digits.append(_BASE36[r])
    return "".join(reversed(digits))


def new_note_id() -> str:
    """Fresh opaque note identity: n_ + 8 random base-36 chars + millisecond clock."""
    rand = "".join(secrets.choice(_BASE36) for _ in range(8))
    return f"{NOTE_ID_PREFIX}{rand}{_base36(int(time.time() * 1000))}"


@dataclass(frozen=True)
class Note:
    """
    A note in the store.

    This is a read-only snapshot. Edits go through NoteStore.update(),
    which swaps in a new Note with the same id.

    Attributes:
        id: Opaque identity, stable across edits
        addresses: Canonical addresses in the order the user gave them
        content: Markdown text, rendered by whoever displays the tree
    """
    id: str
    addresses: tuple[str, ...] = field(default_factory=tuple)
    content: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        return {"id": self.id, "ids": list(self.addresses), "content": self.content}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Note":
        """Deserialize from the persisted JSON shape. Raises on malformed records."""
        note_id = d["id"]
        ids = d["ids"]
        if not isinstance(note_id, str) or not isinstance(ids, list):
            raise ValueError(f"Malformed note record: {d!r}")
        return cls(
            id=note_id,
            addresses=tuple(str(a) for a in ids),
            content=str(d.get("content") or ""),
        )

    def __str__(self) -> str:
        first = self.content.splitlines()[0] if self.content else ""
        return f"{' '.join(self.addresses)}: {first[:60]}"
