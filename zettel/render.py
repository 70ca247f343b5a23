"""
Plain-text rendering of the derived tree.

The address core never renders markup itself. A renderer receives the
ordered rows plus a transform that turns note content into whatever the
display wants; for the terminal that is the first line of the content.
"""

import json
from typing import Callable, Mapping, Sequence

from .tree import Row
from .types import Note

ORPHAN_MARK = "~"


def first_line(content: str) -> str:
    """Default content transform: the first non-blank line."""
    for line in content.splitlines():
        if line.strip():
            return line.strip()
    return ""


def format_row(
    row: Row,
    note: Note,
    transform: Callable[[str], str] = first_line,
    indent: int = 2,
) -> str:
    """One tree line: indentation, address label, transformed content.

    Orphans carry a leading mark so a missing parent is visible.
    """
    label = f"{ORPHAN_MARK}{row.address}" if row.is_orphan else row.address
    return f"{' ' * (indent * row.render_depth)}{label}  {transform(note.content)}"


def render_tree(
    rows: Sequence[Row],
    notes: Mapping[str, Note],
    transform: Callable[[str], str] = first_line,
    indent: int = 2,
) -> str:
    """Render rows as indented text, one line per row."""
    return "\n".join(format_row(row, notes[row.note_id], transform, indent) for row in rows)


def rows_to_json(rows: Sequence[Row], notes: Mapping[str, Note]) -> str:
    """Rows with their content, for machine consumption."""
    return json.dumps([
        {
            "id": row.note_id,
            "address": row.address,
            "depth": row.render_depth,
            "orphan": row.is_orphan,
            "content": notes[row.note_id].content,
        }
        for row in rows
    ], indent=2, ensure_ascii=False)
