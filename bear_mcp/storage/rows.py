"""Row deserializers for the Bear store.

Module-level functions converting ``sqlite3.Row`` objects from the
``ZSFNOTE`` / ``ZSFNOTETAG`` tables into :mod:`bear_mcp.types` values.
"""

import sqlite3
from typing import Any

from bear_mcp.storage.timestamps import from_core_data
from bear_mcp.types import UNTITLED, Note, Tag


def _safe_get(row: sqlite3.Row, key: str, default: Any = None) -> Any:
    """Safely get value from row."""
    try:
        value = row[key]
        return value if value is not None else default
    except (IndexError, KeyError):
        return default


def _flag(row: sqlite3.Row, key: str) -> bool:
    return bool(_safe_get(row, key, 0))


def row_to_note(row: sqlite3.Row) -> Note:
    """Convert a ZSFNOTE row to a Note."""
    return Note(
        pk=row["Z_PK"],
        identifier=row["ZUNIQUEIDENTIFIER"],
        title=_safe_get(row, "ZTITLE") or UNTITLED,
        text=_safe_get(row, "ZTEXT", ""),
        created_at=from_core_data(_safe_get(row, "ZCREATIONDATE")),
        modified_at=from_core_data(_safe_get(row, "ZMODIFICATIONDATE")),
        is_trashed=_flag(row, "ZTRASHED"),
        is_archived=_flag(row, "ZARCHIVED"),
        is_pinned=_flag(row, "ZPINNED"),
    )


def row_to_tag(row: sqlite3.Row) -> Tag:
    """Convert a ZSFNOTETAG row to a Tag."""
    return Tag(title=row["ZTITLE"], identifier=row["ZUNIQUEIDENTIFIER"])
