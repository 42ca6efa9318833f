"""SQL for the Bear Core Data store.

Bear's schema is undocumented. Notes live in ``ZSFNOTE``, tags in
``ZSFNOTETAG``, note-to-note links in ``ZSFNOTEBACKLINK``. The many-to-many
note/tag table is named after Core Data entity numbers (``Z_5TAGS`` in
Bear 2, ``Z_7TAGS`` in older releases), so it is discovered at runtime.
"""

import logging
import re
import sqlite3
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

NOTE_COLUMNS = """
    n.Z_PK, n.ZTITLE, n.ZTEXT, n.ZUNIQUEIDENTIFIER,
    n.ZCREATIONDATE, n.ZMODIFICATIONDATE,
    n.ZTRASHED, n.ZARCHIVED, n.ZPINNED
"""

VISIBLE = "COALESCE(n.ZTRASHED, 0) = 0 AND COALESCE(n.ZPERMANENTLYDELETED, 0) = 0"

SEARCH_NOTES = f"""
    SELECT {NOTE_COLUMNS}
    FROM ZSFNOTE n
    WHERE {VISIBLE}
      AND (casefold_contains(n.ZTITLE, ?) OR casefold_contains(n.ZTEXT, ?))
    ORDER BY n.ZMODIFICATIONDATE DESC
    LIMIT ?
"""

# Identifier matches sort ahead of title matches
GET_NOTE = f"""
    SELECT {NOTE_COLUMNS}
    FROM ZSFNOTE n
    WHERE {VISIBLE}
      AND (n.ZUNIQUEIDENTIFIER = ? OR n.ZTITLE = ?)
    ORDER BY (n.ZUNIQUEIDENTIFIER = ?) DESC, n.ZMODIFICATIONDATE DESC
    LIMIT 1
"""

GET_NOTE_PK = f"""
    SELECT n.Z_PK
    FROM ZSFNOTE n
    WHERE {VISIBLE}
      AND (n.ZUNIQUEIDENTIFIER = ? OR n.ZTITLE = ?)
    ORDER BY (n.ZUNIQUEIDENTIFIER = ?) DESC, n.ZMODIFICATIONDATE DESC
    LIMIT 1
"""

GET_RECENT_NOTES = f"""
    SELECT {NOTE_COLUMNS}
    FROM ZSFNOTE n
    WHERE {VISIBLE}
      AND n.ZMODIFICATIONDATE > ?
    ORDER BY n.ZMODIFICATIONDATE DESC
    LIMIT ?
"""

LIST_TAGS = """
    SELECT t.ZTITLE, t.ZUNIQUEIDENTIFIER
    FROM ZSFNOTETAG t
    WHERE t.ZTITLE IS NOT NULL
    ORDER BY t.ZTITLE
"""

GET_BACKLINKS = f"""
    SELECT DISTINCT {NOTE_COLUMNS}
    FROM ZSFNOTEBACKLINK b
    JOIN ZSFNOTE n ON n.Z_PK = b.ZLINKEDBY
    WHERE b.ZLINKINGTO = ?
      AND {VISIBLE}
    ORDER BY n.ZMODIFICATIONDATE DESC
"""

_NOTES_BY_TAG_TEMPLATE = """
    SELECT {columns}
    FROM ZSFNOTE n
    JOIN {table} j ON j.{notes_col} = n.Z_PK
    JOIN ZSFNOTETAG t ON t.Z_PK = j.{tags_col}
    WHERE t.ZTITLE = ?
      AND {visible}
    ORDER BY n.ZMODIFICATIONDATE DESC
    LIMIT ?
"""

_JOIN_TABLE_RE = re.compile(r"^Z_\d+TAGS$")
_JOIN_NOTES_RE = re.compile(r"^Z_\d+NOTES$")
_JOIN_TAGS_RE = re.compile(r"^Z_\d+TAGS$")


@dataclass(frozen=True)
class TagJoin:
    """Names of the note/tag relation table and its two foreign-key columns."""

    table: str = "Z_5TAGS"
    notes_column: str = "Z_5NOTES"
    tags_column: str = "Z_13TAGS"


DEFAULT_TAG_JOIN = TagJoin()


def casefold_contains(haystack: Optional[str], needle: Optional[str]) -> int:
    """SQL function: 1 if ``needle`` occurs in ``haystack`` ignoring case.

    SQLite's LIKE only folds ASCII, so "über" would miss "Über". This uses
    Unicode case folding and treats the needle literally (no wildcards).
    """
    if haystack is None or needle is None:
        return 0
    return int(needle.casefold() in haystack.casefold())


def register_functions(conn: sqlite3.Connection) -> None:
    """Install the SQL functions the queries above rely on."""
    conn.create_function("casefold_contains", 2, casefold_contains, deterministic=True)


def discover_tag_join(conn: sqlite3.Connection) -> TagJoin:
    """Find the note/tag relation table in this store."""
    tables = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name LIKE 'Z\\_%TAGS' ESCAPE '\\'"
    ).fetchall()
    for (table,) in tables:
        if not _JOIN_TABLE_RE.match(table):
            continue
        columns = [row[1] for row in conn.execute(f'PRAGMA table_info("{table}")')]
        notes_col = _first_match(columns, _JOIN_NOTES_RE)
        tags_col = _first_match(columns, _JOIN_TAGS_RE)
        if notes_col and tags_col:
            logger.debug(f"Tag relation table: {table}({notes_col}, {tags_col})")
            return TagJoin(table=table, notes_column=notes_col, tags_column=tags_col)

    logger.warning(f"No note/tag relation table found, assuming {DEFAULT_TAG_JOIN.table}")
    return DEFAULT_TAG_JOIN


def _first_match(columns: list, pattern: "re.Pattern[str]") -> Optional[str]:
    for column in columns:
        if pattern.match(column):
            return column
    return None


def notes_by_tag_sql(join: TagJoin) -> str:
    return _NOTES_BY_TAG_TEMPLATE.format(
        columns=NOTE_COLUMNS,
        table=join.table,
        notes_col=join.notes_column,
        tags_col=join.tags_column,
        visible=VISIBLE,
    )
