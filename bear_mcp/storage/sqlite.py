"""Read-only access to Bear's SQLite store.

The connection is opened lazily on first query, read-only, and kept until
:meth:`BearDatabase.close`. A closed database reopens transparently on the
next query. All public query methods are coroutines; the blocking sqlite3
work runs in a worker thread via :func:`asyncio.to_thread`.

Zero matches is never an error: list queries return ``[]`` and single-note
lookups return ``None``. A missing store file raises
:class:`~bear_mcp.types.DatabaseConnectionError`.
"""

import asyncio
import logging
import sqlite3
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar, Union

from bear_mcp.storage.queries import (
    GET_BACKLINKS,
    GET_NOTE,
    GET_NOTE_PK,
    GET_RECENT_NOTES,
    LIST_TAGS,
    SEARCH_NOTES,
    TagJoin,
    discover_tag_join,
    notes_by_tag_sql,
    register_functions,
)
from bear_mcp.storage.rows import row_to_note, row_to_tag
from bear_mcp.storage.timestamps import core_data_cutoff
from bear_mcp.types import DatabaseConnectionError, Note, QueryError, Tag

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BearDatabase:
    """Query component over a Bear ``database.sqlite`` file."""

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path).expanduser()
        self._conn: Optional[sqlite3.Connection] = None
        self._tag_join: Optional[TagJoin] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def verify_database_exists(self) -> Dict[str, Any]:
        """Check the store file is present.

        Returns ``{"exists": True}`` or ``{"exists": False, "error": ...}``.
        """
        if not self.db_path.is_file():
            return {
                "exists": False,
                "error": f"Bear database not found at: {self.db_path}. Is Bear installed?",
            }
        return {"exists": True}

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _get_conn(self) -> sqlite3.Connection:
        """Return the open connection, opening it first if needed."""
        check = self.verify_database_exists()
        if not check["exists"]:
            # The file vanished under an open handle; drop it
            self.close()
            logger.error(check["error"])
            raise DatabaseConnectionError(check["error"], path=str(self.db_path))

        if self._conn is None:
            uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
            try:
                conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
            except sqlite3.Error as e:
                logger.error(f"Cannot open Bear database {self.db_path}: {e}")
                raise DatabaseConnectionError(
                    f"Cannot open Bear database at {self.db_path}: {e}", path=str(self.db_path)
                ) from e
            conn.row_factory = sqlite3.Row
            register_functions(conn)
            self._conn = conn
            logger.debug(f"Opened Bear database {self.db_path} (read-only)")
        return self._conn

    def close(self) -> None:
        """Release the connection. Safe to call repeatedly."""
        if self._conn is not None:
            try:
                self._conn.close()
            finally:
                self._conn = None
                self._tag_join = None
                logger.debug("Closed Bear database connection")

    def __enter__(self) -> "BearDatabase":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fetch_all(self, sql: str, params: Sequence[Any]) -> List[sqlite3.Row]:
        conn = self._get_conn()
        try:
            return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Bear query failed: {e}")
            raise QueryError(f"Bear query failed: {e}") from e

    def _fetch_one(self, sql: str, params: Sequence[Any]) -> Optional[sqlite3.Row]:
        conn = self._get_conn()
        try:
            return conn.execute(sql, params).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Bear query failed: {e}")
            raise QueryError(f"Bear query failed: {e}") from e

    def _get_tag_join(self) -> TagJoin:
        conn = self._get_conn()
        if self._tag_join is None:
            try:
                self._tag_join = discover_tag_join(conn)
            except sqlite3.Error as e:
                raise QueryError(f"Cannot inspect Bear schema: {e}") from e
        return self._tag_join

    async def _run(self, fn: Callable[..., T], *args: Any) -> T:
        return await asyncio.to_thread(fn, *args)

    # ------------------------------------------------------------------
    # Sync queries
    # ------------------------------------------------------------------

    def _search_notes(self, query: str, limit: int) -> List[Note]:
        rows = self._fetch_all(SEARCH_NOTES, (query, query, limit))
        return [row_to_note(row) for row in rows]

    def _get_note(self, identifier: str) -> Optional[Note]:
        row = self._fetch_one(GET_NOTE, (identifier, identifier, identifier))
        return row_to_note(row) if row is not None else None

    def _get_notes_by_tag(self, tag: str, limit: int) -> List[Note]:
        sql = notes_by_tag_sql(self._get_tag_join())
        rows = self._fetch_all(sql, (tag, limit))
        return [row_to_note(row) for row in rows]

    def _get_recent_notes(self, days: float, limit: int) -> List[Note]:
        cutoff = core_data_cutoff(days)
        rows = self._fetch_all(GET_RECENT_NOTES, (cutoff, limit))
        return [row_to_note(row) for row in rows]

    def _list_tags(self) -> List[Tag]:
        return [row_to_tag(row) for row in self._fetch_all(LIST_TAGS, ())]

    def _get_note_backlinks(self, identifier: str) -> List[Note]:
        target = self._fetch_one(GET_NOTE_PK, (identifier, identifier, identifier))
        if target is None:
            return []
        rows = self._fetch_all(GET_BACKLINKS, (target["Z_PK"],))
        return [row_to_note(row) for row in rows]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def search_notes(self, query: str, limit: int = 10) -> List[Note]:
        """Case-insensitive substring search over title and body, newest first."""
        return await self._run(self._search_notes, query, limit)

    async def get_note(self, identifier: str) -> Optional[Note]:
        """Get one note by unique identifier or exact title."""
        return await self._run(self._get_note, identifier)

    async def get_notes_by_tag(self, tag: str, limit: int = 50) -> List[Note]:
        """Get notes carrying the tag titled ``tag``, newest first."""
        return await self._run(self._get_notes_by_tag, tag, limit)

    async def get_recent_notes(self, days: float = 7, limit: int = 50) -> List[Note]:
        """Get notes modified within the last ``days`` days, newest first."""
        return await self._run(self._get_recent_notes, days, limit)

    async def list_tags(self) -> List[Tag]:
        """All titled tags, alphabetically."""
        return await self._run(self._list_tags)

    async def get_note_backlinks(self, identifier: str) -> List[Note]:
        """Notes that link to the note named by ``identifier``.

        Returns ``[]`` when the target note cannot be resolved.
        """
        return await self._run(self._get_note_backlinks, identifier)
