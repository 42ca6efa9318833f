"""
Pytest fixtures for bear_mcp tests.

``bear_store`` builds a small SQLite file with the slice of Bear's Core Data
schema the read path uses. Tests add notes, tags and links through it.
"""

import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock

import pytest

from bear_mcp.actions import ActionDispatcher, CommandBuilder
from bear_mcp.config import BearConfig
from bear_mcp.core import BearNotes
from bear_mcp.storage import BearDatabase, to_core_data
from bear_mcp.types import ActionResult

SCHEMA = """
CREATE TABLE ZSFNOTE (
    Z_PK INTEGER PRIMARY KEY,
    ZTITLE VARCHAR,
    ZTEXT VARCHAR,
    ZUNIQUEIDENTIFIER VARCHAR,
    ZCREATIONDATE TIMESTAMP,
    ZMODIFICATIONDATE TIMESTAMP,
    ZTRASHED INTEGER DEFAULT 0,
    ZARCHIVED INTEGER DEFAULT 0,
    ZPINNED INTEGER DEFAULT 0,
    ZPERMANENTLYDELETED INTEGER DEFAULT 0,
    ZENCRYPTED INTEGER DEFAULT 0
);
CREATE TABLE ZSFNOTETAG (
    Z_PK INTEGER PRIMARY KEY,
    ZTITLE VARCHAR,
    ZUNIQUEIDENTIFIER VARCHAR
);
CREATE TABLE Z_5TAGS (
    Z_5NOTES INTEGER,
    Z_13TAGS INTEGER,
    PRIMARY KEY (Z_5NOTES, Z_13TAGS)
);
CREATE TABLE ZSFNOTEBACKLINK (
    Z_PK INTEGER PRIMARY KEY,
    ZLINKEDBY INTEGER,
    ZLINKINGTO INTEGER,
    ZUNIQUEIDENTIFIER VARCHAR
);
"""


class BearStore:
    """Writable handle on a fake Bear database file."""

    def __init__(self, path: Path):
        self.path = path
        self.conn = sqlite3.connect(path)
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def add_note(
        self,
        title: Optional[str] = "Note",
        text: Optional[str] = "",
        identifier: Optional[str] = None,
        modified: Optional[datetime] = None,
        created: Optional[datetime] = None,
        trashed: bool = False,
        archived: bool = False,
        pinned: bool = False,
        deleted: bool = False,
    ) -> int:
        now = datetime.now(timezone.utc)
        modified = modified or now
        created = created or modified
        cursor = self.conn.execute(
            """
            INSERT INTO ZSFNOTE (
                ZTITLE, ZTEXT, ZUNIQUEIDENTIFIER, ZCREATIONDATE, ZMODIFICATIONDATE,
                ZTRASHED, ZARCHIVED, ZPINNED, ZPERMANENTLYDELETED
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                title,
                text,
                identifier or str(uuid.uuid4()).upper(),
                to_core_data(created),
                to_core_data(modified),
                int(trashed),
                int(archived),
                int(pinned),
                int(deleted),
            ),
        )
        self.conn.commit()
        return cursor.lastrowid

    def add_tag(self, title: Optional[str], identifier: Optional[str] = None) -> int:
        cursor = self.conn.execute(
            "INSERT INTO ZSFNOTETAG (ZTITLE, ZUNIQUEIDENTIFIER) VALUES (?, ?)",
            (title, identifier or str(uuid.uuid4()).upper()),
        )
        self.conn.commit()
        return cursor.lastrowid

    def tag_note(self, note_pk: int, tag_pk: int) -> None:
        self.conn.execute("INSERT INTO Z_5TAGS (Z_5NOTES, Z_13TAGS) VALUES (?, ?)", (note_pk, tag_pk))
        self.conn.commit()

    def link(self, source_pk: int, target_pk: int) -> None:
        self.conn.execute(
            "INSERT INTO ZSFNOTEBACKLINK (ZLINKEDBY, ZLINKINGTO, ZUNIQUEIDENTIFIER) VALUES (?, ?, ?)",
            (source_pk, target_pk, str(uuid.uuid4()).upper()),
        )
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()


@pytest.fixture
def bear_store(tmp_path):
    """An empty fake Bear database."""
    store = BearStore(tmp_path / "database.sqlite")
    yield store
    store.close()


@pytest.fixture
def database(bear_store):
    """BearDatabase reading the fake store."""
    db = BearDatabase(bear_store.path)
    yield db
    db.close()


@pytest.fixture
def mock_dispatcher():
    """ActionDispatcher whose handoff always succeeds."""
    dispatcher = AsyncMock(spec=ActionDispatcher)
    dispatcher.dispatch.return_value = ActionResult(success=True)
    dispatcher.is_bear_running.return_value = True
    return dispatcher


@pytest.fixture
def bear(bear_store, database, mock_dispatcher):
    """BearNotes over the fake store with a mocked dispatcher."""
    config = BearConfig(database_path=bear_store.path)
    notes = BearNotes(
        config,
        database=database,
        builder=CommandBuilder(config.api_token),
        dispatcher=mock_dispatcher,
    )
    yield notes
    notes.close()
