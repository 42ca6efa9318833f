"""
BearNotes - one facade over Bear's two access paths.

Reads go straight to the SQLite store (:class:`BearDatabase`). Writes and
app actions go out as x-callback-url commands (:class:`CommandBuilder` +
:class:`ActionDispatcher`) because the store has no writable API. Every
operation returns an :class:`OperationResult`.

Read failures other than "nothing matched" (a missing store, a failed
query) are raised. Write failures never are: a failed handoff comes back as
``OperationResult(success=False, error=...)``.
"""

import logging
from typing import Any, Dict, List, Optional

from bear_mcp.actions import ActionDispatcher, CommandBuilder, format_tags
from bear_mcp.config import BearConfig, load_config
from bear_mcp.storage import BearDatabase
from bear_mcp.types import Note, OperationResult
from bear_mcp.validation import (
    MAX_DAYS,
    MAX_LIMIT,
    MIN_DAYS,
    MIN_LIMIT,
    sanitize_int,
    sanitize_list,
    sanitize_string,
)

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 500
MAX_CONTENT_LENGTH = 1_000_000
MAX_QUERY_LENGTH = 500
DEFAULT_SEPARATOR = "\n\n"


def _notes_payload(notes: List[Note], **echo: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "count": len(notes),
        "notes": [n.to_dict() for n in notes],
    }
    payload.update(echo)
    return payload


class BearNotes:
    """Named note operations over the Bear store and URL scheme."""

    def __init__(
        self,
        config: Optional[BearConfig] = None,
        database: Optional[BearDatabase] = None,
        builder: Optional[CommandBuilder] = None,
        dispatcher: Optional[ActionDispatcher] = None,
    ):
        self.config = config or load_config()
        self.database = database or BearDatabase(self.config.database_path)
        self.builder = builder or CommandBuilder(self.config.api_token)
        self.dispatcher = dispatcher or ActionDispatcher()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def verify(self) -> Dict[str, Any]:
        """Check the store file exists: ``{"exists": bool, "error"?: str}``."""
        return self.database.verify_database_exists()

    async def is_bear_running(self) -> bool:
        return await self.dispatcher.is_bear_running()

    async def status(self) -> Dict[str, Any]:
        """Store and app health for diagnostics."""
        check = self.verify()
        return {
            "database_path": str(self.database.db_path),
            "database_exists": check["exists"],
            "database_error": check.get("error"),
            "bear_running": await self.is_bear_running(),
            "token_configured": self.builder.token is not None,
            "prefer_api": self.config.prefer_api_token,
        }

    def close(self) -> None:
        self.database.close()

    # =========================================================================
    # READ PATH
    # =========================================================================

    async def search_notes(self, query: str, limit: int = 10) -> OperationResult:
        query = sanitize_string(query, "query", MAX_QUERY_LENGTH)
        limit = sanitize_int(limit, "limit", MIN_LIMIT, MAX_LIMIT, 10)
        notes = await self.database.search_notes(query, limit)
        return OperationResult.ok(_notes_payload(notes, query=query))

    async def get_note(self, identifier: str) -> OperationResult:
        identifier = sanitize_string(identifier, "identifier", MAX_TITLE_LENGTH)
        note = await self.database.get_note(identifier)
        if note is None:
            return OperationResult.ok({"found": False, "identifier": identifier})
        return OperationResult.ok({"found": True, "note": note.to_dict()})

    async def get_notes_by_tag(self, tag: str, limit: int = 50) -> OperationResult:
        tag = sanitize_string(tag, "tag", MAX_TITLE_LENGTH).lstrip("#")
        if not tag:
            raise ValueError("tag cannot be empty")
        limit = sanitize_int(limit, "limit", MIN_LIMIT, MAX_LIMIT, 50)
        notes = await self.database.get_notes_by_tag(tag, limit)
        return OperationResult.ok(_notes_payload(notes, tag=tag))

    async def get_recent_notes(self, days: int = 7, limit: int = 50) -> OperationResult:
        days = sanitize_int(days, "days", MIN_DAYS, MAX_DAYS, 7)
        limit = sanitize_int(limit, "limit", MIN_LIMIT, MAX_LIMIT, 50)
        notes = await self.database.get_recent_notes(days, limit)
        return OperationResult.ok(_notes_payload(notes, days=days))

    async def list_tags(self) -> OperationResult:
        tags = await self.database.list_tags()
        return OperationResult.ok({"count": len(tags), "tags": [t.title for t in tags]})

    async def get_note_backlinks(self, identifier: str) -> OperationResult:
        identifier = sanitize_string(identifier, "identifier", MAX_TITLE_LENGTH)
        notes = await self.database.get_note_backlinks(identifier)
        return OperationResult.ok(_notes_payload(notes, target_note=identifier))

    # =========================================================================
    # WRITE PATH
    # =========================================================================

    async def _send(
        self, verb: str, params: Dict[str, Any], done: str, failed: str
    ) -> OperationResult:
        command = self.builder.build(verb, params)
        result = await self.dispatcher.dispatch(command)
        if not result.success:
            return OperationResult.failed(f"{failed}: {result.error}")
        logger.info(done)
        return OperationResult.ok({"message": done})

    async def create_note(
        self, title: str, content: str, tags: Optional[List[str]] = None
    ) -> OperationResult:
        title = sanitize_string(title, "title", MAX_TITLE_LENGTH)
        content = sanitize_string(content, "content", MAX_CONTENT_LENGTH, required=False)
        tags = sanitize_list(tags, "tags")
        return await self._send(
            "create",
            {
                "title": title,
                "text": content,
                "tags": format_tags(tags),
                "open_note": False,
                "show_window": False,
            },
            done=f'Note "{title}" created successfully',
            failed="Failed to create note",
        )

    async def update_note(
        self,
        identifier: str,
        content: str,
        title: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> OperationResult:
        """Replace the whole body of the note ``title or identifier``."""
        identifier = sanitize_string(identifier, "identifier", MAX_TITLE_LENGTH)
        content = sanitize_string(content, "content", MAX_CONTENT_LENGTH, required=False)
        new_title = sanitize_string(title, "title", MAX_TITLE_LENGTH, required=False)
        tags = sanitize_list(tags, "tags")
        note_title = new_title if new_title.strip() else identifier
        return await self._send(
            "add-text",
            {
                "title": note_title,
                "text": content,
                "mode": "replace_all",
                "tags": format_tags(tags),
                "open_note": False,
                "show_window": False,
            },
            done=f'Note "{note_title}" updated successfully',
            failed="Failed to update note",
        )

    async def append_to_note(
        self, identifier: str, content: str, separator: str = DEFAULT_SEPARATOR
    ) -> OperationResult:
        identifier = sanitize_string(identifier, "identifier", MAX_TITLE_LENGTH)
        content = sanitize_string(content, "content", MAX_CONTENT_LENGTH)
        if separator is None:
            separator = DEFAULT_SEPARATOR
        separator = sanitize_string(separator, "separator", 100, required=False)
        return await self._send(
            "add-text",
            {
                "title": identifier,
                "text": separator + content,
                "mode": "append",
                "open_note": False,
                "show_window": False,
            },
            done=f'Content appended to note "{identifier}"',
            failed="Failed to append",
        )

    async def open_note(self, identifier: str) -> OperationResult:
        identifier = sanitize_string(identifier, "identifier", MAX_TITLE_LENGTH)
        return await self._send(
            "open-note",
            {"title": identifier},
            done=f'Opened note "{identifier}" in Bear',
            failed="Failed to open note",
        )

    async def trash_note(self, identifier: str, show_window: bool = False) -> OperationResult:
        identifier = sanitize_string(identifier, "identifier", MAX_TITLE_LENGTH)
        return await self._send(
            "trash",
            {"search": identifier, "show_window": bool(show_window)},
            done=f'Note "{identifier}" moved to trash',
            failed="Failed to trash note",
        )

    async def archive_note(self, identifier: str, show_window: bool = False) -> OperationResult:
        identifier = sanitize_string(identifier, "identifier", MAX_TITLE_LENGTH)
        return await self._send(
            "archive",
            {"search": identifier, "show_window": bool(show_window)},
            done=f'Note "{identifier}" archived',
            failed="Failed to archive note",
        )

    async def delete_tag(self, name: str, show_window: bool = False) -> OperationResult:
        name = sanitize_string(name, "name", MAX_TITLE_LENGTH).lstrip("#")
        if not name:
            raise ValueError("name cannot be empty")
        return await self._send(
            "delete-tag",
            {"name": name, "show_window": bool(show_window)},
            done=f'Tag "{name}" deleted',
            failed="Failed to delete tag",
        )
