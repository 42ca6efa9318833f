"""Handlers for read tools: search, get, by-tag, recent, tags, backlinks."""

from typing import Any, Dict

from bear_mcp.core import BearNotes
from bear_mcp.mcp.sanitize import sanitize_string, validate_number
from bear_mcp.types import OperationResult

# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


def validate_search_notes(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["query"] = sanitize_string(arguments.get("query"), "query", 500, required=True)
    sanitized["limit"] = validate_number(arguments.get("limit"), "limit", 1, 100, 10)
    return sanitized


def validate_get_note(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["identifier"] = sanitize_string(
        arguments.get("identifier"), "identifier", 500, required=True
    )
    return sanitized


def validate_get_notes_by_tag(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["tag"] = sanitize_string(arguments.get("tag"), "tag", 500, required=True)
    sanitized["limit"] = validate_number(arguments.get("limit"), "limit", 1, 100, 50)
    return sanitized


def validate_get_recent_notes(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["days"] = validate_number(arguments.get("days"), "days", 1, 365, 7)
    sanitized["limit"] = validate_number(arguments.get("limit"), "limit", 1, 100, 50)
    return sanitized


def validate_list_tags(arguments: Dict[str, Any]) -> Dict[str, Any]:
    return {}


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def handle_search_notes(args: Dict[str, Any], bear: BearNotes) -> OperationResult:
    return await bear.search_notes(args["query"], args.get("limit", 10))


async def handle_get_note(args: Dict[str, Any], bear: BearNotes) -> OperationResult:
    return await bear.get_note(args["identifier"])


async def handle_get_notes_by_tag(args: Dict[str, Any], bear: BearNotes) -> OperationResult:
    return await bear.get_notes_by_tag(args["tag"], args.get("limit", 50))


async def handle_get_recent_notes(args: Dict[str, Any], bear: BearNotes) -> OperationResult:
    return await bear.get_recent_notes(args.get("days", 7), args.get("limit", 50))


async def handle_list_tags(args: Dict[str, Any], bear: BearNotes) -> OperationResult:
    return await bear.list_tags()


async def handle_get_note_backlinks(args: Dict[str, Any], bear: BearNotes) -> OperationResult:
    return await bear.get_note_backlinks(args["identifier"])


# ---------------------------------------------------------------------------
# Registry dicts
# ---------------------------------------------------------------------------

HANDLERS = {
    "search_notes": handle_search_notes,
    "get_note": handle_get_note,
    "get_notes_by_tag": handle_get_notes_by_tag,
    "get_recent_notes": handle_get_recent_notes,
    "list_tags": handle_list_tags,
    "get_note_backlinks": handle_get_note_backlinks,
}

VALIDATORS = {
    "search_notes": validate_search_notes,
    "get_note": validate_get_note,
    "get_notes_by_tag": validate_get_notes_by_tag,
    "get_recent_notes": validate_get_recent_notes,
    "list_tags": validate_list_tags,
    "get_note_backlinks": validate_get_note,
}
