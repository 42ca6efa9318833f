"""Handlers for write/action tools: create, update, append, open, trash, archive, delete tag."""

from typing import Any, Dict

from bear_mcp.core import DEFAULT_SEPARATOR, BearNotes
from bear_mcp.mcp.sanitize import sanitize_array, sanitize_string, validate_bool
from bear_mcp.types import OperationResult

# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


def validate_create_note(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["title"] = sanitize_string(arguments.get("title"), "title", 500, required=True)
    sanitized["content"] = sanitize_string(
        arguments.get("content"), "content", 1_000_000, required=False
    )
    sanitized["tags"] = sanitize_array(arguments.get("tags"), "tags")
    return sanitized


def validate_update_note(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["identifier"] = sanitize_string(
        arguments.get("identifier"), "identifier", 500, required=True
    )
    sanitized["title"] = (
        sanitize_string(arguments.get("title"), "title", 500, required=False) or None
    )
    sanitized["content"] = sanitize_string(
        arguments.get("content"), "content", 1_000_000, required=False
    )
    sanitized["tags"] = sanitize_array(arguments.get("tags"), "tags")
    return sanitized


def validate_append_to_note(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["identifier"] = sanitize_string(
        arguments.get("identifier"), "identifier", 500, required=True
    )
    sanitized["content"] = sanitize_string(
        arguments.get("content"), "content", 1_000_000, required=True
    )
    separator = arguments.get("separator")
    sanitized["separator"] = (
        DEFAULT_SEPARATOR
        if separator is None
        else sanitize_string(separator, "separator", 100, required=False)
    )
    return sanitized


def validate_identifier_action(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["identifier"] = sanitize_string(
        arguments.get("identifier"), "identifier", 500, required=True
    )
    sanitized["show_window"] = validate_bool(arguments.get("show_window"), "show_window")
    return sanitized


def validate_open_note(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["identifier"] = sanitize_string(
        arguments.get("identifier"), "identifier", 500, required=True
    )
    return sanitized


def validate_delete_tag(arguments: Dict[str, Any]) -> Dict[str, Any]:
    sanitized: Dict[str, Any] = {}
    sanitized["name"] = sanitize_string(arguments.get("name"), "name", 500, required=True)
    sanitized["show_window"] = validate_bool(arguments.get("show_window"), "show_window")
    return sanitized


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def handle_create_note(args: Dict[str, Any], bear: BearNotes) -> OperationResult:
    return await bear.create_note(
        title=args["title"],
        content=args.get("content", ""),
        tags=args.get("tags"),
    )


async def handle_update_note(args: Dict[str, Any], bear: BearNotes) -> OperationResult:
    return await bear.update_note(
        identifier=args["identifier"],
        content=args.get("content", ""),
        title=args.get("title"),
        tags=args.get("tags"),
    )


async def handle_append_to_note(args: Dict[str, Any], bear: BearNotes) -> OperationResult:
    return await bear.append_to_note(
        identifier=args["identifier"],
        content=args["content"],
        separator=args.get("separator", DEFAULT_SEPARATOR),
    )


async def handle_open_note(args: Dict[str, Any], bear: BearNotes) -> OperationResult:
    return await bear.open_note(args["identifier"])


async def handle_trash_note(args: Dict[str, Any], bear: BearNotes) -> OperationResult:
    return await bear.trash_note(args["identifier"], show_window=args.get("show_window", False))


async def handle_archive_note(args: Dict[str, Any], bear: BearNotes) -> OperationResult:
    return await bear.archive_note(
        args["identifier"], show_window=args.get("show_window", False)
    )


async def handle_delete_tag(args: Dict[str, Any], bear: BearNotes) -> OperationResult:
    return await bear.delete_tag(args["name"], show_window=args.get("show_window", False))


# ---------------------------------------------------------------------------
# Registry dicts
# ---------------------------------------------------------------------------

HANDLERS = {
    "create_note": handle_create_note,
    "update_note": handle_update_note,
    "append_to_note": handle_append_to_note,
    "open_note": handle_open_note,
    "trash_note": handle_trash_note,
    "archive_note": handle_archive_note,
    "delete_tag": handle_delete_tag,
}

VALIDATORS = {
    "create_note": validate_create_note,
    "update_note": validate_update_note,
    "append_to_note": validate_append_to_note,
    "open_note": validate_open_note,
    "trash_note": validate_identifier_action,
    "archive_note": validate_identifier_action,
    "delete_tag": validate_delete_tag,
}
