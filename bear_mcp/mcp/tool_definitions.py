"""MCP tool schema definitions for Bear note operations.

Each Tool() defines the name, description, and JSON Schema for one MCP tool.
Validators and handlers live in bear_mcp.mcp.handlers.
"""

from mcp.types import Tool

_IDENTIFIER = {
    "type": "string",
    "minLength": 1,
    "description": "Note title or unique identifier",
}

_TAGS = {
    "type": "array",
    "items": {"type": "string"},
    "description": "Tags to add to the note (without # prefix)",
}

_SHOW_WINDOW = {
    "type": "boolean",
    "description": "Whether to show the Bear window after the operation (default: false)",
    "default": False,
}


def _limit(default: int) -> dict:
    return {
        "type": "integer",
        "description": f"Maximum number of results to return (default: {default}, range: 1-100)",
        "default": default,
        "minimum": 1,
        "maximum": 100,
    }


TOOLS = [
    Tool(
        name="create_note",
        description="Create a new note in Bear",
        inputSchema={
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Title of the note",
                },
                "content": {
                    "type": "string",
                    "description": "Content of the note (supports Markdown)",
                },
                "tags": _TAGS,
            },
            "required": ["title", "content"],
        },
    ),
    Tool(
        name="search_notes",
        description="Search for notes in Bear and return results with content",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Text to find in note titles or bodies (case-insensitive)",
                },
                "limit": _limit(10),
            },
            "required": ["query"],
        },
    ),
    Tool(
        name="get_note",
        description="Get a specific note by title or ID",
        inputSchema={
            "type": "object",
            "properties": {"identifier": _IDENTIFIER},
            "required": ["identifier"],
        },
    ),
    Tool(
        name="open_note",
        description="Open a note in the Bear app",
        inputSchema={
            "type": "object",
            "properties": {"identifier": _IDENTIFIER},
            "required": ["identifier"],
        },
    ),
    Tool(
        name="list_tags",
        description="List all tags in Bear",
        inputSchema={
            "type": "object",
            "properties": {},
        },
    ),
    Tool(
        name="update_note",
        description="Update an existing note in Bear by title or ID (replaces entire content)",
        inputSchema={
            "type": "object",
            "properties": {
                "identifier": {
                    **_IDENTIFIER,
                    "description": "Note title or unique identifier to update",
                },
                "title": {
                    "type": "string",
                    "description": "New title for the note (optional)",
                },
                "content": {
                    "type": "string",
                    "description": "New content for the note (replaces existing content)",
                },
                "tags": _TAGS,
            },
            "required": ["identifier", "content"],
        },
    ),
    Tool(
        name="append_to_note",
        description="Append content to an existing note in Bear",
        inputSchema={
            "type": "object",
            "properties": {
                "identifier": {
                    **_IDENTIFIER,
                    "description": "Note title or unique identifier to append to",
                },
                "content": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Content to append to the note",
                },
                "separator": {
                    "type": "string",
                    "description": "Separator inserted before the appended content (default: blank line)",
                    "default": "\n\n",
                },
            },
            "required": ["identifier", "content"],
        },
    ),
    Tool(
        name="get_notes_by_tag",
        description="Get all notes with a specific tag",
        inputSchema={
            "type": "object",
            "properties": {
                "tag": {
                    "type": "string",
                    "minLength": 1,
                    "description": "The tag name to search for (without # prefix)",
                },
                "limit": _limit(50),
            },
            "required": ["tag"],
        },
    ),
    Tool(
        name="trash_note",
        description="Move a note to trash",
        inputSchema={
            "type": "object",
            "properties": {
                "identifier": {
                    **_IDENTIFIER,
                    "description": "Note title or unique identifier to trash",
                },
                "show_window": _SHOW_WINDOW,
            },
            "required": ["identifier"],
        },
    ),
    Tool(
        name="archive_note",
        description="Archive a note",
        inputSchema={
            "type": "object",
            "properties": {
                "identifier": {
                    **_IDENTIFIER,
                    "description": "Note title or unique identifier to archive",
                },
                "show_window": _SHOW_WINDOW,
            },
            "required": ["identifier"],
        },
    ),
    Tool(
        name="delete_tag",
        description="Delete a tag from Bear",
        inputSchema={
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "minLength": 1,
                    "description": "The tag name to delete (without # prefix)",
                },
                "show_window": _SHOW_WINDOW,
            },
            "required": ["name"],
        },
    ),
    Tool(
        name="get_recent_notes",
        description="Get notes modified in the last N days",
        inputSchema={
            "type": "object",
            "properties": {
                "days": {
                    "type": "integer",
                    "description": "Number of days to look back (default: 7, range: 1-365)",
                    "default": 7,
                    "minimum": 1,
                    "maximum": 365,
                },
                "limit": _limit(50),
            },
        },
    ),
    Tool(
        name="get_note_backlinks",
        description="Get notes that link to a given note",
        inputSchema={
            "type": "object",
            "properties": {
                "identifier": {
                    **_IDENTIFIER,
                    "description": "Note title or unique identifier to find backlinks for",
                },
            },
            "required": ["identifier"],
        },
    ),
]

TOOLS_BY_NAME = {tool.name: tool for tool in TOOLS}
