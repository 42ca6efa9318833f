"""
bear-mcp CLI - run the MCP server or query Bear from a terminal.

Usage:
    bear-mcp [serve]
    bear-mcp doctor [--json]
    bear-mcp search QUERY [--limit N] [--json]
    bear-mcp get IDENTIFIER [--json]
    bear-mcp recent [--days N] [--limit N] [--json]
    bear-mcp tags [--json]
    bear-mcp backlinks IDENTIFIER [--json]
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List

from bear_mcp import __version__
from bear_mcp.config import load_config
from bear_mcp.core import BearNotes
from bear_mcp.types import DatabaseConnectionError, OperationResult

logger = logging.getLogger(__name__)


def _print_notes(notes: List[Dict[str, Any]]) -> None:
    if not notes:
        print("No notes found.")
        return
    for i, note in enumerate(notes, 1):
        modified = (note.get("modified_at") or "")[:16].replace("T", " ")
        pin = " 📌" if note.get("is_pinned") else ""
        print(f"{i}. {note['title']}{pin}")
        print(f"   {note['id']}  {modified}")


def _emit(result: OperationResult, as_json: bool) -> Dict[str, Any]:
    if as_json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return result.data or {}


def cmd_doctor(args, bear: BearNotes) -> int:
    """Check the store file and whether Bear is running."""
    status = asyncio.run(bear.status())
    if args.json:
        print(json.dumps(status, indent=2))
    else:
        print(f"Database:  {status['database_path']}")
        if status["database_exists"]:
            print("           ✓ found")
        else:
            print(f"           ✗ {status['database_error']}")
        print(f"Bear:      {'✓ running' if status['bear_running'] else '✗ not running'}")
        print(f"API token: {'configured' if status['token_configured'] else 'not set'}")
    return 0 if status["database_exists"] else 1


def cmd_search(args, bear: BearNotes) -> int:
    data = _emit(asyncio.run(bear.search_notes(args.query, args.limit)), args.json)
    if not args.json:
        print(f"Found {data['count']} note(s) for '{data['query']}':\n")
        _print_notes(data["notes"])
    return 0


def cmd_get(args, bear: BearNotes) -> int:
    data = _emit(asyncio.run(bear.get_note(args.identifier)), args.json)
    if not data.get("found"):
        if not args.json:
            print(f"Note '{args.identifier}' not found.")
        return 1
    if not args.json:
        note = data["note"]
        print(f"# {note['title']}  ({note['id']})\n")
        print(note["content"])
    return 0


def cmd_recent(args, bear: BearNotes) -> int:
    data = _emit(asyncio.run(bear.get_recent_notes(args.days, args.limit)), args.json)
    if not args.json:
        print(f"{data['count']} note(s) modified in the last {data['days']} day(s):\n")
        _print_notes(data["notes"])
    return 0


def cmd_tags(args, bear: BearNotes) -> int:
    data = _emit(asyncio.run(bear.list_tags()), args.json)
    if not args.json:
        for tag in data["tags"]:
            print(f"#{tag}")
    return 0


def cmd_backlinks(args, bear: BearNotes) -> int:
    data = _emit(asyncio.run(bear.get_note_backlinks(args.identifier)), args.json)
    if not args.json:
        print(f"{data['count']} note(s) link to '{data['target_note']}':\n")
        _print_notes(data["notes"])
    return 0


def cmd_serve(args) -> int:
    """Start MCP server."""
    from bear_mcp.mcp.server import main as mcp_main

    mcp_main()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bear-mcp",
        description="Bear notes over the Model Context Protocol",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Start MCP server (stdio transport)")

    p_doctor = subparsers.add_parser("doctor", help="Check the Bear database and app")
    p_doctor.add_argument("--json", "-j", action="store_true")

    p_search = subparsers.add_parser("search", help="Search note titles and bodies")
    p_search.add_argument("query", help="Text to search for")
    p_search.add_argument("--limit", "-l", type=int, default=10)
    p_search.add_argument("--json", "-j", action="store_true")

    p_get = subparsers.add_parser("get", help="Show one note")
    p_get.add_argument("identifier", help="Note title or unique identifier")
    p_get.add_argument("--json", "-j", action="store_true")

    p_recent = subparsers.add_parser("recent", help="Notes modified recently")
    p_recent.add_argument("--days", "-d", type=int, default=7)
    p_recent.add_argument("--limit", "-l", type=int, default=50)
    p_recent.add_argument("--json", "-j", action="store_true")

    p_tags = subparsers.add_parser("tags", help="List all tags")
    p_tags.add_argument("--json", "-j", action="store_true")

    p_backlinks = subparsers.add_parser("backlinks", help="Notes linking to a note")
    p_backlinks.add_argument("identifier", help="Note title or unique identifier")
    p_backlinks.add_argument("--json", "-j", action="store_true")

    return parser


COMMANDS = {
    "doctor": cmd_doctor,
    "search": cmd_search,
    "get": cmd_get,
    "recent": cmd_recent,
    "tags": cmd_tags,
    "backlinks": cmd_backlinks,
}


def main(argv=None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in (None, "serve"):
        sys.exit(cmd_serve(args))

    config = load_config()
    logging.basicConfig(level=config.log_level, stream=sys.stderr)

    bear = BearNotes(config)
    try:
        sys.exit(COMMANDS[args.command](args, bear))
    except DatabaseConnectionError as e:
        logger.error(str(e))
        sys.exit(1)
    except (ValueError, TypeError) as e:
        logger.error(f"Input validation error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)
    finally:
        bear.close()


if __name__ == "__main__":
    main()
