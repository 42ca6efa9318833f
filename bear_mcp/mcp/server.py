"""
Bear MCP Server - Bear notes for Claude and other MCP clients.

Exposes Bear's notes as MCP tools. Reads query Bear's local SQLite store
directly; writes and app actions go through Bear's x-callback-url scheme.

Features:
- JSON Schema validation of every tool call, then per-tool sanitization
- Uniform ``{"success": ..., "data" | "error": ...}`` JSON results
- Errors mapped to short messages; details go to the log (stderr)

Usage:
    bear-mcp serve  # Start MCP server (stdio transport)
"""

import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

from bear_mcp.config import SERVER_NAME, BearConfig, load_config
from bear_mcp.core import BearNotes
from bear_mcp.mcp.handlers import HANDLERS, VALIDATORS
from bear_mcp.mcp.tool_definitions import TOOLS, TOOLS_BY_NAME
from bear_mcp.types import OperationResult, QueryError

logger = logging.getLogger(__name__)

mcp = Server(SERVER_NAME)

_schema_validators: Dict[str, Draft7Validator] = {
    tool.name: Draft7Validator(tool.inputSchema) for tool in TOOLS
}


def get_bear() -> BearNotes:
    """Get or create the BearNotes instance for this process."""
    if not hasattr(get_bear, "_instance"):
        get_bear._instance = BearNotes(load_config())  # type: ignore[attr-defined]
    return get_bear._instance  # type: ignore[attr-defined]


def set_bear(bear: Optional[BearNotes]) -> None:
    """Replace (or with None, drop) the cached BearNotes instance."""
    if hasattr(get_bear, "_instance"):
        get_bear._instance.close()  # type: ignore[attr-defined]
        delattr(get_bear, "_instance")
    if bear is not None:
        get_bear._instance = bear  # type: ignore[attr-defined]


# =============================================================================
# INPUT VALIDATION & SANITIZATION
# =============================================================================


def _check_schema(name: str, arguments: Dict[str, Any]) -> None:
    validator = _schema_validators.get(name)
    if validator is None:
        return
    errors = sorted(validator.iter_errors(arguments), key=lambda err: list(err.path))
    if errors:
        first = errors[0]
        path = ".".join(str(part) for part in first.path) or "(root)"
        raise ValueError(f"Schema validation failed at {path}: {first.message}")


def validate_tool_input(name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and sanitize MCP tool inputs."""
    try:
        if not isinstance(name, str):
            raise ValueError(f"tool name must be a string, got {type(name).__name__}")
        if not name:
            raise ValueError("tool name must not be empty")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise ValueError(f"arguments must be an object, got {type(arguments).__name__}")

        validator = VALIDATORS.get(name)
        if validator is None or name not in TOOLS_BY_NAME:
            raise ValueError(f"Unknown tool: {name}")

        _check_schema(name, arguments)
        return validator(arguments)

    except (ValueError, TypeError) as e:
        logger.warning(f"Input validation failed for tool {name}: {e}")
        raise ValueError(f"Invalid input: {str(e)}")


def render_result(result: OperationResult) -> str:
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)


def handle_tool_error(e: Exception, tool_name: str, arguments: Dict[str, Any]) -> List[TextContent]:
    """Turn an exception into a short text result."""
    if isinstance(e, ValueError):
        logger.warning(f"Invalid input for tool {tool_name}: {e}")
        return [TextContent(type="text", text=f"Invalid input: {str(e)}")]

    elif isinstance(e, ConnectionError):
        logger.error(f"Bear database unavailable for tool {tool_name}: {e}")
        return [TextContent(type="text", text=f"Bear database unavailable: {str(e)}")]

    elif isinstance(e, QueryError):
        logger.error(f"Query failed for tool {tool_name}: {e}")
        return [TextContent(type="text", text="Bear query failed")]

    else:
        argument_keys = list(arguments.keys()) if isinstance(arguments, dict) else []
        logger.error(
            f"Internal error in tool {tool_name}",
            extra={
                "tool_name": tool_name,
                "arguments_keys": argument_keys,
                "error_type": type(e).__name__,
                "error_message": str(e),
            },
            exc_info=True,
        )
        return [TextContent(type="text", text="Internal server error")]


# =============================================================================
# MCP PROTOCOL HANDLERS
# =============================================================================


@mcp.list_tools()
async def list_tools() -> list[Tool]:
    """List the Bear note tools."""
    return list(TOOLS)


@mcp.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
    """Handle tool calls with validation and error handling.

    ``isError`` is set for failed operations (a rejected write handoff) and
    for raised errors.
    """
    try:
        sanitized_args = validate_tool_input(name, arguments)
        handler = HANDLERS[name]
        result = await handler(sanitized_args, get_bear())
    except Exception as e:
        return CallToolResult(content=handle_tool_error(e, name, arguments), isError=True)
    return CallToolResult(
        content=[TextContent(type="text", text=render_result(result))],
        isError=not result.success,
    )


async def run_server():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await mcp.run(
            read_stream,
            write_stream,
            mcp.create_initialization_options(),
        )


def configure_logging(config: BearConfig) -> None:
    # stdout carries the MCP stream
    logging.basicConfig(
        level=config.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(config: Optional[BearConfig] = None) -> None:
    """Entry point for the MCP server.

    Verifies the Bear store exists before serving; exits with status 1 if not.
    """
    config = config or load_config()
    configure_logging(config)

    bear = BearNotes(config)
    check = bear.verify()
    if not check["exists"]:
        logger.error(f"Error: {check['error']}")
        sys.exit(1)

    set_bear(bear)
    logger.info(f"{config.server_name} {config.server_version} running on stdio")
    try:
        asyncio.run(run_server())
    finally:
        set_bear(None)


if __name__ == "__main__":
    main()
