"""
bear_mcp - Bear notes for MCP clients.

Reads come from Bear's local SQLite store; writes go through Bear's
x-callback-url scheme.
"""

from .config import BearConfig, load_config
from .core import BearNotes
from .types import (
    ActionResult,
    BearError,
    Command,
    DatabaseConnectionError,
    DispatchError,
    Note,
    OperationResult,
    QueryError,
    Tag,
)

try:
    from importlib.metadata import version

    __version__ = version("bear-mcp")
except Exception:
    __version__ = "0.0.0"

__all__ = [
    "BearNotes",
    "BearConfig",
    "load_config",
    "ActionResult",
    "BearError",
    "Command",
    "DatabaseConnectionError",
    "DispatchError",
    "Note",
    "OperationResult",
    "QueryError",
    "Tag",
]
