"""Handler registry for MCP tools.

Merges HANDLERS and VALIDATORS from the read and write sub-modules into unified dicts.
"""

from typing import Callable, Dict

from bear_mcp.mcp.handlers.actions import HANDLERS as _ACTIONS_H
from bear_mcp.mcp.handlers.actions import VALIDATORS as _ACTIONS_V
from bear_mcp.mcp.handlers.notes import HANDLERS as _NOTES_H
from bear_mcp.mcp.handlers.notes import VALIDATORS as _NOTES_V

HANDLERS: Dict[str, Callable] = {
    **_NOTES_H,
    **_ACTIONS_H,
}

VALIDATORS: Dict[str, Callable] = {
    **_NOTES_V,
    **_ACTIONS_V,
}
