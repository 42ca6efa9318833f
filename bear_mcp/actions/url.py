"""Build Bear x-callback-url commands.

Rules:
- every value is percent-encoded (spaces become ``%20``, ``#`` becomes ``%23``)
- parameters whose value is None are dropped, never sent empty
- booleans become ``yes`` / ``no``
- sequences are treated as tag lists and flattened to ``#a #b``
- a configured token is appended as ``token`` to every command
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote

from bear_mcp.types import Command

SCHEME = "bear"
CALLBACK_HOST = "x-callback-url"


def format_tags(tags: Optional[Iterable[str]]) -> Optional[str]:
    """Flatten tag names to Bear's ``#tag #other`` form.

    Leading ``#`` already present on a name is not doubled. Returns None for
    a missing or empty list so the parameter is omitted.
    """
    if tags is None:
        return None
    names = [t.strip().lstrip("#") for t in tags]
    names = [n for n in names if n]
    if not names:
        return None
    return " ".join(f"#{n}" for n in names)


def yes_no(value: bool) -> str:
    return "yes" if value else "no"


def _serialize(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return yes_no(value)
    if isinstance(value, (list, tuple)):
        return format_tags(value)
    return str(value)


def encode_params(params: Dict[str, Any], token: Optional[str] = None) -> str:
    """Encode ``params`` (in order) as a query string, token last."""
    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        serialized = _serialize(value)
        if serialized is None:
            continue
        pairs.append((key, serialized))
    if token:
        pairs.append(("token", token))
    return "&".join(f"{quote(k, safe='')}={quote(v, safe='')}" for k, v in pairs)


def command_url(command: Command) -> str:
    """Render a Command as ``bear://x-callback-url/<verb>?<params>``."""
    base = f"{SCHEME}://{CALLBACK_HOST}/{quote(command.verb, safe='-')}"
    query = encode_params(command.params, command.token)
    return f"{base}?{query}" if query else base


class CommandBuilder:
    """Creates Commands, injecting the configured API token."""

    def __init__(self, token: Optional[str] = None):
        self.token = token or None

    def build(self, verb: str, params: Optional[Dict[str, Any]] = None) -> Command:
        if not verb:
            raise ValueError("verb cannot be empty")
        return Command(verb=verb, params=dict(params or {}), token=self.token)

    def build_url(self, verb: str, params: Optional[Dict[str, Any]] = None) -> str:
        return command_url(self.build(verb, params))
