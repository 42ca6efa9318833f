"""Runtime configuration for bear_mcp.

Everything comes from environment variables:

- ``BEAR_DB_PATH``: path to Bear's ``database.sqlite`` (default: Bear's group container)
- ``BEAR_API_TOKEN``: token appended to every x-callback-url command
- ``BEAR_PREFER_API``: ``true`` to prefer the URL API over direct reads where both work
- ``BEAR_LOG_LEVEL``: logging level name (default ``WARNING``)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

SERVER_NAME = "bear-mcp-server"

DEFAULT_DB_PATH = (
    Path.home()
    / "Library"
    / "Group Containers"
    / "9K33E3U3T4.net.shinyfrog.bear"
    / "Application Data"
    / "database.sqlite"
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _server_version() -> str:
    try:
        from importlib.metadata import version

        return version("bear-mcp")
    except Exception:
        return "0.0.0"


@dataclass
class BearConfig:
    """Resolved settings for one server process."""

    database_path: Path = DEFAULT_DB_PATH
    api_token: Optional[str] = None
    prefer_api_token: bool = False
    log_level: str = "WARNING"
    server_name: str = SERVER_NAME
    server_version: str = "0.0.0"


def load_config(environ: Optional[Mapping[str, str]] = None) -> BearConfig:
    """Build a :class:`BearConfig` from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ

    db_path = env.get("BEAR_DB_PATH")
    database_path = Path(db_path).expanduser() if db_path else DEFAULT_DB_PATH

    # Empty token means "no token"
    api_token = env.get("BEAR_API_TOKEN") or None

    prefer_api = env.get("BEAR_PREFER_API", "").strip().lower() in _TRUE_VALUES

    log_level = env.get("BEAR_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
    if not isinstance(logging.getLevelName(log_level), int):
        logger.warning(f"Unknown BEAR_LOG_LEVEL {log_level!r}, using WARNING")
        log_level = "WARNING"

    return BearConfig(
        database_path=database_path,
        api_token=api_token,
        prefer_api_token=prefer_api,
        log_level=log_level,
        server_version=_server_version(),
    )
