"""Hand x-callback-url commands to the host's URL opener.

A successful dispatch means the opener accepted the URL. It says nothing
about whether Bear carried the action out. Liveness (:meth:`is_bear_running`)
is a separate check; dispatch never consults it.
"""

import asyncio
import logging
from typing import Sequence, Tuple, Union

from bear_mcp.actions.url import command_url
from bear_mcp.types import ActionResult, Command, DispatchError

logger = logging.getLogger(__name__)

DEFAULT_OPENER = ("open",)
DEFAULT_LIVENESS = ("pgrep", "-x", "Bear")


class ActionDispatcher:
    """Delivers commands with ``open <url>`` (macOS LaunchServices)."""

    def __init__(
        self,
        opener: Sequence[str] = DEFAULT_OPENER,
        liveness_probe: Sequence[str] = DEFAULT_LIVENESS,
    ):
        self.opener = tuple(opener)
        self.liveness_probe = tuple(liveness_probe)

    async def _exec(self, *argv: str) -> Tuple[int, str, str]:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        return (
            proc.returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def _hand_off(self, url: str) -> None:
        if not url.startswith("bear://"):
            raise DispatchError(f"Not a Bear URL: {url[:40]}", url=url)
        try:
            returncode, _, stderr = await self._exec(*self.opener, url)
        except OSError as e:
            raise DispatchError(f"Cannot run {self.opener[0]}: {e}", url=url) from e
        if returncode != 0:
            message = stderr.strip() or f"{self.opener[0]} exited with status {returncode}"
            raise DispatchError(message, url=url)

    async def dispatch(self, command: Union[Command, str]) -> ActionResult:
        """Hand off a command; failures come back as ``ActionResult(success=False)``."""
        url = command_url(command) if isinstance(command, Command) else command
        verb = command.verb if isinstance(command, Command) else "url"
        try:
            await self._hand_off(url)
        except DispatchError as e:
            logger.warning(f"Dispatch of '{verb}' failed: {e}")
            return ActionResult(success=False, error=str(e))
        logger.debug(f"Dispatched '{verb}'")
        return ActionResult(success=True)

    async def is_bear_running(self) -> bool:
        """True if a Bear process is running. Any probe failure reads as False."""
        try:
            returncode, stdout, _ = await self._exec(*self.liveness_probe)
        except OSError as e:
            logger.debug(f"Liveness probe failed: {e}")
            return False
        return returncode == 0 and bool(stdout.strip())
