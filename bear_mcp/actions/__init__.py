"""Write path: Bear x-callback-url command building and dispatch."""

from .dispatch import ActionDispatcher
from .url import CommandBuilder, command_url, encode_params, format_tags, yes_no

__all__ = [
    "ActionDispatcher",
    "CommandBuilder",
    "command_url",
    "encode_params",
    "format_tags",
    "yes_no",
]
