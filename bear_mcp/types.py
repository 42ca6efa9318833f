"""
Shared types for bear_mcp.

Note and Tag are read-side projections built fresh from the Bear store on
every query. Command is the write-side value handed to the URL-scheme
dispatcher. The two sides never share a mutable model; they meet only in
OperationResult, the uniform shape the facade returns to the MCP layer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

UNTITLED = "Untitled"


# === Errors ===


class BearError(Exception):
    """Base for all bear_mcp errors."""

    pass


class DatabaseConnectionError(BearError, ConnectionError):
    """Raised when the Bear store file is missing or cannot be opened."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class QueryError(BearError):
    """Raised when the store opened but a read query failed."""

    pass


class DispatchError(BearError):
    """Raised when a command could not be handed off to the host."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


# === Read side ===


@dataclass(frozen=True)
class Note:
    """A Bear note as read from the store."""

    pk: int
    identifier: str
    title: str = UNTITLED
    text: str = ""
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    is_trashed: bool = False
    is_archived: bool = False
    is_pinned: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.identifier,
            "title": self.title,
            "content": self.text,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "modified_at": self.modified_at.isoformat() if self.modified_at else None,
            "is_pinned": self.is_pinned,
            "is_archived": self.is_archived,
            "is_trashed": self.is_trashed,
        }


@dataclass(frozen=True)
class Tag:
    """A Bear tag. ``title`` is the value used in commands."""

    title: str
    identifier: str

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "id": self.identifier}


# === Write side ===


@dataclass(frozen=True)
class Command:
    """An x-callback-url action: verb plus ordered parameters.

    Parameters whose value is None are omitted from the encoded URL.
    """

    verb: str
    params: Dict[str, Any] = field(default_factory=dict)
    token: Optional[str] = None


@dataclass(frozen=True)
class ActionResult:
    """Outcome of handing a command to the host.

    ``success`` only means the handoff worked; Bear may still have ignored
    the command.
    """

    success: bool
    error: Optional[str] = None


# === Facade result ===


@dataclass
class OperationResult:
    """Uniform result of every facade operation."""

    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[Dict[str, Any]] = None) -> "OperationResult":
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: str) -> "OperationResult":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success}
        if self.success:
            result["data"] = self.data if self.data is not None else {}
        else:
            result["error"] = self.error
        return result
