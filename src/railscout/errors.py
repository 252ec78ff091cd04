"""Exception types raised by railscout."""

from __future__ import annotations

__all__ = ["NetworkParseError", "RailScoutError", "UnknownNodeError"]


class RailScoutError(Exception):
    """Base class for railscout errors."""


class UnknownNodeError(RailScoutError, LookupError):
    """A node id passed to an operation is not part of the graph."""

    def __init__(self, node_id: str, role: str = "node") -> None:
        self.node_id = node_id
        self.role = role
        super().__init__(f"{role.capitalize()} node '{node_id}' not found")


class NetworkParseError(RailScoutError, ValueError):
    """A network or survey document is structurally invalid."""

    def __init__(self, message: str, location: str | None = None) -> None:
        self.location = location
        if location:
            message = f"{location}: {message}"
        super().__init__(message)
