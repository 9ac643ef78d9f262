"""Exception hierarchy shared by the store, builder and views."""

from __future__ import annotations


class GroveError(Exception):
    """Base class for every error raised by grove."""


class ProtocolViolationError(GroveError, RuntimeError):
    """An unbalanced `open`/`close`/`build` sequence on a builder session."""


class StoreBusyError(GroveError, RuntimeError):
    """The store is held exclusively by a live builder session."""


class StaleViewError(GroveError, RuntimeError):
    """A view was used after the store it borrows from was appended to or held by a builder."""


class ReadOnlyViewError(GroveError, TypeError):
    """A value write was attempted through a read-only view."""


class InvalidBoundaryError(GroveError, ValueError):
    """A node width does not describe a valid subtree range."""

    def __init__(self, message: str, *, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class LiteralSyntaxError(GroveError, ValueError):
    """Malformed bracket/arrow literal text."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)
        self.offset = offset


__all__ = [
    "GroveError",
    "ProtocolViolationError",
    "StoreBusyError",
    "StaleViewError",
    "ReadOnlyViewError",
    "InvalidBoundaryError",
    "LiteralSyntaxError",
]
