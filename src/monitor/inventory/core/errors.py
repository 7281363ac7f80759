# monitor/inventory/core/errors.py
"""
Error taxonomy for the inventory client.

Structural problems (bad path text, illegal derivations, missing required
arguments) raise immediately. Absence of data is not an error for the list
operations; ``NotFound`` exists for callers that want to surface it.
"""
from __future__ import annotations


class InventoryError(Exception):
    """Base class for all inventory client errors."""


class MalformedPathError(InventoryError, ValueError):
    """Raised when canonical path text cannot be parsed or violates ordering."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed canonical path '{path}': {reason}")


class PathDerivationError(InventoryError, ValueError):
    """Raised when a path cannot be moved up or down."""


class TerminalPathError(PathDerivationError):
    """Raised when deriving a child from a path that ends in a terminal kind."""


class RootPathError(PathDerivationError):
    """Raised when moving above the root segment of a path."""


class MissingArgumentError(InventoryError, ValueError):
    """Raised when a required identifying argument is absent."""


class MissingFeedError(MissingArgumentError):
    def __init__(self, message: str = "Feed id must be given"):
        super().__init__(message)


class MissingResourceTypeError(MissingArgumentError):
    def __init__(self, message: str = "Resource type must be given"):
        super().__init__(message)


class NotFound(InventoryError):
    pass


class TransportError(InventoryError):
    """Raised when the snapshot store cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class SnapshotDecodeError(TransportError):
    """Raised when a stored blob is not base64/gzip/JSON as expected."""
