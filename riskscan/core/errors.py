from __future__ import annotations


class RiskscanError(Exception):
    """Base class for scanner errors."""


class ConfigurationError(RiskscanError, ValueError):
    """Invalid rule or scanner configuration. Raised before any file is scanned."""


class TraversalError(RiskscanError, OSError):
    """A directory entry could not be listed or accessed during the walk."""

    def __init__(self, path, cause: BaseException | None = None) -> None:
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Unable to traverse {path}{detail}")


class ReadError(RiskscanError, OSError):
    """A file could not be opened or decoded as text."""

    def __init__(self, path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to read {path}: {reason}")
