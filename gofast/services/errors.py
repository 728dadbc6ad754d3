"""Error taxonomy for the navigation subsystem.

None of these are fatal to the host. Each one ends the affected operation
("navigation did not happen") and is logged by the component that caught it.
A symbol with no index entries is not an error; resolvers report it as None.
"""

from __future__ import annotations


class NavigationError(RuntimeError):
    """Base class for navigation subsystem failures."""


class WorkspaceBackendError(NavigationError):
    def __init__(self, message: str, *, kind: str = "unknown", path: str = "") -> None:
        super().__init__(message)
        self.kind = kind
        self.path = path


class IndexUnavailable(NavigationError):
    """Raised when a symbol index refresh could not fetch the symbol set."""


class ContentUnavailable(NavigationError):
    """Raised when a document's content could not be read from the backend."""

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path
