"""Exception hierarchy for aptertree.

Every error raised by the library derives from ApterTreeError. Each kind
also inherits the builtin it corresponds to, so callers can keep writing
``except IndexError`` or ``except ValueError``.
"""

from typing import Any, Optional


class ApterTreeError(Exception):
    """Base class for all aptertree errors."""
    pass


class OutOfBoundsError(ApterTreeError, IndexError):
    """Raised when an index does not refer to a present node."""

    def __init__(self, index: Any, size: int, message: Optional[str] = None):
        self.index = index
        self.size = size
        if message is None:
            message = f"Node index {index!r} out of bounds for tree of size {size}"
        super().__init__(message)


class EmptyTreeError(OutOfBoundsError):
    """Raised when the root of an empty tree is requested."""

    def __init__(self):
        super().__init__(None, 0, "Tree is empty and has no root")


class InvalidParentError(ApterTreeError, ValueError):
    """Raised when a parent reference would break the tree invariants."""

    def __init__(self, parent: Any, message: str):
        self.parent = parent
        super().__init__(message)


class NotALeafError(ApterTreeError, ValueError):
    """Raised when removing a node that still has children."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Node {index} has children; only leaves can be removed")


class TreeStructureError(ApterTreeError, ValueError):
    """Raised when the value and parent sequences do not line up."""
    pass


class ConfigurationError(ApterTreeError):
    """Raised when a traversal configuration is invalid."""
    pass
