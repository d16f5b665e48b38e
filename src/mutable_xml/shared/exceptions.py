"""Error taxonomy for the mutable XML document model.

Two classes of failure are kept apart:

* Recoverable errors derive from ``MutableXMLError``. They describe bad input or
  a lookup that came up empty, and callers are expected to handle them.
* ``InvariantError`` signals misuse of the API (a value and children on the same
  element). It derives from ``AssertionError`` and not from ``MutableXMLError``,
  so ``except MutableXMLError`` never hides a programming error.
"""

from typing import List, Optional


class MutableXMLError(Exception):
    """Base exception for recoverable document errors."""


class MalformedDocumentError(MutableXMLError):
    """Raised when a token stream does not describe a complete document."""

    def __init__(
        self,
        message: str = "malformed document",
        position: Optional[dict] = None,
        unclosed: Optional[List[str]] = None,
    ) -> None:
        super().__init__(message)
        self.position = position
        self.unclosed = unclosed or []


class ElementNotFoundError(MutableXMLError, LookupError):
    """Raised when an element could not be found in a subtree."""


class InvariantError(AssertionError):
    """Raised when an element would hold both a value and children."""
