"""Package-specific exception types."""

from __future__ import annotations


class MarkupError(ValueError):
    """Base class for errors raised around markup rendering.

    Malformed markup never raises; these errors cover the document as a whole
    (its size, its source file) rather than its syntax.
    """


class DocumentTooLargeError(MarkupError):
    """Raised when a document exceeds the configured maximum size.

    Args:
        size: Size of the document in characters.
        limit: Maximum allowed size in characters.
    """

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Document is {self.size} characters long (limit: {self.limit})")
