"""Exceptions surfaced by the import pipeline.

Only :class:`UnsupportedFileTypeError` can escape the parse → preview →
execute stages. Row-level problems are dropped silently by the parsers.
"""

from __future__ import annotations


class UnsupportedFileTypeError(ValueError):
    """Raised when neither the filename nor the content identifies a format."""

    def __init__(self, filename: str) -> None:
        super().__init__(f"Unsupported file type: {filename}")
        self.filename = filename


class FileTooLargeError(ValueError):
    """Raised by file ingest when a statement exceeds the configured size."""

    def __init__(self, path: str, size: int, max_bytes: int) -> None:
        mib = max_bytes / (1024 * 1024)
        super().__init__(f"File too large: {path} ({size} bytes). Maximum size is {mib:g} MB.")
        self.path = path
        self.size = size
        self.max_bytes = max_bytes


__all__ = ["UnsupportedFileTypeError", "FileTooLargeError"]
