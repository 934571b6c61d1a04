"""
Errors raised while moving images between sources and sinks.
"""

from __future__ import annotations


class UnsupportedFormatError(OSError):
    """No reader or writer is available for an image format."""

    UNKNOWN = "<unknown>"

    def __init__(self, format_name: str | None, message: str | None = None) -> None:
        self.format_name = format_name if format_name is not None else self.UNKNOWN
        super().__init__(message or f"Unsupported image format: {self.format_name}")
