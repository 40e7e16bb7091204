"""
Custom exceptions for Doc Extractor.

This module defines all custom exceptions used throughout the library.
Every failure of a single extraction is terminal: the input is deterministic,
so callers should report the error instead of retrying.
"""

from typing import Optional


class ExtractionError(Exception):
    """Base exception for all Doc Extractor errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown text extraction error occurred."


class CorruptArchiveError(ExtractionError):
    """Raised when a ZIP structural invariant is violated."""

    @property
    def default_message(self) -> str:
        return "Invalid or corrupted archive structure."


class OutOfBoundsError(CorruptArchiveError):
    """Raised when a header field points outside of the buffer."""

    @property
    def default_message(self) -> str:
        return "Read past the end of the buffer."


class MissingEntryError(ExtractionError):
    """Raised when a required entry is absent from a well-formed archive."""

    def __init__(self, message: str = "", entry_name: Optional[str] = None) -> None:
        self.entry_name = entry_name
        super().__init__(message)

    @property
    def default_message(self) -> str:
        if self.entry_name:
            return f"Archive does not contain '{self.entry_name}'."
        return "Archive does not contain the requested entry."


class DecompressionUnsupportedError(ExtractionError):
    """Raised when an entry cannot be decompressed.

    ``reason`` is ``"document"`` when the file uses a compression method we do
    not support, and ``"environment"`` when the interpreter lacks a raw
    DEFLATE implementation.
    """

    DOCUMENT = "document"
    ENVIRONMENT = "environment"

    def __init__(self, message: str = "", reason: str = DOCUMENT) -> None:
        self.reason = reason
        super().__init__(message)

    @property
    def default_message(self) -> str:
        if self.reason == self.ENVIRONMENT:
            return "Decompression is not available in this environment (zlib is missing)."
        return "The document uses an unsupported compression method."


class CorruptDocumentError(ExtractionError):
    """Raised when decompressed document XML cannot be parsed."""

    @property
    def default_message(self) -> str:
        return "Unable to parse document contents."


class EmptyExtractionError(ExtractionError):
    """Raised when a file decoded cleanly but contains no readable text."""

    @property
    def default_message(self) -> str:
        return (
            "No readable text was found in the document. "
            "It may be image-only; please try a different file."
        )


class UnsupportedFormatError(ExtractionError):
    """Raised when a format hint or file suffix is not supported."""

    @property
    def default_message(self) -> str:
        return "Unsupported file type. Supported types: TXT, MD, RTF, PDF, DOCX."
