"""
Type definitions and dataclasses for Doc Extractor.

This module defines data structures used throughout the library.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .exceptions import UnsupportedFormatError


class DocumentFormat(str, Enum):
    """Declared format of an uploaded document."""

    TEXT = "text"
    MARKDOWN = "markdown"
    RTF = "rtf"
    PDF = "pdf"
    DOCX = "docx"

    @classmethod
    def parse(cls, value: "DocumentFormat | str") -> "DocumentFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedFormatError(f"Unsupported document format: '{value}'") from None


@dataclass(frozen=True)
class RawDocument:
    """An immutable byte sequence plus the format declared by the caller."""

    data: bytes
    format: DocumentFormat


@dataclass(frozen=True)
class ZipEndOfCentralDirectory:
    """
    End-of-central-directory record.

    Attributes:
        offset: Position of the record's signature in the buffer
        central_directory_offset: Position of the first central-directory record
        central_directory_size: Byte length of all central-directory records
        total_entries: Number of central-directory records
    """
    offset: int
    central_directory_offset: int
    central_directory_size: int
    total_entries: int

    @property
    def central_directory_end(self) -> int:
        return self.central_directory_offset + self.central_directory_size


@dataclass(frozen=True)
class ZipCentralDirectoryEntry:
    """
    One central-directory record.

    Attributes:
        file_name: Entry path inside the archive
        compression_method: 0 (stored), 8 (deflate), anything else is unsupported
        compressed_size: Size of the payload in bytes
        uncompressed_size: Declared size after decompression
        local_header_offset: Position of the entry's local file header
        record_offset: Position of this record in the buffer
        record_length: Total length of this record including variable fields
    """
    file_name: str
    compression_method: int
    compressed_size: int
    uncompressed_size: int
    local_header_offset: int
    record_offset: int
    record_length: int

    @property
    def next_record_offset(self) -> int:
        return self.record_offset + self.record_length


@dataclass(frozen=True)
class ZipLocalFileHeader:
    """Local file header preceding an entry's payload."""

    offset: int
    name_length: int
    extra_length: int

    @property
    def data_offset(self) -> int:
        return self.offset + 30 + self.name_length + self.extra_length


@dataclass(frozen=True)
class ZipEntryPayload:
    """The exact compressed byte range of one archive entry."""

    entry: ZipCentralDirectoryEntry
    header: ZipLocalFileHeader
    data: bytes

    @property
    def compression_method(self) -> int:
        return self.entry.compression_method


@dataclass
class DecodedText:
    """Raw decoder output before sanitizing."""

    text: str
    warnings: List[str] = field(default_factory=list)


@dataclass
class ExtractedText:
    """
    Result of an extraction.

    Attributes:
        body: Sanitized plain text
        warnings: Recoverable anomalies noticed while decoding
        format: Format the document was decoded as
        source: File name when the document came from disk
    """
    body: str
    warnings: List[str] = field(default_factory=list)
    format: Optional[DocumentFormat] = None
    source: Optional[str] = None

    @property
    def line_count(self) -> int:
        return len(self.body.splitlines()) if self.body else 0

    def __str__(self) -> str:
        """String representation of the result."""
        return f"ExtractedText(lines={self.line_count}, warnings={len(self.warnings)})"


@dataclass
class BatchResult:
    """
    Result of a batch extraction.

    Attributes:
        total: Total number of documents found
        success: Number of successfully extracted documents
        failure: Number of failed documents
        skipped: Number of documents skipped because the manifest marks them done
        results: List of individual results
        manifest_path: Location of the manifest file
    """
    total: int
    success: int
    failure: int
    skipped: int = 0
    results: List[Dict[str, Any]] = field(default_factory=list)
    manifest_path: Optional[str] = None

    def __str__(self) -> str:
        """String representation of the result."""
        return (
            "BatchResult(total={total}, success={success}, failure={failure}, "
            "skipped={skipped})"
        ).format(
            total=self.total,
            success=self.success,
            failure=self.failure,
            skipped=self.skipped,
        )
