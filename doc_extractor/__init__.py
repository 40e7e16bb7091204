"""
Doc Extractor - Plain text extraction for uploaded resumes and job descriptions.

The decoders are written from scratch on top of the standard library: a
bounds-checked ZIP walker and raw DEFLATE adapter for DOCX, a text-showing
operator tokenizer for PDF, and a control-word stripper for RTF.  Every
result goes through the same sanitizer before it is returned.

Quick Start:
    >>> from doc_extractor import extract
    >>> result = extract(b"(Hello) Tj", "pdf")
    >>> result.body
    'Hello'

Main Functions:
    - extract: Extract text from bytes with a declared format
    - extract_file: Extract text from a file, deriving the format from its suffix
    - sanitize: Normalize extracted text

Data Classes:
    - ExtractedText: Sanitized body plus recoverable warnings
    - BatchResult: Result of a batch extraction

Exceptions:
    - ExtractionError: Base exception
    - CorruptArchiveError: Invalid ZIP structure
    - MissingEntryError: Required archive entry is absent
    - DecompressionUnsupportedError: Unsupported compression method or environment
    - CorruptDocumentError: Malformed document XML
    - EmptyExtractionError: No readable text found
    - UnsupportedFormatError: Unknown format or file suffix

For CLI usage, use the 'doc-extractor' command after installation.
"""

__version__ = "1.0.0"
__author__ = "Doc Extractor Contributors"
__license__ = "MIT"

# Core functions
from doc_extractor.extractor import extract, extract_document, extract_file
from doc_extractor.sanitizer import sanitize
from doc_extractor.batch import BatchExtractor

# Data types
from doc_extractor.types import BatchResult, DocumentFormat, ExtractedText, RawDocument

# Exceptions
from doc_extractor.exceptions import (
    ExtractionError,
    CorruptArchiveError,
    OutOfBoundsError,
    MissingEntryError,
    DecompressionUnsupportedError,
    CorruptDocumentError,
    EmptyExtractionError,
    UnsupportedFormatError,
)

# Utility functions
from doc_extractor.utils import format_from_filename, format_file_size

__all__ = [
    # Main functions
    "extract",
    "extract_document",
    "extract_file",
    "sanitize",
    "BatchExtractor",
    # Data types
    "BatchResult",
    "DocumentFormat",
    "ExtractedText",
    "RawDocument",
    # Exceptions
    "ExtractionError",
    "CorruptArchiveError",
    "OutOfBoundsError",
    "MissingEntryError",
    "DecompressionUnsupportedError",
    "CorruptDocumentError",
    "EmptyExtractionError",
    "UnsupportedFormatError",
    # Utility functions
    "format_from_filename",
    "format_file_size",
    # Version info
    "__version__",
]
