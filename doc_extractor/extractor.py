"""Text extraction entry points built on the format decoders."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Union

from .byte_reader import BufferLike
from .docx import extract_docx
from .exceptions import EmptyExtractionError, UnsupportedFormatError
from .pdf import extract_pdf
from .plaintext import decode_text
from .rtf import extract_rtf
from .sanitizer import sanitize
from .types import DecodedText, DocumentFormat, ExtractedText, RawDocument
from .utils import PathLike, format_from_filename, time_block, to_path

LOGGER = logging.getLogger(__name__)

FormatHint = Union[DocumentFormat, str]
Decoder = Callable[[bytes], DecodedText]

DECODERS: Dict[DocumentFormat, Decoder] = {
    DocumentFormat.TEXT: decode_text,
    DocumentFormat.MARKDOWN: decode_text,
    DocumentFormat.RTF: extract_rtf,
    DocumentFormat.PDF: extract_pdf,
    DocumentFormat.DOCX: extract_docx,
}


def extract_document(document: RawDocument) -> ExtractedText:
    """Decode ``document`` with the decoder for its declared format and sanitize the result."""

    decoder = DECODERS.get(document.format)
    if decoder is None:
        raise UnsupportedFormatError(f"No decoder registered for format '{document.format}'.")

    with time_block(LOGGER, f"{document.format.value} extraction of {len(document.data)} bytes"):
        decoded = decoder(document.data)
        body = sanitize(decoded.text)

    if not body:
        raise EmptyExtractionError()
    return ExtractedText(body=body, warnings=list(decoded.warnings), format=document.format)


def extract(data: BufferLike, format_hint: FormatHint) -> ExtractedText:
    """Extract normalized plain text from ``data`` declared as ``format_hint``.

    Raises:
        CorruptArchiveError: DOCX container is structurally invalid
        MissingEntryError: DOCX package has no main document
        DecompressionUnsupportedError: Compression method or environment unsupported
        CorruptDocumentError: DOCX XML is malformed
        EmptyExtractionError: No readable text was found
        UnsupportedFormatError: ``format_hint`` is unknown
    """

    document = RawDocument(data=bytes(data), format=DocumentFormat.parse(format_hint))
    return extract_document(document)


def extract_file(path: PathLike, format_hint: Optional[FormatHint] = None) -> ExtractedText:
    """Read ``path`` and extract its text, deriving the format from the suffix when not given."""

    source = to_path(path)
    document_format = (
        DocumentFormat.parse(format_hint) if format_hint is not None else format_from_filename(source)
    )
    if not source.is_file():
        raise FileNotFoundError(f"File not found: {path}")

    LOGGER.info("Extracting %s as %s", source, document_format.value)
    result = extract_document(RawDocument(data=source.read_bytes(), format=document_format))
    result.source = source.name
    return result


__all__ = ["DECODERS", "extract", "extract_document", "extract_file"]
