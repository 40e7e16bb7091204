"""DOCX paragraph text assembly.

The main document part is pulled out of the package with the ZIP walker,
decompressed with :func:`~doc_extractor.inflate.inflate`, and walked as an
XML tree.  Only paragraph run text is reconstructed; styles, images, headers
and tracked changes are ignored.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional
from xml.etree.ElementTree import Element, ParseError, fromstring

from .backends import InflateBackend
from .byte_reader import BufferLike
from .exceptions import CorruptDocumentError
from .inflate import inflate
from .types import DecodedText
from .zip_reader import DOCX_MAIN_DOCUMENT, locate_entry

LOGGER = logging.getLogger(__name__)

__all__ = ["XML_NS", "assemble_paragraphs", "paragraph_text", "extract_docx"]

XML_NS = {
    "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
}

_W = "{%s}" % XML_NS["w"]
W_P = f"{_W}p"
W_T = f"{_W}t"
W_TAB = f"{_W}tab"
W_BR = f"{_W}br"
W_CR = f"{_W}cr"

# Property containers: <w:tabs><w:tab/></w:tabs> inside pPr are tab stops, not text.
_SKIPPED = {f"{_W}pPr", f"{_W}rPr", f"{_W}sectPr"}

_MULTI_NEWLINE = re.compile(r"\n{2,}")


def _has_text(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def _collect(element: Element, parts: List[str]) -> None:
    for child in element:
        tag = child.tag
        if tag in _SKIPPED:
            pass
        elif tag == W_T:
            if child.text:
                parts.append(child.text)
        elif tag == W_TAB:
            parts.append("\t")
        elif tag in (W_BR, W_CR):
            parts.append("\n")
        else:
            if _has_text(child.text):
                parts.append(child.text)  # type: ignore[arg-type]
            _collect(child, parts)
        if _has_text(child.tail):
            parts.append(child.tail)  # type: ignore[arg-type]


def paragraph_text(paragraph: Element) -> str:
    """Return the text of one ``w:p`` element."""

    parts: List[str] = []
    if _has_text(paragraph.text):
        parts.append(paragraph.text)  # type: ignore[arg-type]
    _collect(paragraph, parts)
    return _MULTI_NEWLINE.sub("\n", "".join(parts)).rstrip()


def assemble_paragraphs(xml_bytes: bytes) -> str:
    """Join the non-empty paragraphs of a WordprocessingML document."""

    try:
        root = fromstring(xml_bytes)
    except (ParseError, LookupError, ValueError) as exc:
        # LookupError: the XML declaration names an unknown encoding.
        raise CorruptDocumentError(f"Unable to parse DOCX contents: {exc}") from exc

    lines = []
    for paragraph in root.iter(W_P):
        text = paragraph_text(paragraph)
        if text.strip():
            lines.append(text)
    LOGGER.debug("Assembled %d non-empty paragraphs", len(lines))
    return "\n".join(lines)


def extract_docx(data: BufferLike, *, backend: Optional[InflateBackend] = None) -> DecodedText:
    """Decode a DOCX package into raw paragraph text."""

    payload = locate_entry(data, DOCX_MAIN_DOCUMENT)
    xml_bytes = inflate(payload.compression_method, payload.data, backend=backend)
    warnings: List[str] = []
    declared = payload.entry.uncompressed_size
    if declared and declared != len(xml_bytes):
        message = (
            f"'{DOCX_MAIN_DOCUMENT}' declares {declared} bytes but decompressed to {len(xml_bytes)} bytes."
        )
        LOGGER.warning("%s", message)
        warnings.append(message)
    return DecodedText(text=assemble_paragraphs(xml_bytes), warnings=warnings)
