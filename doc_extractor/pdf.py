"""PDF text-showing operator tokenizer.

The raw file is treated as a single-byte stream and scanned for literal
strings shown with ``Tj`` and string arrays shown with ``TJ``.  Content
streams are not decompressed and fonts are not interpreted, so the output is
best-effort.  Lines follow byte order in the file, which for multi-column
layouts is not necessarily the visual reading order.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .byte_reader import BufferLike
from .types import DecodedText

LOGGER = logging.getLogger(__name__)

__all__ = ["decode_literal", "tokenize", "extract_pdf"]

_WHITESPACE = "\x00\t\n\r\f "
_DELIMITERS = "()<>[]{}/%"
_NUMBER_CHARS = "+-.0123456789"
_OCTAL = "01234567"
_HEX_CHARS = "0123456789abcdefABCDEF"

_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "f": "\f",
    "b": "\b",
    "(": "(",
    ")": ")",
    "\\": "\\",
}

_HEADER_WINDOW = 1024


class _UnterminatedString(Exception):
    pass


def _skip_ws(text: str, index: int) -> int:
    while index < len(text) and text[index] in _WHITESPACE:
        index += 1
    return index


def _match_operator(text: str, index: int, operator: str) -> Optional[int]:
    """Return the index after ``operator`` when it follows ``index``."""

    index = _skip_ws(text, index)
    end = index + len(operator)
    if text[index:end] != operator:
        return None
    if end < len(text) and text[end] not in _WHITESPACE and text[end] not in _DELIMITERS:
        return None
    return end


def _read_escape(text: str, index: int) -> Tuple[str, int]:
    """Decode the escape whose backslash sits at ``index``."""

    i = index + 1
    n = len(text)
    if i >= n:
        return "", n
    esc = text[i]
    if esc in _ESCAPES:
        return _ESCAPES[esc], i + 1
    if esc in _OCTAL:
        j = i
        while j < n and j < i + 3 and text[j] in _OCTAL:
            j += 1
        return chr(int(text[i:j], 8) & 0xFF), j
    if esc == "\r":
        i += 1
        if i < n and text[i] == "\n":
            i += 1
        return "", i
    if esc == "\n":
        return "", i + 1
    return esc, i + 1


def _read_literal(text: str, index: int, nested: bool) -> Tuple[str, int]:
    """Read the literal string opening at ``text[index] == "("``.

    Returns the decoded body and the index after the closing parenthesis.
    With ``nested`` set, balanced unescaped parentheses are part of the body.
    """

    out: List[str] = []
    depth = 1
    i = index + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            value, i = _read_escape(text, i)
            out.append(value)
            continue
        if ch == "(" and nested:
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return "".join(out), i + 1
        out.append(ch)
        i += 1
    raise _UnterminatedString(index)


def decode_literal(body: str) -> str:
    """Decode the escapes of a literal string body (without its parentheses)."""

    out: List[str] = []
    i = 0
    while i < len(body):
        if body[i] == "\\":
            value, i = _read_escape(body, i)
            out.append(value)
        else:
            out.append(body[i])
            i += 1
    return "".join(out)


class _Tokenizer:
    def __init__(self, text: str) -> None:
        self.text = text
        self.lines: List[str] = []
        self.warnings: List[str] = []
        # Cleared after the first unterminated nested literal; flat scanning
        # keeps the total work linear on hostile input.
        self.nested = True

    def literal(self, index: int) -> Tuple[str, int]:
        if self.nested:
            try:
                return _read_literal(self.text, index, nested=True)
            except _UnterminatedString:
                self.nested = False
                self.warnings.append(
                    f"Unbalanced parentheses in string at offset {index}; nested strings are no longer tracked."
                )
        return _read_literal(self.text, index, nested=False)

    def array(self, index: int) -> Tuple[Optional[List[str]], int]:
        """Read ``[ ... ]``; returns ``None`` segments when the array holds other tokens."""

        text = self.text
        segments: List[str] = []
        i = index + 1
        while True:
            i = _skip_ws(text, i)
            if i >= len(text):
                return None, i
            ch = text[i]
            if ch == "]":
                return segments, i + 1
            if ch == "(":
                value, i = self.literal(i)
                segments.append(value)
            elif ch in _NUMBER_CHARS:
                i += 1
                while i < len(text) and text[i] in _NUMBER_CHARS:
                    i += 1
            elif ch == "<":
                # Hex strings are glyph codes; skipped like kerning numbers.
                i += 1
                while i < len(text) and (text[i] in _HEX_CHARS or text[i] in _WHITESPACE):
                    i += 1
                if i >= len(text) or text[i] != ">":
                    return None, i
                i += 1
            else:
                return None, i

    def run(self) -> List[str]:
        text = self.text
        i = 0
        n = len(text)
        while i < n:
            ch = text[i]
            if ch == "(":
                value, end = self.literal(i)
                operator_end = _match_operator(text, end, "Tj")
                if operator_end is not None:
                    self.lines.append(value)
                    end = operator_end
                i = end
            elif ch == "[":
                segments, end = self.array(i)
                if segments is not None:
                    operator_end = _match_operator(text, end, "TJ")
                    if operator_end is not None:
                        if segments:
                            self.lines.append("".join(segments))
                        end = operator_end
                i = max(end, i + 1)
            else:
                i += 1
        return self.lines


def tokenize(text: str, warnings: Optional[List[str]] = None) -> List[str]:
    """Return one line per ``Tj``/``TJ`` token found in ``text``, in byte order."""

    tokenizer = _Tokenizer(text)
    try:
        lines = tokenizer.run()
    except _UnterminatedString as exc:
        lines = tokenizer.lines
        tokenizer.warnings.append(
            f"Unterminated string at offset {exc.args[0]}; the rest of the file was ignored."
        )
    if warnings is not None:
        warnings.extend(tokenizer.warnings)
    return lines


def _has_pdf_header(text: str) -> bool:
    return "%PDF-" in text[:_HEADER_WINDOW]


def extract_pdf(data: BufferLike) -> DecodedText:
    """Decode PDF bytes into one line per text-showing token."""

    text = bytes(data).decode("latin-1")
    warnings: List[str] = []
    lines = tokenize(text, warnings)
    for message in warnings:
        LOGGER.warning("%s", message)
    LOGGER.debug("Found %d text-showing tokens", len(lines))

    if lines:
        return DecodedText(text="\n".join(lines), warnings=warnings)

    if _has_pdf_header(text):
        message = "No text-showing operators found; the PDF may contain only images."
        LOGGER.warning("%s", message)
        warnings.append(message)
        return DecodedText(text="", warnings=warnings)

    message = "No PDF text operators found; returning the file contents as plain text."
    LOGGER.warning("%s", message)
    warnings.append(message)
    return DecodedText(text=text.replace("\r\n", "\n"), warnings=warnings)
