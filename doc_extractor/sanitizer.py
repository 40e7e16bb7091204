"""Final normalization pass shared by every decoder."""

from __future__ import annotations

import re

__all__ = ["sanitize", "is_page_number_line", "is_metadata_line"]

_LINE_BREAKS = re.compile(r"\r\n|[\r\f\v\u2028\u2029]")
_TRAILING_WHITESPACE = re.compile(r"[ \t\u00a0]+$", re.MULTILINE)
_BLANK_RUNS = re.compile(r"\n{3,}")

_PAGE_NUMBER = re.compile(
    r"^\s*(?:"
    r"(?:page|pg\.?)\s*\d{1,4}(?:\s*(?:of|/)\s*\d{1,4})?"
    r"|\d{1,3}\s*(?:of|/)\s*\d{1,4}"
    r"|[-\u2013\u2014]?\s*\d{1,3}\s*[-\u2013\u2014]?"
    r")\s*$",
    re.IGNORECASE,
)

_METADATA_LABEL = re.compile(
    r"^\s*(?:title|author|subject|keywords|creator|producer|creationdate|moddate)\s*:",
    re.IGNORECASE,
)


def is_page_number_line(line: str) -> bool:
    return bool(_PAGE_NUMBER.match(line))


def is_metadata_line(line: str) -> bool:
    return bool(_METADATA_LABEL.match(line))


def sanitize(text: str) -> str:
    """Normalize extracted text.

    Line endings become ``\\n``, NUL bytes and trailing whitespace are
    removed, standalone page numbers and document metadata labels are
    dropped, blank lines are collapsed to at most one, and the result is
    trimmed.  ``sanitize(sanitize(x)) == sanitize(x)`` for every ``x``.
    """

    text = _LINE_BREAKS.sub("\n", text.replace("\x00", ""))
    text = _TRAILING_WHITESPACE.sub("", text)
    lines = [
        line
        for line in text.split("\n")
        if not (line.strip() and (is_page_number_line(line) or is_metadata_line(line)))
    ]
    text = _BLANK_RUNS.sub("\n\n", "\n".join(lines))
    return text.strip()
