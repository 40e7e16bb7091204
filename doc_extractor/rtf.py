"""RTF control-word stripping.

A lightweight de-escaper rather than a full RTF reader: destination groups
(font tables, metadata, pictures, ...) are dropped, character escapes are
decoded and every other control word is removed.
"""

from __future__ import annotations

import codecs
import logging
import re
from typing import List, Tuple

from .byte_reader import BufferLike
from .types import DecodedText

LOGGER = logging.getLogger(__name__)

__all__ = ["DEFAULT_CODEPAGE", "strip_rtf", "extract_rtf"]

DEFAULT_CODEPAGE = "cp1252"

# Groups whose content never reaches the page.
_DESTINATIONS = frozenset(
    {
        "author",
        "buptim",
        "colortbl",
        "comment",
        "creatim",
        "datastore",
        "doccomm",
        "filetbl",
        "fonttbl",
        "footer",
        "footerf",
        "footerl",
        "footerr",
        "footnote",
        "header",
        "headerf",
        "headerl",
        "headerr",
        "info",
        "keywords",
        "latentstyles",
        "listoverridetable",
        "listtable",
        "object",
        "operator",
        "pict",
        "printim",
        "revtbl",
        "revtim",
        "rsidtbl",
        "stylesheet",
        "subject",
        "themedata",
        "title",
        "xmlnstbl",
    }
)

_CONTROL_WORDS = {
    "par": "\n",
    "line": "\n",
    "sect": "\n",
    "page": "\n",
    "row": "\n",
    "tab": "\t",
    "cell": "\t",
    "emdash": "\u2014",
    "endash": "\u2013",
    "bullet": "\u2022",
    "lquote": "\u2018",
    "rquote": "\u2019",
    "ldblquote": "\u201c",
    "rdblquote": "\u201d",
}

_CONTROL_SYMBOLS = {
    "\\": "\\",
    "{": "{",
    "}": "}",
    "~": "\u00a0",
    "_": "-",
    "\n": "\n",
    "\r": "\n",
}

_GROUP_START = re.compile(r"\{\\(\*|[a-zA-Z]+)")
_CODEPAGE = re.compile(r"\\ansicpg(\d+)")
_TOKEN = re.compile(
    r"((?:\\'[0-9a-fA-F]{2})+)"
    r"|\\u(-?\d+) ?(?:\\'[0-9a-fA-F]{2}|[^\\{}])?"
    r"|\\([a-zA-Z]+)(-?\d+)? ?"
    r"|\\([^a-zA-Z])"
    r"|[{}\r\n]"
)
_SPACES = re.compile(r" {2,}")
_SPACES_AROUND_NEWLINE = re.compile(r" *\n *")


def _skip_group(source: str, index: int) -> Tuple[int, bool]:
    """Return the index after the group opening at ``index`` and whether it closed."""

    depth = 0
    i = index
    n = len(source)
    while i < n:
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1, True
        i += 1
    return n, False


def _remove_destinations(source: str, warnings: List[str]) -> str:
    out: List[str] = []
    depth = 0
    i = 0
    n = len(source)
    while i < n:
        ch = source[i]
        if ch == "\\":
            out.append(source[i:i + 2])
            i += 2
            continue
        if ch == "{":
            match = _GROUP_START.match(source, i)
            if match and (match.group(1) == "*" or match.group(1) in _DESTINATIONS):
                i, closed = _skip_group(source, i)
                if not closed:
                    warnings.append(f"Unterminated '{match.group(1)}' group; trailing content dropped.")
                # An empty group still terminates a preceding control word.
                out.append("{}")
                continue
            depth += 1
        elif ch == "}":
            depth -= 1
        out.append(ch)
        i += 1
    if depth != 0:
        warnings.append("Unbalanced braces in RTF source.")
    return "".join(out)


def _resolve_codepage(source: str, warnings: List[str]) -> str:
    match = _CODEPAGE.search(source)
    if not match:
        return DEFAULT_CODEPAGE
    candidate = f"cp{match.group(1)}"
    try:
        codecs.lookup(candidate)
    except LookupError:
        warnings.append(f"Unknown code page {match.group(1)}; decoding escapes as {DEFAULT_CODEPAGE}.")
        return DEFAULT_CODEPAGE
    return candidate


def strip_rtf(source: str) -> DecodedText:
    """Convert RTF source text to plain text."""

    warnings: List[str] = []
    if not source.lstrip().startswith("{\\rtf"):
        warnings.append("Input does not start with an RTF header.")
    codepage = _resolve_codepage(source, warnings)
    body = _remove_destinations(source, warnings)

    def replace(match: re.Match) -> str:
        hex_run, code, word, _param, symbol = match.groups()
        if hex_run:
            raw = bytes.fromhex(hex_run.replace("\\'", ""))
            return raw.decode(codepage, errors="replace")
        if code is not None:
            value = int(code)
            if value < 0:
                value += 0x10000
            return chr(value & 0xFFFF)
        if word:
            return _CONTROL_WORDS.get(word, "")
        if symbol:
            return _CONTROL_SYMBOLS.get(symbol, "")
        return ""

    text = _TOKEN.sub(replace, body)
    # \u escapes encode astral characters as surrogate pairs.
    text = text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", errors="replace")
    text = _SPACES.sub(" ", text)
    text = _SPACES_AROUND_NEWLINE.sub("\n", text)
    return DecodedText(text=text.strip(), warnings=warnings)


def extract_rtf(data: BufferLike) -> DecodedText:
    """Decode RTF bytes; RTF is 7-bit, so Latin-1 maps every byte one-to-one."""

    decoded = strip_rtf(bytes(data).decode("latin-1"))
    for message in decoded.warnings:
        LOGGER.warning("%s", message)
    return decoded
