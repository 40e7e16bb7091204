"""Plain text and markdown decoding."""

from __future__ import annotations

import logging

from .byte_reader import BufferLike
from .types import DecodedText

LOGGER = logging.getLogger(__name__)

__all__ = ["decode_text"]


def decode_text(data: BufferLike) -> DecodedText:
    """Decode UTF-8 bytes (with or without a BOM), replacing invalid sequences."""

    raw = bytes(data)
    try:
        return DecodedText(text=raw.decode("utf-8-sig"))
    except UnicodeDecodeError as exc:
        message = f"Invalid UTF-8 at byte {exc.start}; undecodable bytes were replaced."
        LOGGER.warning("%s", message)
        return DecodedText(text=raw.decode("utf-8-sig", errors="replace"), warnings=[message])
