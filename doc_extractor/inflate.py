"""Decompression of archive entry payloads."""

from __future__ import annotations

import logging
from typing import Optional

from .backends import InflateBackend, ZlibBackend
from .exceptions import DecompressionUnsupportedError

LOGGER = logging.getLogger(__name__)

__all__ = ["METHOD_STORED", "METHOD_DEFLATE", "DEFAULT_MAX_OUTPUT", "inflate"]

METHOD_STORED = 0
METHOD_DEFLATE = 8

DEFAULT_MAX_OUTPUT = 64 * 1024 * 1024


def inflate(
    method: int,
    data: bytes,
    *,
    backend: Optional[InflateBackend] = None,
    max_output: int = DEFAULT_MAX_OUTPUT,
) -> bytes:
    """Return the decompressed bytes of one entry payload.

    Stored entries are passed through unchanged.  Deflated entries are handed
    to ``backend`` (zlib by default) as a raw stream; only ``data`` is fed to
    it, so decompression can never run past the entry's payload.
    """

    if method == METHOD_STORED:
        return bytes(data)

    if method != METHOD_DEFLATE:
        raise DecompressionUnsupportedError(
            f"Unsupported compression method {method}; only stored (0) and deflate (8) are supported.",
            reason=DecompressionUnsupportedError.DOCUMENT,
        )

    backend = backend or ZlibBackend()
    if not backend.available():
        raise DecompressionUnsupportedError(
            f"The '{backend.name}' decompression backend is not available in this environment.",
            reason=DecompressionUnsupportedError.ENVIRONMENT,
        )

    if not data:
        return b""

    LOGGER.debug("Inflating %d bytes with %s backend", len(data), backend.name)
    return backend.inflate_raw(bytes(data), max_output)
