"""zlib backend implementation for raw DEFLATE payloads."""

from __future__ import annotations

import logging

from ..exceptions import CorruptArchiveError, DecompressionUnsupportedError
from .base import InflateBackend

try:
    import zlib
except ImportError:  # pragma: no cover - interpreters built without zlib
    zlib = None  # type: ignore[assignment]

LOGGER = logging.getLogger(__name__)

# Negative window bits select a raw stream without zlib or gzip framing.
_RAW_DEFLATE_WBITS = -15


def zlib_available() -> bool:
    return zlib is not None


class ZlibBackend(InflateBackend):
    """Backend implementation that uses :mod:`zlib` under the hood."""

    name = "zlib"

    def available(self) -> bool:
        return zlib_available()

    def inflate_raw(self, data: bytes, max_output: int) -> bytes:
        if zlib is None:
            raise DecompressionUnsupportedError(reason=DecompressionUnsupportedError.ENVIRONMENT)

        decompressor = zlib.decompressobj(_RAW_DEFLATE_WBITS)
        try:
            output = decompressor.decompress(data, max_output)
            if decompressor.unconsumed_tail:
                raise CorruptArchiveError(
                    f"Decompressed data exceeds the limit of {max_output} bytes."
                )
            output += decompressor.flush()
        except zlib.error as exc:
            raise CorruptArchiveError(f"Corrupt DEFLATE stream: {exc}") from exc

        if not decompressor.eof:
            raise CorruptArchiveError("DEFLATE stream is truncated before its final block.")
        if len(output) > max_output:
            raise CorruptArchiveError(
                f"Decompressed data exceeds the limit of {max_output} bytes."
            )
        LOGGER.debug("Inflated %d bytes into %d bytes", len(data), len(output))
        return output
