"""Backend protocol for raw DEFLATE decompression."""

from __future__ import annotations

from typing import Protocol


class InflateBackend(Protocol):
    """Protocol for a "decompress raw DEFLATE byte range" capability.

    Implementations receive exactly the compressed payload of one entry and
    must return the complete decompressed bytes or raise.  They never read
    beyond ``data``.
    """

    name: str

    def available(self) -> bool:
        """Return ``True`` when the host environment can run this backend."""

    def inflate_raw(self, data: bytes, max_output: int) -> bytes:
        """Decompress ``data`` producing at most ``max_output`` bytes."""
