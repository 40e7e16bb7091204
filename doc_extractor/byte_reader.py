"""Bounds-checked little-endian access over an immutable byte buffer."""

from __future__ import annotations

import struct
from typing import Union

from .exceptions import OutOfBoundsError

__all__ = ["ByteReader"]

BufferLike = Union[bytes, bytearray, memoryview]

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")


class ByteReader:
    """Read integers and slices at arbitrary offsets without trusting them.

    Offsets usually come from header fields of untrusted files, so every
    access is validated before the buffer is touched.
    """

    __slots__ = ("_data",)

    def __init__(self, data: BufferLike) -> None:
        self._data = bytes(data)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def data(self) -> bytes:
        return self._data

    def require(self, offset: int, length: int) -> None:
        """Raise :class:`OutOfBoundsError` unless ``[offset, offset+length)`` is readable."""

        if offset < 0 or length < 0 or offset + length > len(self._data):
            raise OutOfBoundsError(
                f"Read of {length} bytes at offset {offset} exceeds buffer of {len(self._data)} bytes."
            )

    def u16(self, offset: int) -> int:
        self.require(offset, 2)
        return _U16.unpack_from(self._data, offset)[0]

    def u32(self, offset: int) -> int:
        self.require(offset, 4)
        return _U32.unpack_from(self._data, offset)[0]

    def slice(self, offset: int, length: int) -> bytes:
        self.require(offset, length)
        return self._data[offset:offset + length]

    def matches(self, offset: int, signature: bytes) -> bool:
        """Return ``True`` when ``signature`` is present at ``offset``."""

        if offset < 0 or offset + len(signature) > len(self._data):
            return False
        return self._data[offset:offset + len(signature)] == signature

    def find_backward(self, signature: bytes, start: int, stop: int = 0) -> int:
        """Scan from ``start`` down to ``stop`` (inclusive) for ``signature``.

        Returns the offset of the last occurrence in that window, or ``-1``.
        """

        start = min(start, len(self._data) - len(signature))
        stop = max(stop, 0)
        if start < stop:
            return -1
        return self._data.rfind(signature, stop, start + len(signature))
