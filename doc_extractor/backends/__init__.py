"""Decompression backends for Doc Extractor."""

from .base import InflateBackend
from .zlib_backend import ZlibBackend, zlib_available

__all__ = [
    "InflateBackend",
    "ZlibBackend",
    "zlib_available",
]
