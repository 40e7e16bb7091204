"""Minimal ZIP central-directory walker.

Only what is needed to pull a single entry out of an Office Open XML
package: locate the end-of-central-directory record, walk the directory,
and resolve the entry's local header and compressed payload.  Every offset
read from the archive is validated through :class:`ByteReader`.
"""

from __future__ import annotations

import logging
from typing import Iterator, List

from .byte_reader import BufferLike, ByteReader
from .exceptions import CorruptArchiveError, MissingEntryError
from .types import (
    ZipCentralDirectoryEntry,
    ZipEndOfCentralDirectory,
    ZipEntryPayload,
    ZipLocalFileHeader,
)

LOGGER = logging.getLogger(__name__)

__all__ = [
    "DOCX_MAIN_DOCUMENT",
    "find_end_of_central_directory",
    "iter_central_directory",
    "find_entry",
    "read_local_header",
    "locate_entry",
    "list_entries",
]

DOCX_MAIN_DOCUMENT = "word/document.xml"

EOCD_SIGNATURE = b"PK\x05\x06"
CENTRAL_DIRECTORY_SIGNATURE = b"PK\x01\x02"
LOCAL_HEADER_SIGNATURE = b"PK\x03\x04"

EOCD_SIZE = 22
MAX_COMMENT_SIZE = 0xFFFF
CENTRAL_DIRECTORY_HEADER_SIZE = 46
LOCAL_HEADER_SIZE = 30

_UTF8_NAME_FLAG = 0x0800


def _decode_name(raw: bytes, flags: int) -> str:
    if flags & _UTF8_NAME_FLAG:
        return raw.decode("utf-8", errors="replace")
    return raw.decode("cp437")


def find_end_of_central_directory(reader: ByteReader) -> ZipEndOfCentralDirectory:
    """Locate the end-of-central-directory record near the end of the buffer."""

    if len(reader) < EOCD_SIZE:
        raise CorruptArchiveError("Buffer is too small to be a ZIP archive.")

    start = len(reader) - EOCD_SIZE
    stop = max(0, start - MAX_COMMENT_SIZE)
    offset = reader.find_backward(EOCD_SIGNATURE, start, stop)
    if offset < 0:
        raise CorruptArchiveError("End of central directory record not found.")

    eocd = ZipEndOfCentralDirectory(
        offset=offset,
        central_directory_offset=reader.u32(offset + 16),
        central_directory_size=reader.u32(offset + 12),
        total_entries=reader.u16(offset + 10),
    )
    LOGGER.debug(
        "End of central directory at %d: %d entries starting at %d",
        eocd.offset,
        eocd.total_entries,
        eocd.central_directory_offset,
    )
    return eocd


def _read_central_record(reader: ByteReader, offset: int) -> ZipCentralDirectoryEntry:
    if not reader.matches(offset, CENTRAL_DIRECTORY_SIGNATURE):
        raise CorruptArchiveError(f"Invalid central directory record at offset {offset}.")

    reader.require(offset, CENTRAL_DIRECTORY_HEADER_SIZE)
    flags = reader.u16(offset + 8)
    name_length = reader.u16(offset + 28)
    extra_length = reader.u16(offset + 30)
    comment_length = reader.u16(offset + 32)
    name_start = offset + CENTRAL_DIRECTORY_HEADER_SIZE
    file_name = _decode_name(reader.slice(name_start, name_length), flags)

    record_length = CENTRAL_DIRECTORY_HEADER_SIZE + name_length + extra_length + comment_length
    reader.require(offset, record_length)

    return ZipCentralDirectoryEntry(
        file_name=file_name,
        compression_method=reader.u16(offset + 10),
        compressed_size=reader.u32(offset + 20),
        uncompressed_size=reader.u32(offset + 24),
        local_header_offset=reader.u32(offset + 42),
        record_offset=offset,
        record_length=record_length,
    )


def iter_central_directory(
    reader: ByteReader, eocd: ZipEndOfCentralDirectory
) -> Iterator[ZipCentralDirectoryEntry]:
    """Yield exactly ``eocd.total_entries`` records in directory order.

    A missing record signature at any step, or a walk that does not end
    exactly at ``eocd.central_directory_end``, means the declared entry count
    or one of the variable-length fields is wrong and raises
    :class:`CorruptArchiveError`.  The end check runs once every record has
    been yielded.
    """

    offset = eocd.central_directory_offset
    for index in range(eocd.total_entries):
        try:
            entry = _read_central_record(reader, offset)
        except CorruptArchiveError as exc:
            raise CorruptArchiveError(
                f"Central directory entry {index + 1} of {eocd.total_entries} is invalid: {exc}"
            ) from exc
        yield entry
        offset = entry.next_record_offset

    if offset != eocd.central_directory_end:
        raise CorruptArchiveError(
            f"Central directory declares {eocd.total_entries} entries in "
            f"{eocd.central_directory_size} bytes, but the records end at offset {offset} "
            f"instead of {eocd.central_directory_end}."
        )


def find_entry(reader: ByteReader, name: str) -> ZipCentralDirectoryEntry:
    """Return the first central-directory entry named ``name``."""

    eocd = find_end_of_central_directory(reader)
    for entry in iter_central_directory(reader, eocd):
        if entry.file_name == name:
            LOGGER.debug(
                "Found %s: method=%d size=%d header=%d",
                name,
                entry.compression_method,
                entry.compressed_size,
                entry.local_header_offset,
            )
            return entry
    raise MissingEntryError(entry_name=name)


def read_local_header(reader: ByteReader, entry: ZipCentralDirectoryEntry) -> ZipLocalFileHeader:
    """Read and validate the local file header referenced by ``entry``."""

    offset = entry.local_header_offset
    if not reader.matches(offset, LOCAL_HEADER_SIGNATURE):
        raise CorruptArchiveError(f"Invalid local file header for '{entry.file_name}'.")
    reader.require(offset, LOCAL_HEADER_SIZE)
    return ZipLocalFileHeader(
        offset=offset,
        name_length=reader.u16(offset + 26),
        extra_length=reader.u16(offset + 28),
    )


def locate_entry(data: BufferLike, name: str = DOCX_MAIN_DOCUMENT) -> ZipEntryPayload:
    """Resolve ``name`` to its compression method and exact payload bytes."""

    reader = ByteReader(data)
    entry = find_entry(reader, name)
    header = read_local_header(reader, entry)
    try:
        payload = reader.slice(header.data_offset, entry.compressed_size)
    except CorruptArchiveError as exc:
        raise CorruptArchiveError(f"Payload of '{name}' lies outside the archive: {exc}") from exc
    return ZipEntryPayload(entry=entry, header=header, data=payload)


def list_entries(data: BufferLike) -> List[str]:
    """Return all entry names in directory order."""

    reader = ByteReader(data)
    eocd = find_end_of_central_directory(reader)
    return [entry.file_name for entry in iter_central_directory(reader, eocd)]
