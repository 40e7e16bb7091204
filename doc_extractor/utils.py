"""Utility helpers for Doc Extractor."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, Union

from .exceptions import UnsupportedFormatError
from .types import DocumentFormat

PathLike = Union[str, os.PathLike[str]]

SUFFIX_FORMATS: Dict[str, DocumentFormat] = {
    ".txt": DocumentFormat.TEXT,
    ".text": DocumentFormat.TEXT,
    ".md": DocumentFormat.MARKDOWN,
    ".markdown": DocumentFormat.MARKDOWN,
    ".rtf": DocumentFormat.RTF,
    ".pdf": DocumentFormat.PDF,
    ".docx": DocumentFormat.DOCX,
}


def configure_logging(level: int = logging.INFO) -> None:
    """Configure package-wide logging."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def to_path(path: PathLike) -> Path:
    """Normalize an input path to :class:`Path`."""
    return Path(path).expanduser().resolve()


@contextmanager
def time_block(logger: logging.Logger, message: str) -> Iterator[None]:
    """Context manager that logs the execution time of a code block."""
    start = datetime.now(tz=timezone.utc)
    logger.debug("Starting %s", message)
    try:
        yield
    finally:
        end = datetime.now(tz=timezone.utc)
        elapsed = (end - start).total_seconds()
        logger.info("%s completed in %.2fs", message, elapsed)


def format_from_filename(name: PathLike) -> DocumentFormat:
    """Map a file name suffix to its :class:`DocumentFormat`."""

    suffix = Path(name).suffix.lower()
    try:
        return SUFFIX_FORMATS[suffix]
    except KeyError:
        raise UnsupportedFormatError(
            f"Unsupported file type '{suffix or Path(name).name}'. "
            "Please upload a TXT, MD, RTF, PDF, or DOCX file."
        ) from None


def is_supported_file(name: PathLike) -> bool:
    return Path(name).suffix.lower() in SUFFIX_FORMATS


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "500 KB")
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"
