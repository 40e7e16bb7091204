from __future__ import annotations

import struct
import sys
import zlib
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, Tuple
from zipfile import ZIP_DEFLATED, ZIP_STORED, ZipFile

import pytest
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

W_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '</Types>'
)


def document_xml(*paragraphs: str) -> bytes:
    """Wrap raw ``<w:p>`` inner markup into a WordprocessingML document."""

    body = "".join(f"<w:p>{paragraph}</w:p>" for paragraph in paragraphs)
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W_NAMESPACE}"><w:body>{body}</w:body></w:document>'
    ).encode("utf-8")


def run(text: str) -> str:
    return f'<w:r><w:t xml:space="preserve">{text}</w:t></w:r>'


def raw_deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(9, zlib.DEFLATED, -15)
    return compressor.compress(data) + compressor.flush()


ZipEntrySpec = Tuple[str, bytes, int]


def build_zip(
    entries: Sequence[ZipEntrySpec],
    *,
    total_entries: Optional[int] = None,
    comment: bytes = b"",
) -> bytes:
    """Hand-build a ZIP archive from ``(name, data, method)`` tuples.

    ``method`` 8 deflates ``data``; any other value stores it unchanged under
    that method number.  ``total_entries`` overrides the count written to the
    end-of-central-directory record.
    """

    local_parts = []
    central_parts = []
    offset = 0
    for name, data, method in entries:
        encoded_name = name.encode("utf-8")
        payload = raw_deflate(data) if method == 8 else data
        crc = zlib.crc32(data) & 0xFFFFFFFF
        local = struct.pack(
            "<IHHHHHIIIHH",
            0x04034B50, 20, 0, method, 0, 0, crc, len(payload), len(data), len(encoded_name), 0,
        ) + encoded_name + payload
        central = struct.pack(
            "<IHHHHHHIIIHHHHHII",
            0x02014B50, 20, 20, 0, method, 0, 0, crc, len(payload), len(data),
            len(encoded_name), 0, 0, 0, 0, 0, offset,
        ) + encoded_name
        local_parts.append(local)
        central_parts.append(central)
        offset += len(local)

    central_directory = b"".join(central_parts)
    count = len(entries) if total_entries is None else total_entries
    eocd = struct.pack(
        "<IHHHHIIH",
        0x06054B50, 0, 0, count, count, len(central_directory), offset, len(comment),
    ) + comment
    return b"".join(local_parts) + central_directory + eocd


def build_pdf(*content_lines: str) -> bytes:
    """Return a minimal single-page PDF whose content stream holds ``content_lines``."""

    stream = "\n".join(content_lines).encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for value in offsets:
        out += b"%010d 00000 n \n" % value
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref)
    return bytes(out)


@pytest.fixture()
def docx_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(
        paragraphs: Iterable[str],
        filename: str = "resume.docx",
        compression: int = ZIP_DEFLATED,
    ) -> Path:
        path = tmp_path / filename
        with ZipFile(path, "w", compression=compression) as archive:
            archive.writestr("[Content_Types].xml", CONTENT_TYPES)
            archive.writestr("word/document.xml", document_xml(*paragraphs))
        return path

    return _create


@pytest.fixture()
def sample_docx(docx_factory: Callable[..., Path]) -> Path:
    return docx_factory(
        [
            run("Jane Doe"),
            run("Senior Engineer") + "<w:r><w:tab/></w:r>" + run("2019-2024"),
            "",
            run("Python, Go, Kubernetes"),
        ]
    )


@pytest.fixture()
def stored_docx(docx_factory: Callable[..., Path]) -> Path:
    return docx_factory([run("Stored entry")], filename="stored.docx", compression=ZIP_STORED)


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "resume.pdf"
    path.write_bytes(
        build_pdf(
            "BT /F1 12 Tf 72 720 Td",
            "(Jane Doe) Tj",
            "0 -14 Td",
            "[(Soft) -120 (ware Engineer)] TJ",
            "ET",
        )
    )
    return path


@pytest.fixture()
def blank_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "scan.pdf"
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.add_metadata({"/Producer": "doc-extractor-tests", "/Title": "Scanned"})
    with path.open("wb") as stream:
        writer.write(stream)
    return path


@pytest.fixture()
def sample_rtf(tmp_path: Path) -> Path:
    path = tmp_path / "resume.rtf"
    path.write_bytes(
        b"{\\rtf1\\ansi\\ansicpg1252\\deff0{\\fonttbl{\\f0 Arial;}}"
        b"{\\info{\\title Resume}{\\author Jane}}"
        b"\\f0\\fs24 Jane Doe\\par\n"
        b"Engineer\\tab 2019\\par\n"
        b"}"
    )
    return path
