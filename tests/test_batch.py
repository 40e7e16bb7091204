from __future__ import annotations

import json
from pathlib import Path

import pytest

from doc_extractor.batch import MANIFEST_NAME, BatchExtractor
from doc_extractor.exceptions import CorruptArchiveError
from doc_extractor.manifest import BatchManifest, EntryStatus

from conftest import build_pdf, build_zip, document_xml, run


@pytest.fixture()
def input_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "in"
    directory.mkdir()
    (directory / "a_resume.docx").write_bytes(
        build_zip([("word/document.xml", document_xml(run("Jane Doe"), run("Engineer")), 8)])
    )
    (directory / "b_job.pdf").write_bytes(build_pdf("(Backend Developer) Tj"))
    (directory / "c_broken.docx").write_bytes(b"not a zip archive at all")
    (directory / "d_notes.md").write_text("# Notes\n\nRemote friendly", encoding="utf-8")
    (directory / "e_image.png").write_bytes(b"\x89PNG\r\n")
    return directory


def test_manifest_round_trip(tmp_path):
    path = tmp_path / "manifest.json"
    manifest = BatchManifest.load(path)
    manifest.begin("a.docx", "10:1")
    manifest.complete("a.docx", output="out/a.txt", format="docx", lines=2, warnings=["warning"])
    manifest.begin("b.pdf")
    manifest.fail("b.pdf", CorruptArchiveError("boom"))
    manifest.save()

    payload = json.loads(path.read_text())
    assert payload["version"] == BatchManifest.VERSION
    assert payload["documents"]["a.docx"]["status"] == "success"

    loaded = BatchManifest.load(path)
    assert len(loaded) == 2
    assert "a.docx" in loaded
    assert loaded.is_done("a.docx", "10:1")
    assert not loaded.is_done("a.docx", "11:1")
    assert not loaded.is_done("b.pdf")
    assert loaded.record("a.docx").warnings == ["warning"]
    assert loaded.record("b.pdf").status is EntryStatus.FAILURE
    assert loaded.record("b.pdf").error_type == "CorruptArchiveError"
    assert loaded.summary() == {"pending": 0, "in-progress": 0, "success": 1, "failure": 1}

def test_manifest_rejects_unknown_version(tmp_path):
    path = tmp_path / "manifest.json"
    path.write_text(json.dumps({"version": 99, "documents": {}}))

    with pytest.raises(ValueError):
        BatchManifest.load(path)


def test_manifest_load_without_create(tmp_path):
    with pytest.raises(FileNotFoundError):
        BatchManifest.load(tmp_path / "missing.json", create=False)


def test_find_documents_skips_unsupported(input_dir):
    documents = BatchExtractor().find_documents(str(input_dir))
    assert [Path(document).name for document in documents] == [
        "a_resume.docx",
        "b_job.pdf",
        "c_broken.docx",
        "d_notes.md",
    ]


def test_find_documents_requires_directory(tmp_path):
    extractor = BatchExtractor()
    with pytest.raises(FileNotFoundError):
        extractor.find_documents(str(tmp_path / "missing"))

    file_path = tmp_path / "file.txt"
    file_path.write_text("x")
    with pytest.raises(NotADirectoryError):
        extractor.find_documents(str(file_path))


def test_process_directory(input_dir, tmp_path):
    output_dir = tmp_path / "out"
    calls = []

    result = BatchExtractor().process_directory(
        str(input_dir), str(output_dir), progress_callback=lambda *args: calls.append(args)
    )

    assert (result.total, result.success, result.failure, result.skipped) == (4, 3, 1, 0)
    assert [call[1:] for call in calls] == [(1, 4), (2, 4), (3, 4), (4, 4)]
    assert (output_dir / "a_resume.docx.txt").read_text(encoding="utf-8") == "Jane Doe\nEngineer\n"
    assert (output_dir / "b_job.pdf.txt").read_text(encoding="utf-8") == "Backend Developer\n"
    assert (output_dir / "d_notes.md.txt").read_text(encoding="utf-8") == "# Notes\n\nRemote friendly\n"
    assert not (output_dir / "c_broken.docx.txt").exists()

    failure = next(entry for entry in result.results if entry["status"] == "failure")
    assert failure["error_type"] == "CorruptArchiveError"
    assert Path(result.manifest_path) == output_dir / MANIFEST_NAME


def test_resume_skips_completed_documents(input_dir, tmp_path):
    output_dir = tmp_path / "out"
    BatchExtractor().process_directory(str(input_dir), str(output_dir))

    result = BatchExtractor().process_directory(str(input_dir), str(output_dir))

    assert (result.success, result.failure, result.skipped) == (0, 1, 3)
    manifest = BatchManifest.load(output_dir / MANIFEST_NAME)
    broken = next(record for name, record in manifest.records.items() if name.endswith("c_broken.docx"))
    assert broken.attempts == 2


def test_no_resume_reprocesses_everything(input_dir, tmp_path):
    output_dir = tmp_path / "out"
    BatchExtractor().process_directory(str(input_dir), str(output_dir))

    result = BatchExtractor(resume=False).process_directory(str(input_dir), str(output_dir))

    assert (result.success, result.failure, result.skipped) == (3, 1, 0)


def test_custom_manifest_path(input_dir, tmp_path):
    manifest_path = tmp_path / "state" / "progress.json"
    result = BatchExtractor(manifest_path=str(manifest_path)).process_directory(
        str(input_dir), str(tmp_path / "out")
    )

    assert manifest_path.exists()
    assert result.manifest_path == str(manifest_path)


def test_changed_document_is_extracted_again(input_dir, tmp_path):
    output_dir = tmp_path / "out"
    BatchExtractor().process_directory(str(input_dir), str(output_dir))

    notes = input_dir / "d_notes.md"
    notes.write_text("# Notes\n\nOn-site only, updated", encoding="utf-8")
    result = BatchExtractor().process_directory(str(input_dir), str(output_dir))

    assert (result.success, result.failure, result.skipped) == (1, 1, 2)
    assert (output_dir / "d_notes.md.txt").read_text(encoding="utf-8").endswith("updated\n")


def test_documents_sharing_a_stem_get_separate_outputs(tmp_path):
    input_dir = tmp_path / "in"
    input_dir.mkdir()
    (input_dir / "resume.md").write_text("Markdown resume", encoding="utf-8")
    (input_dir / "resume.pdf").write_bytes(build_pdf("(PDF resume) Tj"))
    output_dir = tmp_path / "out"

    result = BatchExtractor().process_directory(str(input_dir), str(output_dir))

    outputs = [entry["output"] for entry in result.results]
    assert result.success == 2
    assert len(set(outputs)) == 2
    assert (output_dir / "resume.md.txt").read_text(encoding="utf-8") == "Markdown resume\n"
    assert (output_dir / "resume.pdf.txt").read_text(encoding="utf-8") == "PDF resume\n"
