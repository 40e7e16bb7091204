"""Batch extraction of every supported document in a directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .exceptions import ExtractionError
from .extractor import extract_file
from .manifest import BatchManifest, fingerprint
from .types import BatchResult
from .utils import is_supported_file

LOGGER = logging.getLogger(__name__)

MANIFEST_NAME = "extract-manifest.json"


class BatchExtractor:
    """Extract text from every supported file in a directory.

    Each document is written to ``<output_dir>/<name>.txt`` (``resume.pdf``
    becomes ``resume.pdf.txt``).  Progress is recorded in a JSON manifest so
    an interrupted run can resume; unchanged documents that already succeeded
    are skipped.  Failed documents are not retried within a run.
    """

    def __init__(self, *, resume: bool = True, manifest_path: Optional[str] = None) -> None:
        self.resume = resume
        self.manifest_path = Path(manifest_path) if manifest_path else None

    def find_documents(self, input_dir: str) -> List[str]:
        input_path = Path(input_dir)
        if not input_path.exists():
            raise FileNotFoundError(f"Directory not found: {input_dir}")
        if not input_path.is_dir():
            raise NotADirectoryError(f"Not a directory: {input_dir}")

        return sorted(
            str(path) for path in input_path.iterdir() if path.is_file() and is_supported_file(path)
        )

    def process_directory(
        self,
        input_dir: str,
        output_dir: str,
        progress_callback: Optional[Callable[[str, int, int], None]] = None,
    ) -> BatchResult:
        documents = self.find_documents(input_dir)

        base_output = Path(output_dir)
        base_output.mkdir(parents=True, exist_ok=True)

        manifest_path = self.manifest_path or (base_output / MANIFEST_NAME)
        manifest = BatchManifest.load(manifest_path)

        results: List[Dict[str, Any]] = []
        success_count = 0
        failure_count = 0
        skipped_count = 0

        for index, document in enumerate(documents, start=1):
            if progress_callback:
                progress_callback(Path(document).name, index, len(documents))

            current = fingerprint(Path(document))
            if self.resume and manifest.is_done(document, current):
                record = manifest.record(document)
                results.append({"file": document, "status": "skipped", "output": record.output})
                skipped_count += 1
                continue

            output_path = base_output / f"{Path(document).name}.txt"
            record = manifest.begin(document, current)
            try:
                extracted = extract_file(document)
            except ExtractionError as exc:
                LOGGER.warning("Extraction failed for %s: %s", document, exc)
                manifest.fail(document, exc)
                results.append(
                    {
                        "file": document,
                        "status": "failure",
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                        "attempts": record.attempts,
                    }
                )
                failure_count += 1
            else:
                output_path.write_text(extracted.body + "\n", encoding="utf-8")
                manifest.complete(
                    document,
                    output=str(output_path),
                    format=extracted.format.value,
                    lines=extracted.line_count,
                    warnings=extracted.warnings,
                )
                results.append(
                    {
                        "file": document,
                        "status": "success",
                        "output": str(output_path),
                        "lines": extracted.line_count,
                        "warnings": list(extracted.warnings),
                        "attempts": record.attempts,
                    }
                )
                success_count += 1
            manifest.save()

        manifest.save()
        return BatchResult(
            total=len(documents),
            success=success_count,
            failure=failure_count,
            skipped=skipped_count,
            results=results,
            manifest_path=str(manifest_path),
        )


__all__ = ["BatchExtractor", "MANIFEST_NAME"]
