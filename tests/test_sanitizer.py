from __future__ import annotations

import pytest

from doc_extractor.sanitizer import is_metadata_line, is_page_number_line, sanitize


def test_line_endings_are_normalized():
    assert sanitize("a\r\nb\rc\fd") == "a\nb\nc\nd"


def test_nul_bytes_and_trailing_whitespace_are_removed():
    assert sanitize("na\x00me   \nvalue\t \n") == "name\nvalue"


def test_blank_lines_collapse_to_one():
    assert sanitize("one\n\n\n\n\ntwo\n \n\t\nthree") == "one\n\ntwo\n\nthree"


@pytest.mark.parametrize("line", ["3", "  12  ", "- 4 -", "Page 2", "page 2 of 10", "PAGE 3/5", "3 of 7", "Pg. 9"])
def test_page_number_lines(line):
    assert is_page_number_line(line)
    assert sanitize(f"Experience\n{line}\nEducation") == "Experience\nEducation"


@pytest.mark.parametrize("line", ["2019", "Page layout design", "3 years of Python", "v2.0", "10+ projects"])
def test_content_lines_are_kept(line):
    assert not is_page_number_line(line)
    assert sanitize(line) == line


@pytest.mark.parametrize("line", ["Title: Resume", "Author: Jane", "producer:pdfTeX", "  Keywords: a, b"])
def test_metadata_lines_are_dropped(line):
    assert is_metadata_line(line)
    assert sanitize(f"Jane Doe\n{line}\nEngineer") == "Jane Doe\nEngineer"


def test_labels_inside_lines_are_kept():
    assert sanitize("Job Title: Engineer") == "Job Title: Engineer"


def test_removed_lines_do_not_leave_blank_runs():
    assert sanitize("A\n\n1\n\nB") == "A\n\nB"
    assert sanitize("Title: x\n\nBody\n\n2") == "Body"


def test_tabs_inside_lines_are_preserved():
    assert sanitize("Hello\tWorld") == "Hello\tWorld"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   \n\n  ",
        "A\r\n\r\n\r\nB",
        "Title: x\n1\n\n\nPage 2 of 3\n  body  \n",
        "\x00\x00\n  - 3 -\n\ttext\t\n\f\v",
        " line para \n\n\n\n",
        "3\n\n\n4\n\nAuthor: me\n\n\nx",
    ],
)
def test_sanitize_is_idempotent(text):
    once = sanitize(text)
    assert sanitize(once) == once
