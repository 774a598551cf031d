"""Tests for the extension-based I/O registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from reportpdf.io import read_file, write_file
from reportpdf.io.readers.txt_reader import text_to_markup
from reportpdf.utils.errors import UnsupportedFormatError


def test_unknown_extension_raises(tmp_path: Path) -> None:
    path = tmp_path / "file.unknown"
    with pytest.raises(UnsupportedFormatError):
        read_file(path)
    with pytest.raises(UnsupportedFormatError):
        write_file(path, b"%PDF")


def test_html_read_verbatim(tmp_path: Path) -> None:
    markup = "<h2 style=\"text-align:center;\">내용증명서</h2>\n<p>■ 일 시:</p>"
    path = tmp_path / "letter.HTML"
    path.write_text(markup, encoding="utf-8-sig")
    assert read_file(path) == markup


def test_txt_becomes_escaped_paragraphs(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_bytes("a < b\r\n\r\nsecond".encode("utf-8"))
    assert read_file(path) == "<p>a &lt; b</p>\n<p>&nbsp;</p>\n<p>second</p>"


def test_text_to_markup_empty() -> None:
    assert text_to_markup("") == ""


def test_pdf_write_creates_dirs_and_leaves_no_temp(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "edited_report.pdf"
    write_file(path, b"%PDF-1.4 test")
    assert path.read_bytes() == b"%PDF-1.4 test"
    assert [p.name for p in path.parent.iterdir()] == ["edited_report.pdf"]


def test_pdf_write_failure_keeps_previous_file(tmp_path: Path) -> None:
    path = tmp_path / "edited_report.pdf"
    path.write_bytes(b"old")
    with pytest.raises(TypeError):
        write_file(path, "not bytes")  # type: ignore[arg-type]
    assert path.read_bytes() == b"old"
    assert [p.name for p in tmp_path.iterdir()] == ["edited_report.pdf"]
