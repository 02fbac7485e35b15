"""Unit tests for document loading."""

from pathlib import Path

import pytest

from watchfolder_rag.errors import DocumentValidationError
from watchfolder_rag.ingestion.loader import decode_text, document_from_upload, load_text_file


def test_load_text_file_uses_filename(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("hello world", encoding="utf-8")

    doc = load_text_file(path)
    assert doc.source_id == "notes.txt"
    assert doc.text == "hello world"
    assert doc.size == 11


def test_decode_strips_bom_and_replaces_bad_bytes() -> None:
    assert decode_text(b"\xef\xbb\xbfabc") == "abc"
    assert decode_text(b"ok\xff") == "ok\ufffd"


def test_upload_builds_document() -> None:
    doc = document_from_upload("dir/report.txt", b"content")
    assert doc.source_id == "report.txt"
    assert doc.text == "content"


@pytest.mark.parametrize("filename,payload", [(None, b"x"), ("a.txt", b""), ("a.txt", None)])
def test_upload_without_content_rejected(filename, payload) -> None:
    with pytest.raises(DocumentValidationError, match="No file uploaded"):
        document_from_upload(filename, payload)


def test_upload_with_only_a_bom_rejected() -> None:
    with pytest.raises(DocumentValidationError, match="No file uploaded"):
        document_from_upload("a.txt", b"\xef\xbb\xbf")


def test_empty_file_rejected(tmp_path: Path) -> None:
    path = tmp_path / "pending.txt"
    path.write_bytes(b"")
    with pytest.raises(DocumentValidationError, match="pending.txt is empty"):
        load_text_file(path)
