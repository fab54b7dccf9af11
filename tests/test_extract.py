import pytest

from dendrite import extract as extract_module
from dendrite.extract import (
    ExtractError,
    PandocExtractor,
    PDFExtractor,
    PlainText,
    Registry,
    is_text_file,
)


def test_plain_text_extract(tmp_path):
    path = tmp_path / "test.txt"
    content = "Hello, world! This is a test."
    path.write_text(content)
    e = PlainText()
    assert e.can_extract(str(path)) is True
    with e.extract(str(path)) as stream:
        assert stream.read().decode() == content


@pytest.mark.parametrize(
    "path,want",
    [
        ("foo.txt", True),
        ("foo.md", True),
        ("foo.text", True),
        ("foo", True),
        ("foo.pdf", False),
        ("foo.html", False),
        ("foo.docx", False),
        ("FOO.TXT", True),
    ],
)
def test_plain_text_extensions(path, want):
    assert PlainText().can_extract(path) is want


@pytest.mark.parametrize(
    "path,want",
    [
        ("foo.html", True),
        ("foo.htm", True),
        ("foo.docx", True),
        ("foo.epub", True),
        ("foo.rtf", True),
        ("foo.txt", False),
        ("foo.pdf", False),
    ],
)
def test_pandoc_extensions(path, want):
    assert PandocExtractor().can_extract(path) is want


def test_pdf_extractor_extension():
    e = PDFExtractor()
    assert e.can_extract("book.pdf") is True
    assert e.can_extract("book.txt") is False


def test_registry_fallback(tmp_path):
    path = tmp_path / "test.txt"
    path.write_bytes(b"content")
    stream = Registry().extract(str(path))
    try:
        assert stream.read() == b"content"
    finally:
        stream.close()


def test_registry_no_extractor():
    with pytest.raises(ExtractError):
        Registry().extract("archive.xyz")


def test_missing_tool_raises(monkeypatch):
    monkeypatch.setattr(extract_module.shutil, "which", lambda name: None)
    with pytest.raises(ExtractError):
        PDFExtractor().extract("book.pdf")
    with pytest.raises(ExtractError):
        PandocExtractor().extract("book.html")


def test_is_text_file(tmp_path):
    text_path = tmp_path / "text.txt"
    text_path.write_bytes(b"hello world")
    assert is_text_file(str(text_path)) is True

    bin_path = tmp_path / "binary.bin"
    bin_path.write_bytes(bytes([0x00, 0x01, 0x02]))
    assert is_text_file(str(bin_path)) is False


def test_is_text_file_missing(tmp_path):
    assert is_text_file(str(tmp_path / "absent.txt")) is False