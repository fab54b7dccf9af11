"""Plain-text extraction from various file formats.

Plain text is read directly; PDFs and document formats are converted by
running pdftotext or pandoc. A missing tool is reported as an error.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from typing import IO, Protocol, Sequence


class ExtractError(Exception):
    """Raised when text cannot be extracted from a file."""


class Extractor(Protocol):
    def can_extract(self, path: str) -> bool: ...

    def extract(self, path: str) -> IO[bytes]: ...


def _ext(path: str | os.PathLike) -> str:
    name = os.path.basename(os.fspath(path))
    dot = name.rfind(".")
    return name[dot:].lower() if dot >= 0 else ""


class _ProcessStream:
    """A readable stream over a command's output; closing waits for the command."""

    def __init__(self, process: subprocess.Popen) -> None:
        self._process = process
        self._stdout = process.stdout

    def read(self, size: int = -1) -> bytes:
        return self._stdout.read(size)

    def readline(self, size: int = -1) -> bytes:
        return self._stdout.readline(size)

    def __iter__(self):
        return iter(self._stdout)

    @property
    def closed(self) -> bool:
        return self._stdout.closed

    def close(self) -> None:
        if self._stdout.closed:
            return
        self._stdout.close()
        code = self._process.wait()
        if code != 0:
            raise ExtractError(f"extract: command exited with status {code}")

    def __enter__(self) -> _ProcessStream:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _run(tool: str, args: Sequence[str]) -> _ProcessStream:
    if shutil.which(tool) is None:
        raise ExtractError(f"extract: {tool} not found")
    try:
        process = subprocess.Popen(
            [tool, *args], stdout=subprocess.PIPE, stderr=subprocess.DEVNULL
        )
    except OSError as exc:
        raise ExtractError(f"extract: cannot run {tool}: {exc}") from exc
    return _ProcessStream(process)


class PlainText:
    """Reads .txt, .md, .text and extension-less files directly."""

    _EXTENSIONS = frozenset({".txt", ".md", ".text", ""})

    def can_extract(self, path: str) -> bool:
        return _ext(path) in self._EXTENSIONS

    def extract(self, path: str) -> IO[bytes]:
        return open(path, "rb")


class PDFExtractor:
    """Extracts text from PDFs with pdftotext."""

    def can_extract(self, path: str) -> bool:
        return _ext(path) == ".pdf"

    def extract(self, path: str) -> _ProcessStream:
        return _run("pdftotext", ["-enc", "UTF-8", os.fspath(path), "-"])


class PandocExtractor:
    """Converts document formats to plain text with pandoc."""

    _EXTENSIONS = frozenset(
        {".html", ".htm", ".docx", ".epub", ".rtf", ".odt", ".rst", ".latex", ".tex", ".org"}
    )

    def can_extract(self, path: str) -> bool:
        return _ext(path) in self._EXTENSIONS

    def extract(self, path: str) -> _ProcessStream:
        return _run("pandoc", ["-t", "plain", "--wrap=none", os.fspath(path)])


class Registry:
    """Extractors in priority order; the first that accepts a path is used."""

    def __init__(self, extractors: Sequence[Extractor] | None = None) -> None:
        self.extractors: list[Extractor] = list(
            extractors
            if extractors is not None
            else (PlainText(), PDFExtractor(), PandocExtractor())
        )

    def extract(self, path: str):
        """Return a binary stream of plain text; the caller closes it."""
        for extractor in self.extractors:
            if extractor.can_extract(path):
                return extractor.extract(path)
        raise ExtractError(f"extract: no extractor for {path}")


def is_text_file(path: str) -> bool:
    """Report whether the first 512 bytes of a file contain no null bytes."""
    try:
        with open(path, "rb") as handle:
            head = handle.read(512)
    except OSError:
        return False
    return b"\0" not in head