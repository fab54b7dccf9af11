"""Enzymes decompose raw input into typed elements that can bond into the lattice."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby
from typing import IO, Any, Iterator, Union

from .axiom import Element

TextSource = Union[str, bytes, IO[str], IO[bytes]]


@dataclass(frozen=True)
class PlainElement:
    """An element with a type tag and an arbitrary value."""

    tag: str
    raw: Any

    def type(self) -> str:
        return self.tag

    def value(self) -> Any:
        return self.raw


@dataclass(frozen=True)
class HexElement:
    """A string element that also carries its hexagram encoding."""

    tag: str
    raw: str
    tokens: tuple[int, ...]
    length: int

    @classmethod
    def from_text(cls, tag: str, text: str) -> HexElement:
        data = text.encode("utf-8")
        return cls(tag, text, encode_hex(data), len(data))

    def type(self) -> str:
        return self.tag

    def value(self) -> str:
        return self.raw

    def hex_tokens(self) -> tuple[int, ...]:
        return self.tokens

    def orig_len(self) -> int:
        return self.length


def elem(tag: str, value: Any) -> Element:
    """Create an element; string values are hexagram-encoded."""
    if isinstance(value, str):
        return HexElement.from_text(tag, value)
    return PlainElement(tag, value)


def hex_elem(tag: str, value: str) -> HexElement:
    """Create a hexagram-encoded element from a string."""
    return HexElement.from_text(tag, value)


def encode_hex(data: bytes | str) -> tuple[int, ...]:
    """Encode bytes as 6-bit tokens: every 3 bytes give 4 tokens, zero-padded."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    tokens: list[int] = []
    for start in range(0, len(data), 3):
        bits = int.from_bytes(data[start : start + 3].ljust(3, b"\0"), "big")
        tokens.extend((bits >> shift) & 0x3F for shift in (18, 12, 6, 0))
    return tuple(tokens)


def _is_word_char(ch: str) -> bool:
    return ch.isalpha() or ch.isdecimal()


def classify_token(token: str) -> str:
    """Return the type tag for a text token: a word bucket, space or punct."""
    if not token:
        return "empty"
    first = token[0]
    if _is_word_char(first):
        return word_length_tag(token)
    if first.isspace():
        return "space"
    return "punct"


def word_length_tag(token: str) -> str:
    """Classify a word by length: w1 (1), w2 (2-3), w3 (4-5), w4 (6-8), w5 (9+)."""
    n = len(token)
    if n <= 1:
        return "w1"
    if n <= 3:
        return "w2"
    if n <= 5:
        return "w3"
    if n <= 8:
        return "w4"
    return "w5"


def _char_kind(ch: str) -> str | None:
    if ch.isspace():
        return "space"
    if _is_word_char(ch):
        return "word"
    return None


def scan_tokens(data: str) -> Iterator[str]:
    """Split text into words, whitespace runs and single punctuation characters."""
    for kind, run in groupby(data, key=_char_kind):
        if kind is None:
            yield from run
        else:
            yield "".join(run)


def _read_text(source: TextSource) -> str:
    if isinstance(source, (str, bytes)):
        content = source
    else:
        content = source.read()
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return content


class TextEnzyme:
    """Decomposes text into word, punct and space elements."""

    def can_digest(self, sample: bytes) -> bool:
        return True

    def digest(self, source: TextSource) -> Iterator[HexElement]:
        for token in scan_tokens(_read_text(source)):
            yield HexElement.from_text(classify_token(token), token)


@dataclass(frozen=True)
class RefElement:
    """Marks an element as reference material, excluded from output."""

    inner: Element

    def type(self) -> str:
        return self.inner.type()

    def value(self) -> Any:
        return self.inner.value()

    def hex_tokens(self) -> tuple[int, ...]:
        tokens = getattr(self.inner, "hex_tokens", None)
        return tuple(tokens()) if callable(tokens) else ()


def is_ref(element: Element) -> bool:
    """Report whether an element is reference material."""
    return isinstance(element, RefElement)


def origin_element(author_id: str) -> HexElement:
    """Create an "origin" element carrying author identity."""
    return HexElement.from_text("origin", author_id)


@dataclass(frozen=True)
class LinesEnzyme:
    """Emits each line of the input as one element."""

    tag: str = "line"

    def can_digest(self, sample: bytes) -> bool:
        return True

    def digest(self, source: TextSource) -> Iterator[HexElement]:
        tag = self.tag or "line"
        lines = _read_text(source).split("\n")
        if lines[-1] == "":
            lines.pop()
        for line in lines:
            yield HexElement.from_text(tag, line.rstrip("\r\n"))