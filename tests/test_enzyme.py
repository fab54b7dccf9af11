import base64
import io

import pytest

from dendrite.axiom import Element, HexagramElement
from dendrite.enzyme import (
    HexElement,
    LinesEnzyme,
    PlainElement,
    RefElement,
    TextEnzyme,
    classify_token,
    elem,
    encode_hex,
    hex_elem,
    is_ref,
    origin_element,
    scan_tokens,
    word_length_tag,
)

_B64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"


def test_text_digest():
    elems = [(e.type(), e.value()) for e in TextEnzyme().digest("hello world! 42")]
    assert elems == [
        ("w3", "hello"),
        ("space", " "),
        ("w3", "world"),
        ("punct", "!"),
        ("space", " "),
        ("w2", "42"),
    ]


def test_text_digest_empty():
    assert list(TextEnzyme().digest("")) == []


def test_text_digest_from_stream():
    elems = [e.value() for e in TextEnzyme().digest(io.StringIO("a, b"))]
    assert elems == ["a", ",", " ", "b"]


def test_lines_digest():
    elements = list(LinesEnzyme().digest("first line\nsecond line\nthird"))
    assert all(e.type() == "line" for e in elements)
    assert [e.value() for e in elements] == ["first line", "second line", "third"]


def test_lines_digest_strips_carriage_return_and_custom_tag():
    elements = list(LinesEnzyme(tag="row").digest("a\r\nb\n"))
    assert [(e.type(), e.value()) for e in elements] == [("row", "a"), ("row", "b")]


def test_lines_digest_empty_tag_defaults_to_line():
    elements = list(LinesEnzyme(tag="").digest("x"))
    assert [e.type() for e in elements] == ["line"]


def test_elem():
    e = elem("test", "value")
    assert e.type() == "test"
    assert e.value() == "value"
    assert isinstance(e, HexagramElement)


def test_elem_non_string_is_plain():
    e = elem("count", 5)
    assert isinstance(e, PlainElement)
    assert e.value() == 5
    assert not isinstance(e, HexagramElement)


def test_encode_hex_abc_matches_base64_alphabet():
    assert encode_hex(b"abc") == (24, 22, 9, 35)


@pytest.mark.parametrize("data", [b"", b"a", b"ab", b"abcd", "héllo".encode(), bytes(range(256))])
def test_encode_hex_agrees_with_zero_padded_base64(data):
    padded = data + b"\0" * (-len(data) % 3)
    expected = tuple(_B64.index(c) for c in base64.b64encode(padded).decode())
    tokens = encode_hex(data)
    assert tokens == expected
    assert len(tokens) == 4 * ((len(data) + 2) // 3)
    assert all(0 <= t < 64 for t in tokens)


def test_hex_elem_orig_len_counts_utf8_bytes():
    e = hex_elem("w3", "héllo")
    assert e.orig_len() == len("héllo".encode("utf-8"))
    assert e.hex_tokens() == encode_hex("héllo".encode("utf-8"))


@pytest.mark.parametrize(
    "token, tag",
    [
        ("", "empty"),
        ("a", "w1"),
        ("I", "w1"),
        ("the", "w2"),
        ("from", "w3"),
        ("about", "w3"),
        ("between", "w4"),
        ("writing", "w4"),
        ("restructured", "w5"),
        ("acknowledging", "w5"),
        ("42", "w2"),
        (" \t", "space"),
        ("!", "punct"),
    ],
)
def test_classify_token(token, tag):
    assert classify_token(token) == tag


def test_word_length_tag_counts_characters_not_bytes():
    assert word_length_tag("éé") == "w2"


def test_scan_tokens_round_trip():
    text = "Hi,  there!\n\tok?"
    tokens = list(scan_tokens(text))
    assert "".join(tokens) == text
    assert tokens == ["Hi", ",", "  ", "there", "!", "\n\t", "ok", "?"]


def test_scan_tokens_punctuation_is_single_characters():
    assert list(scan_tokens("...")) == [".", ".", "."]


def test_ref_element_forwards_and_is_marked():
    inner = hex_elem("w3", "word")
    ref = RefElement(inner)
    assert ref.type() == "w3"
    assert ref.value() == "word"
    assert ref.hex_tokens() == inner.hex_tokens()
    assert is_ref(ref) is True
    assert is_ref(inner) is False
    assert isinstance(ref, Element)


def test_ref_element_without_hex_tokens():
    assert RefElement(PlainElement("n", 3)).hex_tokens() == ()


def test_origin_element():
    e = origin_element("model-a")
    assert isinstance(e, HexElement)
    assert e.type() == "origin"
    assert e.value() == "model-a"


def test_enzymes_accept_any_sample():
    assert TextEnzyme().can_digest(b"\x00\x01") is True
    assert LinesEnzyme().can_digest(b"") is True