"""An enzyme for JavaScript, TypeScript and Svelte source.

It does not parse the language. It recognises structural markers line by
line (imports, classes, types, interfaces, enums, functions, methods,
fields, component tags and string literals) and emits them as typed
elements, which gives the lattice the vocabulary of a JS/TS codebase.
"""

from __future__ import annotations

import re
from typing import IO, Iterator, Union

from .enzyme import HexElement

Source = Union[str, bytes, IO[str], IO[bytes]]

_MAX_LINE = 1024 * 1024

_IMPORT_FROM = re.compile(r"""import\s+(?:\{[^}]*\}|[^{;]+)\s+from\s+['"]([^'"]+)['"]""", re.ASCII)
_IMPORT_BARE = re.compile(r"""import\s+['"]([^'"]+)['"]""", re.ASCII)

_CLASS = re.compile(r"(?:export\s+)?class\s+(\w+)", re.ASCII)
_TYPE = re.compile(r"(?:export\s+)?type\s+(\w+)\s*[=<{]", re.ASCII)
_INTERFACE = re.compile(r"(?:export\s+)?interface\s+(\w+)", re.ASCII)
_FUNCTION = re.compile(r"(?:export\s+)?(?:async\s+)?function\s+(\w+)", re.ASCII)
_CONST = re.compile(r"(?:export\s+)?(?:const|let|var)\s+(\w+)", re.ASCII)
_ENUM = re.compile(r"(?:export\s+)?enum\s+(\w+)", re.ASCII)

_METHOD = re.compile(
    r"^\s+(?:(?:public|private|protected|static|async|readonly)\s+)*(\w+)\s*\(", re.ASCII
)
_GETTER = re.compile(r"^\s+(?:(?:public|private|protected|static)\s+)*get\s+(\w+)\s*\(", re.ASCII)
_SETTER = re.compile(r"^\s+(?:(?:public|private|protected|static)\s+)*set\s+(\w+)\s*\(", re.ASCII)
_FIELD = re.compile(
    r"^\s+(?:(?:public|private|protected|static|readonly)\s+)*(\w+)\s*[?!]?\s*:\s*", re.ASCII
)
_ARROW_PAREN = re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?\(", re.ASCII)
_ARROW_BARE = re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?\w+\s*=>", re.ASCII)

_SINGLE_STRING = re.compile(r"'((?:[^'\\]|\\.){3,})'")
_DOUBLE_STRING = re.compile(r'"((?:[^"\\]|\\.){3,})"')
_TEMPLATE_STRING = re.compile(r"(`[^`]{3,}`)")
_LITERALS = (_SINGLE_STRING, _DOUBLE_STRING, _TEMPLATE_STRING)

_COMPONENT = re.compile(r"<([A-Z]\w+)", re.ASCII)
_COMMENT = re.compile(r"^\s*(?://|/\*|\*)")

_NOT_METHODS = frozenset(
    {"if", "for", "while", "switch", "return", "constructor", "new", "throw", "catch"}
)
_NOT_FIELDS = frozenset({"return", "const", "let"})


def _lines(source: Source) -> Iterator[str]:
    content = source if isinstance(source, (str, bytes)) else source.read()
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    for line in lines:
        if len(line.encode("utf-8")) > _MAX_LINE:
            return
        yield line[:-1] if line.endswith("\r") else line


def _elem(tag: str, value: str) -> HexElement:
    return HexElement.from_text(tag, value)


class JSSource:
    """Decomposes JS/TS/Svelte source into typed structural elements."""

    def can_digest(self, sample: bytes | str) -> bool:
        text = sample.decode("utf-8", errors="replace") if isinstance(sample, bytes) else sample
        return any(marker in text for marker in ("import ", "export ", "function ", "<script"))

    def digest(self, source: Source) -> Iterator[HexElement]:
        in_class = False
        brace_depth = 0
        class_depth = 0

        for line in _lines(source):
            for ch in line:
                if ch == "{":
                    brace_depth += 1
                elif ch == "}":
                    brace_depth -= 1
                    if in_class and brace_depth < class_depth:
                        in_class = False

            if _COMMENT.match(line):
                trimmed = line.strip().lstrip("/* ")
                if len(trimmed.encode("utf-8")) > 3:
                    yield _elem("comment", trimmed)
                continue

            m = _IMPORT_FROM.search(line)
            if m:
                yield _elem("import", m.group(1))
                start = line.find("{")
                if start >= 0:
                    end = line.find("}", start)
                    if end >= 0:
                        for name in line[start + 1 : end].split(","):
                            name = name.strip()
                            alias = name.find(" as ")
                            if alias >= 0:
                                name = name[alias + 4 :].strip()
                            if name:
                                yield _elem("ident", name)
                continue
            m = _IMPORT_BARE.search(line)
            if m:
                yield _elem("import", m.group(1))
                continue

            m = _CLASS.search(line)
            if m:
                yield _elem("type", m.group(1))
                yield _elem("struct", "")
                in_class = True
                class_depth = brace_depth
                continue

            m = _TYPE.search(line)
            if m:
                yield _elem("type", m.group(1))
                continue

            m = _INTERFACE.search(line)
            if m:
                yield _elem("type", m.group(1))
                yield _elem("interface", "")
                continue

            m = _ENUM.search(line)
            if m:
                yield _elem("type", m.group(1))
                continue

            m = _FUNCTION.search(line)
            if m:
                yield _elem("func", m.group(1))
                continue

            m = _ARROW_PAREN.search(line) or _ARROW_BARE.search(line)
            if m:
                if not in_class:
                    yield _elem("func", m.group(1))
                continue

            m = _CONST.search(line)
            if m:
                if not in_class:
                    yield _elem("ident", m.group(1))
                continue

            if in_class:
                m = _GETTER.search(line) or _SETTER.search(line)
                if m:
                    yield _elem("method", m.group(1))
                    continue
                m = _METHOD.search(line)
                if m:
                    if m.group(1) not in _NOT_METHODS:
                        yield _elem("method", m.group(1))
                    continue
                m = _FIELD.search(line)
                if m:
                    if m.group(1) not in _NOT_FIELDS:
                        yield _elem("field", m.group(1))
                    continue

            for m in _COMPONENT.finditer(line):
                yield _elem("ident", m.group(1))

            for pattern in _LITERALS:
                for m in pattern.finditer(line):
                    yield _elem("literal", m.group(0))