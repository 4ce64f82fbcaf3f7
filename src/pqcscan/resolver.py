"""Import path decoding and local alias resolution."""

from __future__ import annotations

import re
from typing import Iterable

from .errors import MalformedLiteralError
from .model import ImportDecl

# Names that bind nothing usable as a call qualifier.
NON_BINDING_ALIASES = {"_", "."}

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}
_ESCAPE = re.compile(
    r"""\\(?:(?P<simple>[abfnrtv\\"])|(?P<oct>[0-7]{3})|x(?P<hex>[0-9a-fA-F]{2})"""
    r"""|u(?P<u4>[0-9a-fA-F]{4})|U(?P<u8>[0-9a-fA-F]{8}))"""
)


def _decode_interpreted(literal: str, inner: str) -> str:
    out = bytearray()
    index = 0
    while index < len(inner):
        char = inner[index]
        if char == '"':
            raise MalformedLiteralError(literal, "invalid syntax")
        if char == "\n":
            raise MalformedLiteralError(literal, "newline in string")
        if char != "\\":
            out.extend(char.encode("utf-8"))
            index += 1
            continue
        match = _ESCAPE.match(inner, index)
        if match is None:
            raise MalformedLiteralError(literal, "invalid escape sequence")
        if match.group("simple"):
            out.extend(_SIMPLE_ESCAPES[match.group("simple")].encode("utf-8"))
        elif match.group("oct"):
            value = int(match.group("oct"), 8)
            if value > 0xFF:
                raise MalformedLiteralError(literal, "octal escape out of range")
            out.append(value)
        elif match.group("hex"):
            out.append(int(match.group("hex"), 16))
        else:
            value = int(match.group("u4") or match.group("u8"), 16)
            if value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
                raise MalformedLiteralError(literal, "invalid unicode code point")
            out.extend(chr(value).encode("utf-8"))
        index = match.end()
    return out.decode("utf-8", errors="replace")


def decode_import_path(literal: str) -> str:
    """Unquote a Go string literal the way the compiler reads an import path."""

    if len(literal) < 2 or literal[0] != literal[-1]:
        raise MalformedLiteralError(literal, "invalid syntax")
    quote, inner = literal[0], literal[1:-1]
    if quote == "`":
        if "`" in inner:
            raise MalformedLiteralError(literal, "invalid syntax")
        return inner.replace("\r", "")
    if quote != '"':
        raise MalformedLiteralError(literal, "invalid syntax")
    return _decode_interpreted(literal, inner)


def default_local_name(path: str) -> str:
    return path.split("/")[-1]


def local_name(spec: ImportDecl) -> str:
    if spec.alias is not None:
        return spec.alias
    return default_local_name(decode_import_path(spec.literal))


def resolve(imports: Iterable[ImportDecl], name: str) -> str | None:
    """Return the module path ``name`` refers to, or ``None`` if it is not an import alias."""

    if name in NON_BINDING_ALIASES:
        return None
    for spec in imports:
        if local_name(spec) == name:
            return decode_import_path(spec.literal)
    return None
