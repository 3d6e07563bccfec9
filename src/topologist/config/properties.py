"""Reader for Java-style ``.properties`` client configuration files.

Follows ``java.util.Properties.load``: ``#``/``!`` comments, ``=``, ``:`` or
whitespace separators, backslash line continuations and backslash escapes
(``\\t``, ``\\n``, ``\\r``, ``\\f``, ``\\uXXXX``; any other escaped character
stands for itself) in both keys and values.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def parse_properties(lines: Iterable[str]) -> dict[str, str]:
    """Parse property lines into a mapping; later keys override earlier ones."""

    properties: dict[str, str] = {}
    for line in _logical_lines(lines):
        key, value = _split(line)
        if not key:
            raise ConfigurationError(f"Malformed properties line: {line!r}")
        properties[_unescape(key)] = _unescape(value)
    return properties


def load_properties(path: Path) -> dict[str, str]:
    """Load a properties file from ``path``."""

    if not path.is_file():
        raise MissingConfigurationError(f"Client config file does not exist: {path}")
    try:
        with path.open(encoding="utf-8") as handle:
            return parse_properties(handle)
    except UnicodeDecodeError as exc:
        raise ConfigurationError(f"Client config file is not valid UTF-8: {path}") from exc


def _logical_lines(lines: Iterable[str]) -> Iterator[str]:
    pending: str | None = None
    for raw_line in lines:
        line = raw_line.rstrip("\r\n").lstrip(_WHITESPACE)
        if pending is None:
            if not line or line[0] in "#!":
                continue
        else:
            line = pending + line

        # an odd run of trailing backslashes continues the line
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2:
            pending = line[:-1]
            continue
        pending = None
        yield line

    if pending:
        yield pending


def _split(line: str) -> tuple[str, str]:
    index = 0
    escaped = False
    while index < len(line):
        char = line[index]
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in _SEPARATORS or char in _WHITESPACE:
            break
        index += 1

    rest = line[index:].lstrip(_WHITESPACE)
    if rest[:1] and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return line[:index], rest


def _unescape(text: str) -> str:
    if "\\" not in text:
        return text

    chars: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        index += 1
        if char != "\\" or index == len(text):
            chars.append(char)
            continue

        char = text[index]
        index += 1
        if char == "u":
            digits = text[index : index + 4]
            if len(digits) != 4 or any(d not in "0123456789abcdefABCDEF" for d in digits):
                raise ConfigurationError(f"Malformed \\uxxxx escape in properties: {text!r}")
            chars.append(chr(int(digits, 16)))
            index += 4
        else:
            chars.append(_ESCAPES.get(char, char))
    return "".join(chars)
