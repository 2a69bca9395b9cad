"""Tokenizer for the ``NAME=VALUE`` attribute lists of ``#EXT-X-*`` tags."""

from __future__ import annotations

from typing import Dict, Iterator


def parse_attributes(line: str, prefix: str) -> Dict[str, str]:
    """
    Split a tag's attribute list into an ordered name -> raw value mapping.

    Commas inside double-quoted values are part of the value and the quotes
    are stripped. Fragments without ``=`` are skipped; this never raises.

    Args:
        line: Full tag line, e.g. ``#EXT-X-KEY:METHOD=AES-128,URI="k.bin"``
        prefix: Literal tag prefix to strip, e.g. ``#EXT-X-KEY:``

    Returns:
        Attribute values keyed by name as written
    """
    if line.startswith(prefix):
        line = line[len(prefix):]

    attrs: Dict[str, str] = {}
    for fragment in _split_fragments(line):
        name, sep, value = fragment.lstrip().partition("=")
        if not sep or not name:
            continue
        attrs[name] = _unquote(value)
    return attrs


def _split_fragments(text: str) -> Iterator[str]:
    start = 0
    in_quotes = False
    for pos, char in enumerate(text):
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            yield text[start:pos]
            start = pos + 1
    if start < len(text):
        yield text[start:]


def _unquote(value: str) -> str:
    if value.startswith('"'):
        value = value[1:]
        if value.endswith('"'):
            value = value[:-1]
    return value
