"""Literal tag prefixes and helpers shared by the playlist parsers."""

from __future__ import annotations

import re

from .attributes import parse_attributes
from .models import Key
from .uri import parse_uri

EXT_X_VERSION = "#EXT-X-VERSION:"
EXT_X_TARGETDURATION = "#EXT-X-TARGETDURATION:"
EXT_X_MEDIA_SEQUENCE = "#EXT-X-MEDIA-SEQUENCE:"
EXT_X_PLAYLIST_TYPE = "#EXT-X-PLAYLIST-TYPE:"
EXT_X_ENDLIST = "#EXT-X-ENDLIST"
EXT_X_KEY = "#EXT-X-KEY:"
EXT_X_SESSION_KEY = "#EXT-X-SESSION-KEY:"
EXT_X_MAP = "#EXT-X-MAP:"
EXTINF = "#EXTINF:"
EXT_X_MEDIA = "#EXT-X-MEDIA:"
EXT_X_STREAM_INF = "#EXT-X-STREAM-INF:"

INT_RE = re.compile(r"[+-]?[0-9]+")
FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|(?i:inf|infinity|nan))"
)


def tag_name(prefix: str) -> str:
    """``#EXT-X-VERSION:`` -> ``EXT-X-VERSION``."""
    return prefix.lstrip("#").rstrip(":")


def strict_int(value: str) -> int:
    """Base-10 integer with an optional sign; no spaces, underscores or non-ASCII digits."""
    if not INT_RE.fullmatch(value):
        raise ValueError(f"invalid literal for int() with base 10: {value!r}")
    return int(value)


def strict_float(value: str) -> float:
    if not FLOAT_RE.fullmatch(value):
        raise ValueError(f"could not convert string to float: {value!r}")
    return float(value)


def is_tag(line: str) -> bool:
    return line.startswith("#EXT")


def parse_key(line: str, prefix: str) -> Key:
    """Build a :class:`Key` from an ``#EXT-X-KEY`` or ``#EXT-X-SESSION-KEY`` line."""
    attrs = parse_attributes(line, prefix)
    return Key(
        method=attrs.get("METHOD", ""),
        uri=parse_uri(attrs.get("URI")),
        key_format=attrs.get("KEYFORMAT", ""),
        key_format_versions=attrs.get("KEYFORMATVERSIONS", ""),
        iv=attrs.get("IV", ""),
        characteristics=attrs.get("CHARACTERISTICS", ""),
    )
