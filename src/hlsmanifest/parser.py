"""Text-level entry points: split manifest text and dispatch to a parser."""

from __future__ import annotations

from typing import List, Sequence, Union

from .master_parser import MasterPlaylistParser
from .media_parser import MediaPlaylistParser, PlaylistParseError
from .models import MasterPlaylist, MediaPlaylist, PlaylistKind
from .tags import EXT_X_STREAM_INF

Playlist = Union[MediaPlaylist, MasterPlaylist]

__all__ = [
    "Playlist",
    "PlaylistParseError",
    "decode",
    "decode_master",
    "decode_media",
    "detect_kind",
    "split_lines",
]


def split_lines(text: str) -> List[str]:
    """Split manifest text into lines with surrounding whitespace removed."""
    return [line.strip() for line in text.splitlines()]


def decode_media(text: str) -> MediaPlaylist:
    return MediaPlaylistParser.parse(split_lines(text))


def decode_master(text: str) -> MasterPlaylist:
    return MasterPlaylistParser.parse(split_lines(text))


def detect_kind(manifest: Union[str, Sequence[str]]) -> PlaylistKind:
    """Guess the playlist kind: any ``#EXT-X-STREAM-INF`` means master."""
    lines = split_lines(manifest) if isinstance(manifest, str) else manifest
    if any(line.startswith(EXT_X_STREAM_INF.rstrip(":")) for line in lines):
        return PlaylistKind.MASTER
    return PlaylistKind.MEDIA


def decode(text: str) -> Playlist:
    """Parse ``text`` as whichever playlist kind it appears to be."""
    lines = split_lines(text)
    if detect_kind(lines) is PlaylistKind.MASTER:
        return MasterPlaylistParser.parse(lines)
    return MediaPlaylistParser.parse(lines)
