"""Parse HLS media playlists into segment lists."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .attributes import parse_attributes
from .models import MediaPlaylist, Segment
from .tags import (
    EXT_X_ENDLIST,
    EXT_X_KEY,
    EXT_X_MAP,
    EXT_X_MEDIA_SEQUENCE,
    EXT_X_PLAYLIST_TYPE,
    EXT_X_TARGETDURATION,
    EXT_X_VERSION,
    EXTINF,
    is_tag,
    parse_key,
    strict_float,
    strict_int,
    tag_name,
)
from .uri import parse_uri

logger = logging.getLogger(__name__)


class PlaylistParseError(ValueError):
    """Raised when a tag carries a value that cannot be parsed."""

    def __init__(self, tag: str, message: str, line_number: Optional[int] = None) -> None:
        self.tag = tag
        self.line_number = line_number
        location = f" (line {line_number})" if line_number is not None else ""
        super().__init__(f"invalid {tag}{location}: {message}")


class MediaPlaylistParser:
    """Parser for HLS media playlists."""

    @staticmethod
    def parse(lines: Sequence[str]) -> MediaPlaylist:
        """
        Parse media playlist lines.

        Unknown tags and blank lines are ignored. A malformed integer tag or
        ``#EXTINF`` duration aborts the parse with :class:`PlaylistParseError`.
        """
        playlist = MediaPlaylist()

        i = 0
        while i < len(lines):
            line = lines[i]

            if line.startswith(EXT_X_VERSION):
                playlist.version = MediaPlaylistParser._int_value(line, EXT_X_VERSION, i)
            elif line.startswith(EXT_X_TARGETDURATION):
                playlist.target_duration = MediaPlaylistParser._int_value(
                    line, EXT_X_TARGETDURATION, i
                )
            elif line.startswith(EXT_X_MEDIA_SEQUENCE):
                playlist.media_sequence = MediaPlaylistParser._int_value(
                    line, EXT_X_MEDIA_SEQUENCE, i
                )
            elif line.startswith(EXT_X_PLAYLIST_TYPE):
                playlist.playlist_type = line[len(EXT_X_PLAYLIST_TYPE):]
            elif line.startswith(EXT_X_ENDLIST):
                playlist.end_list = True
            elif line.startswith(EXT_X_KEY):
                playlist.keys.append(parse_key(line, EXT_X_KEY))
            elif line.startswith(EXT_X_MAP):
                map_uri = parse_uri(parse_attributes(line, EXT_X_MAP).get("URI"))
                if map_uri is not None:
                    playlist.map_uri = map_uri
            elif line.startswith(EXTINF):
                segment = MediaPlaylistParser._parse_extinf(line, i)
                # The URI is on the next line
                if i + 1 < len(lines):
                    next_line = lines[i + 1]
                    if next_line and not next_line.startswith("#"):
                        segment.uri = parse_uri(next_line)
                        i += 1
                playlist.segments.append(segment)
            elif is_tag(line):
                logger.debug("Ignoring unsupported media playlist tag: %s", line)

            i += 1

        logger.debug(
            "Parsed media playlist with %d segments and %d keys",
            len(playlist.segments),
            len(playlist.keys),
        )
        return playlist

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------

    @staticmethod
    def _int_value(line: str, prefix: str, index: int) -> int:
        value = line[len(prefix):]
        try:
            return strict_int(value)
        except ValueError as exc:
            raise PlaylistParseError(tag_name(prefix), str(exc), index + 1) from exc

    @staticmethod
    def _parse_extinf(line: str, index: int) -> Segment:
        # Format: #EXTINF:duration,[title]
        duration_str, _, title = line[len(EXTINF):].partition(",")
        try:
            duration = strict_float(duration_str)
        except ValueError as exc:
            raise PlaylistParseError(tag_name(EXTINF), f"duration: {exc}", index + 1) from exc
        return Segment(duration=duration, title=title.strip())
