"""Parse HLS master playlists and aggregate variant streams by URI."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Sequence

from .attributes import parse_attributes
from .models import MasterPlaylist, Rendition, VariantStream
from .tags import (
    EXT_X_MEDIA,
    EXT_X_SESSION_KEY,
    EXT_X_STREAM_INF,
    is_tag,
    parse_key,
    strict_int,
)
from .uri import parse_uri

logger = logging.getLogger(__name__)


class StreamAggregator:
    """
    Per-parse state for building a master playlist.

    Owns the identifier counter shared by renditions and variant streams, and
    the map from raw URI text to the stream already created for it. Several
    ``#EXT-X-STREAM-INF`` tags pointing at the same URI collapse into one
    :class:`VariantStream` whose primary attributes come from the tag with the
    lowest BANDWIDTH (first seen wins ties) and whose ``audio`` list collects
    every tag's AUDIO group.
    """

    def __init__(self) -> None:
        self.playlist = MasterPlaylist()
        self._counter = 0
        self._streams: Dict[str, VariantStream] = {}

    def next_id(self) -> int:
        value = self._counter
        self._counter += 1
        return value

    def add_rendition(self, rendition: Rendition) -> Rendition:
        rendition.id = self.next_id()
        self.playlist.medias.append(rendition)
        return rendition

    def add_stream(self, attrs: Mapping[str, str], uri_text: str) -> VariantStream:
        """Merge one ``#EXT-X-STREAM-INF`` occurrence into the playlist."""
        stream = self._streams.get(uri_text)
        exists = stream is not None

        if stream is None:
            stream = VariantStream(id=self.next_id(), uri=parse_uri(uri_text))
            self._streams[uri_text] = stream
            self.playlist.streams.append(stream)
            # First tag for this URI is the lowest bandwidth seen so far
            self._populate(stream, attrs)

        audio_group = attrs.get("AUDIO", "")
        if audio_group:
            stream.audio.append(audio_group)

        if exists:
            bandwidth = _safe_int(attrs.get("BANDWIDTH"))
            if bandwidth < stream.bandwidth:
                logger.debug(
                    "Stream %s: lower bandwidth %d replaces %d",
                    uri_text,
                    bandwidth,
                    stream.bandwidth,
                )
                self._populate(stream, attrs)

        return stream

    @staticmethod
    def _populate(stream: VariantStream, attrs: Mapping[str, str]) -> None:
        stream.codecs = attrs.get("CODECS", "")
        stream.resolution = attrs.get("RESOLUTION", "")
        stream.frame_rate = attrs.get("FRAME-RATE", "")
        stream.subtitles = attrs.get("SUBTITLES", "")
        stream.bandwidth = _safe_int(attrs.get("BANDWIDTH"))
        stream.average_bandwidth = _safe_int(attrs.get("AVERAGE-BANDWIDTH"))


class MasterPlaylistParser:
    """Parser for HLS master playlists."""

    @staticmethod
    def parse(lines: Sequence[str]) -> MasterPlaylist:
        """
        Parse master playlist lines.

        Never raises for malformed content: unparseable numbers become 0,
        unparseable URIs are left unset and a trailing ``#EXT-X-STREAM-INF``
        with no URI line is dropped.
        """
        aggregator = StreamAggregator()

        i = 0
        while i < len(lines):
            line = lines[i]

            if line.startswith(EXT_X_MEDIA):
                aggregator.add_rendition(MasterPlaylistParser._parse_rendition(line))
            elif line.startswith(EXT_X_SESSION_KEY):
                aggregator.playlist.session_keys.append(parse_key(line, EXT_X_SESSION_KEY))
            elif line.startswith(EXT_X_STREAM_INF):
                attrs = parse_attributes(line, EXT_X_STREAM_INF)
                if i + 1 >= len(lines):
                    logger.warning("Dropping %s without a URI line", line)
                    break
                i += 1
                aggregator.add_stream(attrs, lines[i])
            elif is_tag(line):
                logger.debug("Ignoring unsupported master playlist tag: %s", line)

            i += 1

        playlist = aggregator.playlist
        logger.debug(
            "Parsed master playlist with %d streams and %d renditions",
            len(playlist.streams),
            len(playlist.medias),
        )
        return playlist

    @staticmethod
    def _parse_rendition(line: str) -> Rendition:
        attrs = parse_attributes(line, EXT_X_MEDIA)
        return Rendition(
            type=attrs.get("TYPE", ""),
            group_id=attrs.get("GROUP-ID", ""),
            name=attrs.get("NAME", ""),
            language=attrs.get("LANGUAGE", ""),
            uri=parse_uri(attrs.get("URI")),
            autoselect=attrs.get("AUTOSELECT") == "YES",
            default=attrs.get("DEFAULT") == "YES",
            forced=attrs.get("FORCED") == "YES",
            channels=attrs.get("CHANNELS", ""),
            characteristics=attrs.get("CHARACTERISTICS", ""),
        )


def _safe_int(value: Optional[str], default: int = 0) -> int:
    if value is None:
        return default
    try:
        return strict_int(value)
    except ValueError:
        return default
