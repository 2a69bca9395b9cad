"""Dataclasses and enums for parsed HLS playlists."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .datauri import decode_data_uri
from .uri import resolve_uri


class PlaylistKind(str, Enum):
    """Which of the two playlist shapes a manifest uses."""

    MEDIA = "media"
    MASTER = "master"


@dataclass
class LoadConfig:
    """Configuration for loading a manifest from a URL or local path."""

    source: str
    base_uri: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    timeout: float = 10.0
    resolve: bool = True
    sort: bool = False


@dataclass
class Key:
    """Encryption info from an ``#EXT-X-KEY`` or ``#EXT-X-SESSION-KEY`` tag."""

    method: str = ""
    uri: Optional[str] = None
    key_format: str = ""
    key_format_versions: str = ""
    iv: str = ""
    characteristics: str = ""

    def resolve(self, base: str) -> None:
        self.uri = resolve_uri(base, self.uri)

    def decode_data(self) -> bytes:
        """Return the key material embedded in a base64 ``data:`` URI."""
        return decode_data_uri(self.uri)


@dataclass
class Segment:
    """A single media segment, in playback order."""

    uri: Optional[str] = None
    duration: float = 0.0
    title: str = ""

    def resolve(self, base: str) -> None:
        self.uri = resolve_uri(base, self.uri)


@dataclass
class MediaPlaylist:
    """Parsed media playlist (segment list)."""

    target_duration: int = 0
    media_sequence: int = 0
    version: int = 0
    playlist_type: str = ""
    end_list: bool = False
    segments: List[Segment] = field(default_factory=list)
    keys: List[Key] = field(default_factory=list)
    map_uri: Optional[str] = None

    @property
    def kind(self) -> PlaylistKind:
        return PlaylistKind.MEDIA

    def resolve_uris(self, base: str) -> None:
        """Convert relative URIs to absolute URIs using ``base``."""
        for key in self.keys:
            key.resolve(base)
        for segment in self.segments:
            segment.resolve(base)
        self.map_uri = resolve_uri(base, self.map_uri)

    @property
    def total_duration(self) -> float:
        return sum(segment.duration for segment in self.segments)


@dataclass
class VariantStream:
    """
    One media playlist URI, aggregated over every ``#EXT-X-STREAM-INF`` tag
    that points at it.

    The primary attributes come from the tag with the lowest bandwidth;
    ``audio`` collects the audio group of every contributing tag.
    """

    uri: Optional[str] = None
    id: int = 0
    bandwidth: int = 0
    average_bandwidth: int = 0
    codecs: str = ""
    resolution: str = ""
    frame_rate: str = ""
    subtitles: str = ""
    audio: List[str] = field(default_factory=list)

    @property
    def sort_bandwidth(self) -> int:
        """Average bandwidth when advertised, peak bandwidth otherwise."""
        if self.average_bandwidth > 0:
            return self.average_bandwidth
        return self.bandwidth

    def __str__(self) -> str:
        lines = []
        if self.average_bandwidth > 0:
            lines.append(f"average_bandwidth = {self.average_bandwidth}")
        lines.append(f"bandwidth = {self.bandwidth}")
        if self.resolution:
            lines.append(f"resolution = {self.resolution}")
        if self.codecs:
            video_codec = self.codecs.split(",", 1)[0]
            lines.append(f"codecs = {video_codec}")
        lines.append(f"id = {self.id}")
        return "\n".join(lines)


@dataclass
class Rendition:
    """An alternative track declared by an ``#EXT-X-MEDIA`` tag."""

    type: str = ""
    group_id: str = ""
    name: str = ""
    language: str = ""
    uri: Optional[str] = None
    autoselect: bool = False
    default: bool = False
    forced: bool = False
    channels: str = ""
    characteristics: str = ""
    id: int = 0

    def __str__(self) -> str:
        lines = [f"type = {self.type}"]
        if self.name:
            lines.append(f"name = {self.name}")
        if self.language:
            lines.append(f"lang = {self.language}")
        if self.group_id:
            lines.append(f"group = {self.group_id}")
        lines.append(f"id = {self.id}")
        return "\n".join(lines)


@dataclass
class MasterPlaylist:
    """Parsed master playlist (variant streams and renditions)."""

    streams: List[VariantStream] = field(default_factory=list)
    medias: List[Rendition] = field(default_factory=list)
    session_keys: List[Key] = field(default_factory=list)

    @property
    def kind(self) -> PlaylistKind:
        return PlaylistKind.MASTER

    def resolve_uris(self, base: str) -> None:
        """Convert relative URIs to absolute URIs using ``base``."""
        for stream in self.streams:
            stream.uri = resolve_uri(base, stream.uri)
        for rendition in self.medias:
            rendition.uri = resolve_uri(base, rendition.uri)
        for key in self.session_keys:
            key.resolve(base)

    def sort(self) -> None:
        """
        Sort streams by ascending sort bandwidth and renditions by group id.

        Both sorts are stable, so entries with equal keys keep their
        first-appearance order.
        """
        self.streams.sort(key=lambda stream: stream.sort_bandwidth)
        self.medias.sort(key=lambda rendition: rendition.group_id)
