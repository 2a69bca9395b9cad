"""hlsmanifest: Parse HLS media and master playlists into queryable models."""

from .datauri import DataURIError
from .media_parser import PlaylistParseError
from .models import (
    Key,
    LoadConfig,
    MasterPlaylist,
    MediaPlaylist,
    PlaylistKind,
    Rendition,
    Segment,
    VariantStream,
)
from .parser import decode, decode_master, decode_media, detect_kind

__all__ = [
    "DataURIError",
    "Key",
    "LoadConfig",
    "MasterPlaylist",
    "MediaPlaylist",
    "PlaylistKind",
    "PlaylistParseError",
    "Rendition",
    "Segment",
    "VariantStream",
    "decode",
    "decode_master",
    "decode_media",
    "detect_kind",
]
