"""Async loader for HLS manifests from URLs or local files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit

import aiohttp

from .models import LoadConfig, MasterPlaylist
from .parser import Playlist, decode

logger = logging.getLogger(__name__)


class ManifestDownloader:
    """Asynchronous manifest downloader."""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 10.0,
    ):
        """
        Initialize downloader.

        Args:
            session: Optional aiohttp session. If None, a new one will be created.
            timeout: Total request timeout in seconds for an owned session
        """
        self.session = session
        self.timeout = timeout
        self._own_session = session is None

    async def __aenter__(self):
        if self._own_session:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._own_session and self.session:
            await self.session.close()

    async def download_text(self, url: str, headers: Optional[dict] = None) -> str:
        """
        Download a URL and return its content as text.

        Args:
            url: URL to download
            headers: Optional HTTP headers

        Returns:
            Downloaded content as string
        """
        if self.session is None:
            raise RuntimeError("Session not initialized. Use 'async with' context manager.")

        async with self.session.get(url, headers=headers) as response:
            response.raise_for_status()
            return await response.text()


def is_remote(source: str) -> bool:
    return urlsplit(source).scheme.lower() in {"http", "https"}


def default_base_uri(source: str) -> str:
    """The URI relative references in ``source`` are resolved against."""
    if is_remote(source):
        return source
    return Path(source).resolve().as_uri()


async def read_manifest_text(config: LoadConfig) -> str:
    if is_remote(config.source):
        async with ManifestDownloader(timeout=config.timeout) as downloader:
            logger.info("Fetching manifest %s", config.source)
            return await downloader.download_text(config.source, headers=config.headers)

    logger.info("Reading manifest %s", config.source)
    return Path(config.source).read_text(encoding="utf-8")


async def load_manifest(config: LoadConfig) -> Playlist:
    """
    Read, parse and post-process a manifest.

    Args:
        config: Where to load from and which post-parse passes to run

    Returns:
        MediaPlaylist or MasterPlaylist, depending on the manifest content
    """
    text = await read_manifest_text(config)
    playlist = decode(text)

    if config.resolve:
        base = config.base_uri or default_base_uri(config.source)
        playlist.resolve_uris(base)
    if config.sort and isinstance(playlist, MasterPlaylist):
        playlist.sort()

    logger.info("Loaded %s playlist from %s", playlist.kind.value, config.source)
    return playlist
