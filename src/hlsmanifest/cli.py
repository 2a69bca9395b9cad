"""Command-line interface for hlsmanifest."""

from __future__ import annotations

import asyncio
import logging
import sys

import aiohttp
import click

from .datauri import DataURIError, is_data_uri
from .downloader import load_manifest
from .media_parser import PlaylistParseError
from .models import Key, LoadConfig, MasterPlaylist, MediaPlaylist

LOAD_ERRORS = (PlaylistParseError, aiohttp.ClientError, asyncio.TimeoutError, OSError)


def _parse_headers(header) -> dict | None:
    if not header:
        return None
    headers = {}
    for header_entry in header:
        if ":" not in header_entry:
            raise click.BadParameter("Headers must be in the form Name:Value")
        name, value = header_entry.split(":", 1)
        headers[name.strip()] = value.strip()
    return headers


def _load(config: LoadConfig):
    try:
        return asyncio.run(load_manifest(config))
    except LOAD_ERRORS as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _echo_master(playlist: MasterPlaylist) -> None:
    click.echo(f"--- Medias ({len(playlist.medias)}) ---")
    for media in playlist.medias:
        click.echo(f"{media}\n---")

    click.echo(f"--- Streams ({len(playlist.streams)}) ---")
    for stream in playlist.streams:
        click.echo(str(stream))
        if stream.audio:
            click.echo(f"audio = {', '.join(stream.audio)}")
        if stream.uri:
            click.echo(f"uri = {stream.uri}")
        click.echo("---")


def _echo_media(playlist: MediaPlaylist) -> None:
    click.echo(f"Target Duration: {playlist.target_duration}")
    click.echo(f"Media Sequence: {playlist.media_sequence}")
    if playlist.version:
        click.echo(f"Version: {playlist.version}")
    if playlist.playlist_type:
        click.echo(f"Type: {playlist.playlist_type}")
    click.echo(f"End List: {playlist.end_list}")
    if playlist.map_uri:
        click.echo(f"Map: {playlist.map_uri}")
    click.echo(f"Segments: {len(playlist.segments)} ({playlist.total_duration:.3f}s)")
    for segment in playlist.segments:
        line = f"  {segment.duration:.3f} {segment.uri or '-'}"
        if segment.title:
            line += f" {segment.title}"
        click.echo(line)


def _echo_key(label: str, key: Key) -> None:
    click.echo(f"{label}: METHOD={key.method or '-'}")
    if key.uri:
        click.echo(f"  URI: {key.uri}")
    if key.key_format:
        click.echo(f"  KEYFORMAT: {key.key_format}")
    if key.iv:
        click.echo(f"  IV: {key.iv}")
    if is_data_uri(key.uri):
        try:
            click.echo(f"  Data: {key.decode_data().hex()}")
        except DataURIError as exc:
            click.echo(f"  Data: <{exc}>", err=True)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Inspect HLS media and master playlists."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@cli.command()
@click.argument("source")
@click.option("--base-uri", help="Base URI for resolving relative references")
@click.option("--sort/--no-sort", default=True, help="Sort streams by bandwidth and medias by group")
@click.option("--no-resolve", is_flag=True, help="Keep URIs exactly as written")
@click.option("--header", multiple=True, help="Additional HTTP header as Name:Value")
@click.option("--timeout", type=float, default=10.0, help="Request timeout in seconds")
def inspect(source, base_uri, sort, no_resolve, header, timeout):
    """Print a summary of a playlist file or URL."""
    config = LoadConfig(
        source=source,
        base_uri=base_uri,
        headers=_parse_headers(header),
        timeout=timeout,
        resolve=not no_resolve,
        sort=sort,
    )
    playlist = _load(config)

    if isinstance(playlist, MasterPlaylist):
        _echo_master(playlist)
    else:
        _echo_media(playlist)


@cli.command()
@click.argument("source")
@click.option("--base-uri", help="Base URI for resolving relative references")
@click.option("--header", multiple=True, help="Additional HTTP header as Name:Value")
@click.option("--timeout", type=float, default=10.0, help="Request timeout in seconds")
def keys(source, base_uri, header, timeout):
    """List encryption keys and decode inline data: key material."""
    config = LoadConfig(
        source=source,
        base_uri=base_uri,
        headers=_parse_headers(header),
        timeout=timeout,
    )
    playlist = _load(config)

    if isinstance(playlist, MasterPlaylist):
        found = playlist.session_keys
        label = "Session Key"
    else:
        found = playlist.keys
        label = "Key"

    if not found:
        click.echo("No keys")
        return

    for index, key in enumerate(found):
        _echo_key(f"{label} {index}", key)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
