"""Decoding helpers for inline ``data:`` URIs carried by HLS keys."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Optional
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

BASE64_MARKER = ";base64"


class DataURIError(ValueError):
    """Raised when inline key material cannot be extracted."""


class MissingKeyURIError(DataURIError):
    """Raised when a key carries no URI at all."""


class NotDataURIError(DataURIError):
    """Raised when a key URI does not use the ``data`` scheme."""


class MalformedDataURIError(DataURIError):
    """Raised when the data URI has no comma separating metadata and payload."""


class UnsupportedEncodingError(DataURIError):
    """Raised for data URIs that are not base64 encoded."""


class DataDecodeError(DataURIError):
    """Raised when the base64 payload is invalid."""


def is_data_uri(uri: Optional[str]) -> bool:
    if not uri:
        return False
    try:
        return urlsplit(uri).scheme.lower() == "data"
    except ValueError:
        return False


def decode_data_uri(uri: Optional[str]) -> bytes:
    """
    Decode the payload of a ``data:[<mediatype>][;base64],<data>`` URI.

    Only base64 payloads are supported; percent-encoded or plain text
    payloads are rejected with :class:`UnsupportedEncodingError`.

    Args:
        uri: The URI to decode

    Returns:
        Decoded payload bytes
    """
    if uri is None:
        raise MissingKeyURIError("URI is missing")
    if not is_data_uri(uri):
        raise NotDataURIError(f"URI is not a data URI: {uri}")

    opaque = uri.split(":", 1)[1]
    meta, sep, payload = opaque.partition(",")
    if not sep:
        raise MalformedDataURIError("invalid data URI: missing comma separator")
    if BASE64_MARKER not in meta:
        raise UnsupportedEncodingError("data URI does not contain base64 indicator")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DataDecodeError(f"invalid base64 payload in data URI: {exc}") from exc

    logger.debug("Decoded %d bytes from data URI", len(data))
    return data
