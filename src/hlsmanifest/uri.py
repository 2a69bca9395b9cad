"""URI parsing and reference resolution shared by both playlist types."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import SplitResult, urlsplit

# A '%' must introduce exactly two hex digits.
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def parse_uri(text: Optional[str]) -> Optional[str]:
    """Return ``text`` if it is a usable URI reference, otherwise None."""
    if not text:
        return None
    if _BAD_ESCAPE_RE.search(text) or _CONTROL_RE.search(text):
        return None
    try:
        urlsplit(text)
    except ValueError:
        return None
    return text


def resolve_uri(base: str, reference: Optional[str]) -> Optional[str]:
    """
    Resolve ``reference`` against ``base`` following RFC 3986 section 5.2.

    Works for any base scheme (``s3://``, ``file://``, custom schemes), not
    just the ones :func:`urllib.parse.urljoin` knows about. Absolute
    references are returned unchanged.
    """
    if reference is None:
        return None

    ref = urlsplit(reference)
    if ref.scheme:
        return reference

    b = urlsplit(base)
    ref_has_query = "?" in reference.partition("#")[0]

    if reference.startswith("//"):
        authority: Optional[str] = ref.netloc
        path = _remove_dot_segments(ref.path)
        query = ref.query if ref_has_query else None
    else:
        authority = b.netloc if _has_authority(base, b.scheme) else None
        if not ref.path:
            path = b.path
            if ref_has_query:
                query = ref.query
            else:
                query = b.query if "?" in base.partition("#")[0] else None
        else:
            if ref.path.startswith("/"):
                path = _remove_dot_segments(ref.path)
            else:
                path = _remove_dot_segments(_merge(b, ref.path))
            query = ref.query if ref_has_query else None

    fragment = ref.fragment if "#" in reference else None
    return _compose(b.scheme, authority, path, query, fragment)


def _has_authority(uri: str, scheme: str) -> bool:
    rest = uri[len(scheme) + 1:] if scheme else uri
    return rest.startswith("//")


def _compose(
    scheme: str,
    authority: Optional[str],
    path: str,
    query: Optional[str],
    fragment: Optional[str],
) -> str:
    result = f"{scheme}:" if scheme else ""
    if authority is not None:
        result += "//" + authority
    result += path
    if query is not None:
        result += "?" + query
    if fragment is not None:
        result += "#" + fragment
    return result


def _merge(base: SplitResult, ref_path: str) -> str:
    if base.netloc and not base.path:
        return "/" + ref_path
    return base.path[: base.path.rfind("/") + 1] + ref_path


def _remove_dot_segments(path: str) -> str:
    if not path:
        return path

    segments = path.split("/")
    resolved = []
    for segment in segments:
        if segment == ".":
            continue
        if segment == "..":
            if resolved:
                resolved.pop()
            continue
        resolved.append(segment)

    # "a/b/.." keeps its trailing slash
    if segments[-1] in (".", ".."):
        resolved.append("")

    result = "/".join(resolved)
    if path.startswith("/") and not result.startswith("/"):
        result = "/" + result
    return result
