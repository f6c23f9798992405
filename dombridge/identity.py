"""Canonical file URLs and the content hash derived from them.

The directive transform and the dev middleware both name artifacts after
``content_hash(to_file_url(path))``. Production lookups break if the two sides
ever derive the hash differently, so every caller goes through this module.
"""

from __future__ import annotations

import hashlib
import os
import posixpath
from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

from .constants import PLATFORM_ANDROID, PLATFORM_IOS

DOM_ROUTE_PREFIX = "/_expo/@dom"

_IOS_ASSET_DIR = "www.bundle/"
_ANDROID_ASSET_ROOT = "file:///android_asset"
_ANDROID_ASSET_DIR = "www/"


def absolute_path(path: str | Path) -> Path:
    """Return an absolute, normalised path without resolving symlinks."""
    return Path(os.path.abspath(os.path.expanduser(str(path))))


def to_file_url(path: str | Path) -> str:
    """Return the canonical ``file://`` URL for ``path``."""
    return absolute_path(path).as_uri()


def is_file_url(value: str | None) -> bool:
    return bool(value) and value.startswith("file://")


def file_url_to_path(url: str) -> Path:
    """Convert a ``file://`` URL back into a local filesystem path."""
    parts = urlsplit(url)
    if parts.scheme != "file":
        raise ValueError(f"Expected a file:// URL, received: {url}")
    if parts.netloc not in ("", "localhost"):
        raise ValueError(f"Remote file URLs are not supported: {url}")
    return Path(url2pathname(parts.path))


def content_hash(canonical_url: str) -> str:
    """Return the hex SHA-1 digest of a canonical file URL."""
    return hashlib.sha1(canonical_url.encode("utf-8")).hexdigest()


def production_asset_parts(platform: str, canonical_url: str) -> tuple[str, str]:
    """Return the ``(prefix, relative_asset)`` pair making up a production URI.

    The generated proxy concatenates both parts at runtime, so they are kept
    separate here.
    """
    name = f"{content_hash(canonical_url)}.html"
    if platform == PLATFORM_IOS:
        return "", _IOS_ASSET_DIR + name
    if platform == PLATFORM_ANDROID:
        return _ANDROID_ASSET_ROOT, _ANDROID_ASSET_DIR + name
    raise ValueError(
        f'production "use dom" directive is not supported yet for platform: {platform}'
    )


def production_asset_uri(platform: str, canonical_url: str) -> str:
    prefix, asset = production_asset_parts(platform, canonical_url)
    return prefix + asset


def dev_component_path(file_path: str | Path, canonical_url: str) -> str:
    """Return the dev-server path and query that serves a DOM component."""
    # The basename only improves the browser debugger listing; routing ignores it.
    name = posixpath.basename(str(file_path).replace(os.sep, "/"))
    return f"{DOM_ROUTE_PREFIX}/{name}?file={canonical_url}"


__all__ = [
    "DOM_ROUTE_PREFIX",
    "absolute_path",
    "content_hash",
    "dev_component_path",
    "file_url_to_path",
    "is_file_url",
    "production_asset_parts",
    "production_asset_uri",
    "to_file_url",
]
