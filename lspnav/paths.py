"""Path and URI helper utilities."""

from __future__ import annotations

import os
from pathlib import Path
from urllib.parse import unquote, urlparse


def path_to_uri(path: str) -> str:
    """Return a document URI for a buffer path.

    Absolute filesystem paths become ``file://`` URIs. Anything else, such as
    ``deno:/...`` or ``jdt://...`` buffer names, is already an identifier and
    passes through unchanged.
    """
    if os.path.isabs(path):
        return Path(path).as_uri()
    return path


def uri_to_path(uri: str) -> str:
    """Return the filesystem path of a ``file:`` URI, or the URI itself."""
    if not uri.startswith("file:"):
        return uri
    return unquote(urlparse(uri).path)


__all__ = ["path_to_uri", "uri_to_path"]
