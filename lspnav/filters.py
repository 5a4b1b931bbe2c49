"""Exclusion rules for normalised locations."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from .lsp_client.messages import Location

# deno virtual buffers carrying a percent-encoded `#^`, `#~`, `#<` or `#=` fragment
# (https://github.com/denoland/deno/issues/19304)
_DENO_FRAGMENT_RE = re.compile(r"^deno:.*%23(%5E|%7E|%3C|%3D)")


def is_excluded(location: Location) -> bool:
    return _DENO_FRAGMENT_RE.search(location.uri) is not None


def drop_excluded(locations: Iterable[Location]) -> Iterator[Location]:
    return (location for location in locations if not is_excluded(location))


__all__ = ["drop_excluded", "is_excluded"]
