"""Tests for dropping Deno virtual-document locations."""

from __future__ import annotations

import pytest

from lspnav.filters import drop_excluded, is_excluded
from lspnav.lsp_client.messages import Location, Position, Range

RANGE = Range(Position(0, 0), Position(0, 1))


@pytest.mark.parametrize("fragment", ["%23%5E", "%23%7E", "%23%3C", "%23%3D"])
def test_deno_virtual_buffers_with_fragment_are_excluded(fragment: str) -> None:
    uri = f"deno:/https/deno.land/x/mod.ts{fragment}1.0"
    assert is_excluded(Location(uri, RANGE))


@pytest.mark.parametrize(
    "uri",
    [
        "deno:/https/deno.land/x/mod.ts",
        "deno:/https/deno.land/x/mod.ts%23section",
        "file:///work/a%23%5E.ts",
    ],
)
def test_other_uris_are_kept(uri: str) -> None:
    assert not is_excluded(Location(uri, RANGE))


def test_drop_excluded_keeps_order() -> None:
    kept_a = Location("file:///a.ts", RANGE)
    dropped = Location("deno:/x.ts%23%5E", RANGE)
    kept_b = Location("file:///b.ts", RANGE)
    assert list(drop_excluded([kept_a, dropped, kept_b])) == [kept_a, kept_b]
