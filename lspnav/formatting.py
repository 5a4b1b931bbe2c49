"""Render canonical values into selectable entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .lsp_client.messages import BufferTarget, Location, NavigationTarget, Range, ResolutionRequest
from .normalizer import CallSite, HierarchyItem, Symbol
from .paths import uri_to_path

KIND_NAMES: dict[int, str] = {
    1: "File",
    2: "Module",
    3: "Namespace",
    4: "Package",
    5: "Class",
    6: "Method",
    7: "Property",
    8: "Field",
    9: "Constructor",
    10: "Enum",
    11: "Interface",
    12: "Function",
    13: "Variable",
    14: "Constant",
    15: "String",
    16: "Number",
    17: "Boolean",
    18: "Array",
    19: "Object",
    20: "Key",
    21: "Null",
    22: "EnumMember",
    23: "Struct",
    24: "Event",
    25: "Operator",
    26: "TypeParameter",
}

DEFAULT_KIND_WIDTH = 15


@dataclass(slots=True, frozen=True)
class Entry:
    """A selectable item handed to the consumer.

    ``word`` is the text the selector filters on; ``display`` overrides what
    is shown when set. ``data`` keeps the wire payload the entry came from.
    Call-hierarchy entries also carry their arena ``node_id``, ``tree_path``
    and ``is_tree`` (``None`` until the node has been expanded).
    """

    word: str
    target: NavigationTarget | None = None
    display: str | None = None
    kind: int | None = None
    data: Mapping[str, Any] = field(default_factory=dict)
    tree_path: str | None = None
    node_id: int | None = None
    is_tree: bool | None = None

    @property
    def path(self) -> str | None:
        target = self.target
        if isinstance(target, (Location, ResolutionRequest)):
            return uri_to_path(target.uri)
        return None

    @property
    def label(self) -> str:
        return self.display if self.display is not None else self.word


def kind_label(kind: int, width: int = DEFAULT_KIND_WIDTH) -> str:
    name = KIND_NAMES.get(kind, "Unknown")
    return f"[{name}]".ljust(width)


def position_label(range_: Range) -> str:
    line, col = range_.start.to_cursor()
    return f"{line}:{col}"


def location_entry(location: Location) -> Entry:
    path = uri_to_path(location.uri)
    return Entry(
        word=path,
        display=f"{path}:{position_label(location.range)}",
        target=location,
        data={"uri": location.uri, "range": location.range.to_wire()},
    )


def symbol_entry(symbol: Symbol, *, kind_width: int = DEFAULT_KIND_WIDTH) -> Entry:
    return Entry(
        word=f"{kind_label(symbol.kind, kind_width)} {symbol.name}",
        target=symbol.target,
        kind=symbol.kind,
        data=symbol.payload,
    )


def call_site_entry(site: CallSite) -> Entry:
    item = site.item
    return Entry(
        word=item.name,
        display=f"{item.name}:{position_label(site.range)}",
        target=Location(uri=item.uri, range=site.range),
        kind=item.kind,
        data=item.payload,
    )


def hierarchy_root_entry(item: HierarchyItem) -> Entry:
    return Entry(
        word=item.name,
        target=Location(uri=item.uri, range=item.selection_range),
        kind=item.kind,
        data=item.payload,
        tree_path=f"/{item.name}",
    )


def entry_to_dict(entry: Entry) -> dict[str, Any]:
    target = entry.target
    target_data: dict[str, Any] | None
    if isinstance(target, Location):
        target_data = {"path": uri_to_path(target.uri), "range": target.range.to_wire()}
    elif isinstance(target, BufferTarget):
        target_data = {"bufnr": target.bufnr, "range": target.range.to_wire()}
    elif isinstance(target, ResolutionRequest):
        target_data = {"path": uri_to_path(target.uri), "resolve": True}
    else:
        target_data = None
    payload: dict[str, Any] = {"word": entry.word, "target": target_data}
    if entry.display is not None:
        payload["display"] = entry.display
    if entry.tree_path is not None:
        payload["tree_path"] = entry.tree_path
        payload["is_tree"] = entry.is_tree
    return payload


__all__ = [
    "DEFAULT_KIND_WIDTH",
    "Entry",
    "KIND_NAMES",
    "call_site_entry",
    "entry_to_dict",
    "hierarchy_root_entry",
    "kind_label",
    "location_entry",
    "position_label",
    "symbol_entry",
]
