"""Reconcile per-server LSP responses into canonical values.

Each function takes the raw response of one request (a list with one element
per answering server) and decides the shape of every payload once, by the
presence or absence of specific fields. Nothing downstream inspects wire
shapes again. ``null`` results from individual servers are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping

from .lsp_client.base import Response
from .lsp_client.messages import (
    BufferTarget,
    Location,
    NavigationTarget,
    Range,
    ResolutionRequest,
    WireCallHierarchyItem,
    WireDocumentSymbol,
    WireIncomingCall,
    WireLocation,
    WireLocationLink,
    WireOutgoingCall,
    WireSymbolInformation,
    WireWorkspaceSymbol,
)


@dataclass(slots=True, frozen=True)
class Symbol:
    name: str
    kind: int
    target: NavigationTarget
    payload: Mapping[str, Any]


@dataclass(slots=True, frozen=True)
class HierarchyItem:
    name: str
    kind: int
    uri: str
    selection_range: Range
    payload: Mapping[str, Any]


@dataclass(slots=True, frozen=True)
class CallSite:
    """One usage site of a call; a call with N ranges yields N sites."""

    item: HierarchyItem
    range: Range


def _results(response: Response) -> Iterator[Any]:
    for result in response:
        if result is not None:
            yield result


def _as_list(result: Any) -> list[Any]:
    return result if isinstance(result, list) else [result]


def is_location(payload: Mapping[str, Any]) -> bool:
    return "uri" in payload and "range" in payload


def to_location(payload: Mapping[str, Any]) -> Location:
    """Return the canonical location of a ``Location`` or ``LocationLink``."""
    if is_location(payload):
        return WireLocation.model_validate(payload).to_location()
    return WireLocationLink.model_validate(payload).to_location()


def normalize_locations(response: Response) -> list[Location]:
    """declaration/definition/typeDefinition/implementation results."""
    locations: list[Location] = []
    for result in _results(response):
        locations.extend(to_location(payload) for payload in _as_list(result))
    return locations


def normalize_references(response: Response) -> list[Location]:
    return [
        WireLocation.model_validate(payload).to_location()
        for result in _results(response)
        for payload in result
    ]


def _document_symbol(payload: Mapping[str, Any], bufnr: int) -> Symbol:
    if "location" in payload:
        info = WireSymbolInformation.model_validate(payload)
        return Symbol(info.name, info.kind, info.location.to_location(), payload)
    symbol = WireDocumentSymbol.model_validate(payload)
    target = BufferTarget(bufnr=bufnr, range=symbol.selection_range.to_range())
    return Symbol(symbol.name, symbol.kind, target, payload)


def _start_line(symbol: Symbol) -> int:
    target = symbol.target
    if isinstance(target, ResolutionRequest):
        return 0
    return target.range.start.line


def normalize_document_symbols(response: Response, bufnr: int) -> list[Symbol]:
    """Flatten symbols from every server and order them by start line."""
    symbols = [
        _document_symbol(payload, bufnr)
        for result in _results(response)
        for payload in result
    ]
    # list.sort is stable, symbols on the same line keep response order
    symbols.sort(key=_start_line)
    return symbols


def _workspace_symbol(payload: Mapping[str, Any]) -> Symbol:
    location = payload.get("location")
    if isinstance(location, Mapping) and "range" in location:
        info = WireSymbolInformation.model_validate(payload)
        return Symbol(info.name, info.kind, info.location.to_location(), payload)
    symbol = WireWorkspaceSymbol.model_validate(payload)
    target = ResolutionRequest(uri=symbol.location.uri, symbol=payload)
    return Symbol(symbol.name, symbol.kind, target, payload)


def normalize_workspace_symbols(response: Response) -> list[Symbol]:
    return [_workspace_symbol(payload) for result in _results(response) for payload in result]


def resolved_range(response: Response) -> Range | None:
    """Extract the range of a ``workspaceSymbol/resolve`` answer."""
    for result in _results(response):
        location = result.get("location") if isinstance(result, Mapping) else None
        if isinstance(location, Mapping) and "range" in location:
            return WireLocation.model_validate(location).to_location().range
        return None
    return None


def to_hierarchy_item(payload: Mapping[str, Any]) -> HierarchyItem:
    item = WireCallHierarchyItem.model_validate(payload)
    return HierarchyItem(
        name=item.name,
        kind=item.kind,
        uri=item.uri,
        selection_range=item.selection_range.to_range(),
        payload=payload,
    )


def normalize_prepared_items(response: Response) -> list[HierarchyItem]:
    return [to_hierarchy_item(payload) for result in _results(response) for payload in result]


def _call_sites(call: Mapping[str, Any]) -> Iterable[CallSite]:
    if "from" in call:
        wire: WireIncomingCall | WireOutgoingCall = WireIncomingCall.model_validate(call)
        linked = call["from"]
    else:
        wire = WireOutgoingCall.model_validate(call)
        linked = call["to"]
    item = to_hierarchy_item(linked)
    return [CallSite(item=item, range=site.to_range()) for site in wire.from_ranges]


def normalize_calls(response: Response) -> list[CallSite]:
    """Incoming (``from``) or outgoing (``to``) calls, one site per range."""
    return [
        site
        for result in _results(response)
        for call in result
        for site in _call_sites(call)
    ]


__all__ = [
    "CallSite",
    "HierarchyItem",
    "Symbol",
    "is_location",
    "normalize_calls",
    "normalize_document_symbols",
    "normalize_locations",
    "normalize_prepared_items",
    "normalize_references",
    "normalize_workspace_symbols",
    "resolved_range",
    "to_hierarchy_item",
    "to_location",
]
