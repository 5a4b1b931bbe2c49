"""Navigation source: request, normalise, filter and format LSP answers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, AsyncIterator

from pydantic import ValidationError

from .config import SourceParams
from .events import EventSink, LoggingEventSink, NavEvent, ReasonCode
from .filters import drop_excluded
from .formatting import Entry, location_entry, symbol_entry
from .hierarchy import CallHierarchyTree
from .identity import IdentityResolver
from .logging import get_logger
from .lsp_client.base import CapabilityProbe, EditorHost, LspTransport
from .lsp_client.client import RequestDispatcher
from .lsp_client.messages import Range, ResolutionRequest
from .methods import CALL_HIERARCHY_METHODS, LOCATION_METHODS, Method
from .normalizer import (
    CallSite,
    HierarchyItem,
    normalize_calls,
    normalize_document_symbols,
    normalize_locations,
    normalize_prepared_items,
    normalize_references,
    normalize_workspace_symbols,
    resolved_range,
)

LOGGER = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class GatherContext:
    bufnr: int
    winid: int
    input: str = ""


class NavigationSource:
    """Produce entry batches for one navigation method at a time.

    ``gather`` yields at most one batch and then finishes; unknown methods,
    missing capabilities and empty answers finish without yielding. Passing
    ``parent`` (an entry from a previous call-hierarchy batch) expands that
    node instead of starting a new search.
    """

    def __init__(
        self,
        transport: LspTransport,
        probe: CapabilityProbe,
        host: EditorHost,
        *,
        events: EventSink | None = None,
    ) -> None:
        self.events = events or LoggingEventSink()
        self.dispatcher = RequestDispatcher(transport, probe, self.events)
        self.identity = IdentityResolver(host)
        self.trees: dict[Method, CallHierarchyTree] = {}

    async def gather(
        self,
        context: GatherContext,
        params: SourceParams,
        parent: Entry | None = None,
    ) -> AsyncIterator[list[Entry]]:
        method = await self.dispatcher.check(context.bufnr, params.method)
        if method is None:
            return
        try:
            batch = await self._gather(method, context, params, parent)
        except ValidationError as error:
            self.events.emit(
                NavEvent(
                    ReasonCode.MALFORMED_RESPONSE,
                    f"Malformed {method.value} response ({error.error_count()} errors)",
                    severity=logging.ERROR,
                    method=method.value,
                )
            )
            return
        if batch is not None:
            yield batch

    async def resolve(self, bufnr: int, request: ResolutionRequest) -> Range | None:
        """Run ``workspaceSymbol/resolve`` for a deferred workspace symbol.

        ``None`` means the range is unavailable and the entry cannot be
        navigated to.
        """
        response = await self.dispatcher.request(bufnr, Method.WORKSPACE_SYMBOL_RESOLVE, dict(request.symbol))
        if response is None:
            return None
        try:
            return resolved_range(response)
        except ValidationError as error:
            LOGGER.warning("Malformed workspaceSymbol/resolve response: %s", error)
            return None

    async def _gather(
        self,
        method: Method,
        context: GatherContext,
        params: SourceParams,
        parent: Entry | None,
    ) -> list[Entry] | None:
        if method in LOCATION_METHODS:
            return await self._locations(method, context)
        if method is Method.REFERENCES:
            return await self._references(context, params)
        if method is Method.DOCUMENT_SYMBOL:
            return await self._document_symbols(context, params)
        if method is Method.WORKSPACE_SYMBOL:
            return await self._workspace_symbols(context, params)
        if method in CALL_HIERARCHY_METHODS:
            if parent is not None:
                return await self._expand(method, parent)
            return await self._call_hierarchy(method, context)
        raise AssertionError(f"unhandled method {method.value}")

    async def _position_params(self, context: GatherContext, method: Method) -> dict[str, Any] | None:
        params = await self.identity.position_params(context.bufnr, context.winid)
        if params is None:
            self._identity_unavailable(context, method)
        return params

    def _identity_unavailable(self, context: GatherContext, method: Method) -> None:
        self.events.emit(
            NavEvent(
                ReasonCode.IDENTITY_UNAVAILABLE,
                f"Unable to resolve the document of buffer {context.bufnr}",
                method=method.value,
            )
        )

    async def _locations(self, method: Method, context: GatherContext) -> list[Entry] | None:
        request_params = await self._position_params(context, method)
        if request_params is None:
            return None
        response = await self.dispatcher.request(context.bufnr, method, request_params)
        if response is None:
            return None
        return [location_entry(location) for location in drop_excluded(normalize_locations(response))]

    async def _references(self, context: GatherContext, params: SourceParams) -> list[Entry] | None:
        request_params = await self._position_params(context, Method.REFERENCES)
        if request_params is None:
            return None
        request_params["context"] = {"includeDeclaration": params.include_declaration}
        response = await self.dispatcher.request(context.bufnr, Method.REFERENCES, request_params)
        if response is None:
            return None
        return [location_entry(location) for location in drop_excluded(normalize_references(response))]

    async def _document_symbols(self, context: GatherContext, params: SourceParams) -> list[Entry] | None:
        request_params = await self.identity.document_params(context.bufnr)
        if request_params is None:
            self._identity_unavailable(context, Method.DOCUMENT_SYMBOL)
            return None
        response = await self.dispatcher.request(context.bufnr, Method.DOCUMENT_SYMBOL, request_params)
        if response is None:
            return None
        symbols = normalize_document_symbols(response, context.bufnr)
        return [symbol_entry(symbol, kind_width=params.kind_width) for symbol in symbols]

    async def _workspace_symbols(self, context: GatherContext, params: SourceParams) -> list[Entry] | None:
        query = context.input if params.volatile else params.query
        response = await self.dispatcher.request(context.bufnr, Method.WORKSPACE_SYMBOL, {"query": query})
        if response is None:
            return None
        symbols = normalize_workspace_symbols(response)
        return [symbol_entry(symbol, kind_width=params.kind_width) for symbol in symbols]

    async def _fetch_calls(self, bufnr: int, method: Method, item: HierarchyItem) -> list[CallSite]:
        response = await self.dispatcher.request(bufnr, method, {"item": dict(item.payload)})
        if response is None:
            return []
        return normalize_calls(response)

    async def _call_hierarchy(self, method: Method, context: GatherContext) -> list[Entry] | None:
        request_params = await self._position_params(context, method)
        if request_params is None:
            return None
        response = await self.dispatcher.request(context.bufnr, Method.PREPARE_CALL_HIERARCHY, request_params)
        if response is None:
            return None
        items = normalize_prepared_items(response)
        if not items:
            self.events.emit(
                NavEvent(
                    ReasonCode.EMPTY_RESULT,
                    "Nothing to prepare a call hierarchy for",
                    severity=logging.DEBUG,
                    method=method.value,
                )
            )
            return None

        tree = CallHierarchyTree(partial(self._fetch_calls, context.bufnr, method))
        self.trees[method] = tree
        roots = await tree.expand_all(tree.add_roots(items))
        return [node.to_entry() for node in roots]

    async def _expand(self, method: Method, parent: Entry) -> list[Entry] | None:
        tree = self.trees.get(method)
        node_id = parent.node_id
        if tree is None or node_id is None or node_id not in tree or tree.node(node_id).tree_path != parent.tree_path:
            LOGGER.warning(
                "Cannot expand %s: not part of the current %s tree",
                parent.tree_path or parent.word,
                method.value,
            )
            return None
        children = await tree.expand_children(node_id)
        return [node.to_entry() for node in children]


async def collect(
    source: NavigationSource,
    context: GatherContext,
    params: SourceParams,
    parent: Entry | None = None,
) -> list[list[Entry]]:
    """Drain ``gather`` into a list of batches."""
    return [batch async for batch in source.gather(context, params, parent)]


__all__ = ["GatherContext", "NavigationSource", "collect"]
