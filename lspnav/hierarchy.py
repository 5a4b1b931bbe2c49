"""Lazy call-hierarchy tree.

Nodes live in an arena and are addressed by index. A node is immutable:
expanding it stores a new value in its slot with ``state`` and ``children``
filled in. Every node is expanded at most once.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from enum import Enum
from typing import Awaitable, Callable, Iterable, Iterator, Sequence

from .formatting import Entry, call_site_entry, hierarchy_root_entry
from .logging import get_logger
from .lsp_client.messages import Range
from .normalizer import CallSite, HierarchyItem

LOGGER = get_logger(__name__)

ChildFetcher = Callable[[HierarchyItem], Awaitable[list[CallSite]]]


class ExpansionState(str, Enum):
    UNEXPANDED = "unexpanded"
    LEAF = "leaf"
    BRANCH = "branch"


@dataclass(slots=True, frozen=True)
class CallHierarchyNode:
    node_id: int
    item: HierarchyItem
    tree_path: str
    # selection range for roots, call-site range for children
    site: Range
    is_root: bool = False
    state: ExpansionState = ExpansionState.UNEXPANDED
    children: tuple[int, ...] = ()

    @property
    def name(self) -> str:
        return self.item.name

    @property
    def is_tree(self) -> bool | None:
        if self.state is ExpansionState.UNEXPANDED:
            return None
        return self.state is ExpansionState.BRANCH

    def to_entry(self) -> Entry:
        if self.is_root:
            entry = hierarchy_root_entry(self.item)
        else:
            entry = call_site_entry(CallSite(item=self.item, range=self.site))
        return replace(entry, tree_path=self.tree_path, node_id=self.node_id, is_tree=self.is_tree)


def child_path(parent_path: str, name: str) -> str:
    return f"{parent_path}/{name}"


class CallHierarchyTree:
    """Arena of call-hierarchy nodes expanded on demand through ``fetch``."""

    def __init__(self, fetch: ChildFetcher) -> None:
        self.fetch = fetch
        self.nodes: list[CallHierarchyNode] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return isinstance(node_id, int) and 0 <= node_id < len(self.nodes)

    def node(self, node_id: int) -> CallHierarchyNode:
        if node_id not in self:
            raise KeyError(node_id)
        return self.nodes[node_id]

    def _append(self, item: HierarchyItem, tree_path: str, site: Range, *, is_root: bool) -> int:
        node_id = len(self.nodes)
        self.nodes.append(
            CallHierarchyNode(node_id=node_id, item=item, tree_path=tree_path, site=site, is_root=is_root)
        )
        return node_id

    def add_roots(self, items: Iterable[HierarchyItem]) -> list[int]:
        return [
            self._append(item, f"/{item.name}", item.selection_range, is_root=True)
            for item in items
        ]

    async def expand(self, node_id: int) -> CallHierarchyNode:
        """Resolve the children of a node, once."""
        node = self.node(node_id)
        if node.state is not ExpansionState.UNEXPANDED:
            return node

        sites = await self.fetch(node.item)

        # another expansion of the same node may have finished while we waited
        current = self.nodes[node_id]
        if current.state is not ExpansionState.UNEXPANDED:
            return current

        if not sites:
            updated = replace(current, state=ExpansionState.LEAF)
        else:
            children = tuple(
                self._append(site.item, child_path(current.tree_path, site.item.name), site.range, is_root=False)
                for site in sites
            )
            updated = replace(current, state=ExpansionState.BRANCH, children=children)
        self.nodes[node_id] = updated
        LOGGER.debug("Expanded %s: %s (%d children)", updated.tree_path, updated.state.value, len(updated.children))
        return updated

    async def expand_all(self, node_ids: Sequence[int]) -> list[CallHierarchyNode]:
        """Expand siblings concurrently; results keep sibling order.

        Every sibling settles before this returns. The first failure is
        re-raised only after that.
        """
        results = await asyncio.gather(*(self.expand(node_id) for node_id in node_ids), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)

    async def expand_children(self, node_id: int) -> list[CallHierarchyNode]:
        """Expand a node if needed, then look one level into each of its children."""
        node = await self.expand(node_id)
        if node.state is ExpansionState.LEAF:
            return []
        return await self.expand_all(node.children)

    def walk(self, node_id: int, depth: int = 0) -> Iterator[tuple[int, CallHierarchyNode]]:
        """Depth-first ``(depth, node)`` pairs over the expanded part of a subtree."""
        stack = [(depth, node_id)]
        while stack:
            level, current_id = stack.pop()
            node = self.node(current_id)
            yield level, node
            stack.extend((level + 1, child_id) for child_id in reversed(node.children))


__all__ = ["CallHierarchyNode", "CallHierarchyTree", "ChildFetcher", "ExpansionState", "child_path"]
