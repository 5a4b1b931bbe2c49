"""Tests for the lazy call-hierarchy tree."""

from __future__ import annotations

import asyncio

import pytest

from lspnav.hierarchy import CallHierarchyTree, ExpansionState
from lspnav.lsp_client.messages import Position, Range
from lspnav.normalizer import CallSite, HierarchyItem, to_hierarchy_item
from lspnav.tests.wire import wire_item


def _item(name: str) -> HierarchyItem:
    return to_hierarchy_item(wire_item(name))


def _site(name: str, line: int = 0) -> CallSite:
    return CallSite(item=_item(name), range=Range(Position(line, 0), Position(line, 1)))


class FakeCalls:
    """Answer children per item name, recording every fetch."""

    def __init__(
        self,
        graph: dict[str, list[CallSite]],
        delays: dict[str, float] | None = None,
        failures: dict[str, Exception] | None = None,
    ) -> None:
        self.graph = graph
        self.delays = delays or {}
        self.failures = failures or {}
        self.fetched: list[str] = []
        self.finished: list[str] = []

    async def __call__(self, item: HierarchyItem) -> list[CallSite]:
        self.fetched.append(item.name)
        await asyncio.sleep(self.delays.get(item.name, 0))
        if item.name in self.failures:
            raise self.failures[item.name]
        self.finished.append(item.name)
        return list(self.graph.get(item.name, []))


@pytest.mark.asyncio
async def test_tree_paths_at_every_depth() -> None:
    calls = FakeCalls({"main": [_site("parse")], "parse": [_site("tokenize")]})
    tree = CallHierarchyTree(calls)
    (root_id,) = tree.add_roots([_item("main")])

    root = await tree.expand(root_id)
    (parse,) = await tree.expand_all(root.children)
    (tokenize,) = await tree.expand_all(parse.children)

    assert tree.node(root_id).tree_path == "/main"
    assert parse.tree_path == "/main/parse"
    assert tokenize.tree_path == "/main/parse/tokenize"
    assert tokenize.state is ExpansionState.LEAF
    assert [node.tree_path for _, node in tree.walk(root_id)] == ["/main", "/main/parse", "/main/parse/tokenize"]


@pytest.mark.asyncio
async def test_expansion_marks_leaf_or_branch_once() -> None:
    calls = FakeCalls({"main": [_site("a", 3), _site("a", 8)]})
    tree = CallHierarchyTree(calls)
    (root_id,) = tree.add_roots([_item("main")])
    assert tree.node(root_id).is_tree is None

    root = await tree.expand(root_id)
    assert root.state is ExpansionState.BRANCH
    assert root.is_tree is True
    assert len(root.children) == 2

    again = await tree.expand(root_id)
    assert again is root
    assert calls.fetched == ["main"]


@pytest.mark.asyncio
async def test_leaf_children_expand_to_empty_batch() -> None:
    calls = FakeCalls({})
    tree = CallHierarchyTree(calls)
    (root_id,) = tree.add_roots([_item("lonely")])
    await tree.expand(root_id)

    assert tree.node(root_id).state is ExpansionState.LEAF
    assert await tree.expand_children(root_id) == []
    assert await tree.expand_children(root_id) == []
    assert calls.fetched == ["lonely"]


@pytest.mark.asyncio
async def test_siblings_expand_concurrently_and_keep_order() -> None:
    calls = FakeCalls(
        {"main": [_site("slow"), _site("fast")], "fast": [_site("x")]},
        delays={"slow": 0.05, "fast": 0.0},
    )
    tree = CallHierarchyTree(calls)
    (root_id,) = tree.add_roots([_item("main")])

    children = await tree.expand_children(root_id)

    assert [node.name for node in children] == ["slow", "fast"]
    assert calls.finished[-2:] == ["fast", "slow"]
    assert [node.state for node in children] == [ExpansionState.LEAF, ExpansionState.BRANCH]


@pytest.mark.asyncio
async def test_re_expanding_resolved_children_keeps_paths() -> None:
    calls = FakeCalls({"main": [_site("a")], "a": [_site("b")]})
    tree = CallHierarchyTree(calls)
    (root_id,) = tree.add_roots([_item("main")])

    first = await tree.expand_children(root_id)
    size = len(tree)
    second = await tree.expand_children(root_id)

    assert first == second
    assert len(tree) == size
    assert [node.tree_path for node in second] == ["/main/a"]
    assert calls.fetched == ["main", "a"]


@pytest.mark.asyncio
async def test_same_named_siblings_share_a_path() -> None:
    calls = FakeCalls({"main": [_site("log", 1), _site("log", 2)]})
    tree = CallHierarchyTree(calls)
    (root_id,) = tree.add_roots([_item("main")])
    children = await tree.expand_children(root_id)

    assert [node.tree_path for node in children] == ["/main/log", "/main/log"]
    assert children[0].node_id != children[1].node_id


@pytest.mark.asyncio
async def test_entries_carry_tree_state() -> None:
    calls = FakeCalls({"main": [_site("a", 4)]})
    tree = CallHierarchyTree(calls)
    (root_id,) = tree.add_roots([_item("main")])
    root = await tree.expand(root_id)

    root_entry = root.to_entry()
    assert root_entry.word == "main"
    assert root_entry.tree_path == "/main"
    assert root_entry.is_tree is True
    assert root_entry.node_id == root_id

    child_entry = tree.node(root.children[0]).to_entry()
    assert child_entry.display == "a:5:1"
    assert child_entry.tree_path == "/main/a"
    assert child_entry.is_tree is None


def test_unknown_node_raises_key_error() -> None:
    tree = CallHierarchyTree(FakeCalls({}))
    with pytest.raises(KeyError):
        tree.node(0)


@pytest.mark.asyncio
async def test_failed_sibling_waits_for_the_others() -> None:
    calls = FakeCalls(
        {"slow": [_site("x")]},
        delays={"slow": 0.05},
        failures={"bad": ValueError("malformed")},
    )
    tree = CallHierarchyTree(calls)
    bad_id, slow_id = tree.add_roots([_item("bad"), _item("slow")])

    with pytest.raises(ValueError, match="malformed"):
        await tree.expand_all([bad_id, slow_id])

    assert calls.finished == ["slow"]
    assert tree.node(slow_id).state is ExpansionState.BRANCH
    assert tree.node(bad_id).state is ExpansionState.UNEXPANDED
    size = len(tree)
    await asyncio.sleep(0.06)
    assert len(tree) == size


@pytest.mark.asyncio
async def test_walk_handles_deep_chains() -> None:
    depth = 1500
    graph = {f"f{index}": [_site(f"f{index + 1}")] for index in range(depth)}
    tree = CallHierarchyTree(FakeCalls(graph))
    (node_id,) = tree.add_roots([_item("f0")])
    for _ in range(depth):
        node = await tree.expand(node_id)
        node_id = node.children[0]

    pairs = list(tree.walk(0))
    assert len(pairs) == depth + 1
    assert pairs[-1][0] == depth
    assert pairs[-1][1].name == f"f{depth}"
