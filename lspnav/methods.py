"""Navigation method tags."""

from __future__ import annotations

from enum import Enum


class Method(str, Enum):
    DECLARATION = "textDocument/declaration"
    DEFINITION = "textDocument/definition"
    TYPE_DEFINITION = "textDocument/typeDefinition"
    IMPLEMENTATION = "textDocument/implementation"
    REFERENCES = "textDocument/references"
    DOCUMENT_SYMBOL = "textDocument/documentSymbol"
    WORKSPACE_SYMBOL = "workspace/symbol"
    INCOMING_CALLS = "callHierarchy/incomingCalls"
    OUTGOING_CALLS = "callHierarchy/outgoingCalls"
    # follow-up requests, never selected directly
    PREPARE_CALL_HIERARCHY = "textDocument/prepareCallHierarchy"
    WORKSPACE_SYMBOL_RESOLVE = "workspaceSymbol/resolve"

    @property
    def selectable(self) -> bool:
        return self not in INTERNAL_METHODS


INTERNAL_METHODS = frozenset({Method.PREPARE_CALL_HIERARCHY, Method.WORKSPACE_SYMBOL_RESOLVE})

LOCATION_METHODS = frozenset(
    {
        Method.DECLARATION,
        Method.DEFINITION,
        Method.TYPE_DEFINITION,
        Method.IMPLEMENTATION,
    }
)

CALL_HIERARCHY_METHODS = frozenset({Method.INCOMING_CALLS, Method.OUTGOING_CALLS})


def parse_method(tag: str) -> Method | None:
    """Return the selectable method for a tag, or ``None`` for anything else."""
    try:
        method = Method(tag)
    except ValueError:
        return None
    return method if method.selectable else None


def selectable_methods() -> list[Method]:
    return [method for method in Method if method.selectable]


__all__ = [
    "CALL_HIERARCHY_METHODS",
    "INTERNAL_METHODS",
    "LOCATION_METHODS",
    "Method",
    "parse_method",
    "selectable_methods",
]
