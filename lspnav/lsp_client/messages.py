"""Typed messages for LSP communication.

Two layers live here. The ``Wire*`` pydantic models mirror the protocol
payloads a server sends back (camelCase on the wire). The plain dataclasses
are the canonical values everything past the normaliser works with.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


@dataclass(slots=True, frozen=True)
class Position:
    """Zero-indexed line and character offset."""

    line: int
    character: int

    @classmethod
    def from_cursor(cls, lnum: int, col: int) -> Position:
        """Build a protocol position from a 1-indexed editor cursor."""
        return cls(line=lnum - 1, character=col - 1)

    def to_cursor(self) -> tuple[int, int]:
        return self.line + 1, self.character + 1

    def to_wire(self) -> dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass(slots=True, frozen=True)
class Range:
    start: Position
    end: Position

    def to_wire(self) -> dict[str, dict[str, int]]:
        return {"start": self.start.to_wire(), "end": self.end.to_wire()}


@dataclass(slots=True, frozen=True)
class Location:
    uri: str
    range: Range


@dataclass(slots=True, frozen=True)
class BufferTarget:
    """A range inside the buffer the request was issued from."""

    bufnr: int
    range: Range


@dataclass(slots=True, frozen=True)
class ResolutionRequest:
    """A workspace symbol whose range needs a ``workspaceSymbol/resolve`` round trip."""

    uri: str
    symbol: Mapping[str, Any]


NavigationTarget = Union[Location, BufferTarget, ResolutionRequest]


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)


class WirePosition(WireModel):
    line: int
    character: int

    def to_position(self) -> Position:
        return Position(line=self.line, character=self.character)


class WireRange(WireModel):
    start: WirePosition
    end: WirePosition

    def to_range(self) -> Range:
        return Range(start=self.start.to_position(), end=self.end.to_position())


class WireLocation(WireModel):
    uri: str
    range: WireRange

    def to_location(self) -> Location:
        return Location(uri=self.uri, range=self.range.to_range())


class WireLocationLink(WireModel):
    origin_selection_range: WireRange | None = None
    target_uri: str
    target_range: WireRange
    target_selection_range: WireRange

    def to_location(self) -> Location:
        return Location(uri=self.target_uri, range=self.target_selection_range.to_range())


class WireUriLocation(WireModel):
    uri: str


class WireSymbolInformation(WireModel):
    name: str
    kind: int
    location: WireLocation
    container_name: str | None = None


class WireDocumentSymbol(WireModel):
    name: str
    kind: int
    detail: str | None = None
    range: WireRange
    selection_range: WireRange


class WireWorkspaceSymbol(WireModel):
    name: str
    kind: int
    location: WireUriLocation
    container_name: str | None = None


class WireCallHierarchyItem(WireModel):
    name: str
    kind: int
    uri: str
    range: WireRange
    selection_range: WireRange
    detail: str | None = None


class WireIncomingCall(WireModel):
    from_: WireCallHierarchyItem = Field(alias="from")
    from_ranges: list[WireRange]


class WireOutgoingCall(WireModel):
    to: WireCallHierarchyItem
    from_ranges: list[WireRange]


__all__ = [
    "BufferTarget",
    "Location",
    "NavigationTarget",
    "Position",
    "Range",
    "ResolutionRequest",
    "WireCallHierarchyItem",
    "WireDocumentSymbol",
    "WireIncomingCall",
    "WireLocation",
    "WireLocationLink",
    "WireOutgoingCall",
    "WirePosition",
    "WireRange",
    "WireSymbolInformation",
    "WireWorkspaceSymbol",
]
