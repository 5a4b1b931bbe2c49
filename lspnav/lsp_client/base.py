"""Interfaces of the collaborators lspnav talks to."""

from __future__ import annotations

from typing import Any, Protocol

# One element per server that answered the request.
Response = list[Any]


class LspTransport(Protocol):
    """Performs the remote call against every server attached to a buffer."""

    async def request(self, bufnr: int, method: str, params: Any) -> Response | None:
        """Return the per-server results, or ``None`` when nothing answered."""


class CapabilityProbe(Protocol):
    """Answers whether a method is supported for a buffer."""

    async def supports_method(self, bufnr: int, method: str) -> bool | None:
        """Return ``True``/``False``, or ``None`` when no server is attached."""


class EditorHost(Protocol):
    """Buffer and cursor queries against the editor."""

    async def buffer_path(self, bufnr: int) -> str | None:
        """Return the absolute path (or name) of a buffer, ``None`` if the query failed."""

    async def cursor(self, winid: int) -> tuple[int, int]:
        """Return the 1-indexed ``(line, column)`` of the window's cursor."""


__all__ = ["CapabilityProbe", "EditorHost", "LspTransport", "Response"]
