"""Turn editor buffers and cursors into protocol identifiers."""

from __future__ import annotations

from typing import Any

from .lsp_client.base import EditorHost
from .lsp_client.messages import Position
from .paths import path_to_uri


class IdentityResolver:
    def __init__(self, host: EditorHost) -> None:
        self.host = host

    async def resolve_document(self, bufnr: int) -> str | None:
        path = await self.host.buffer_path(bufnr)
        if path is None:
            return None
        return path_to_uri(path)

    async def resolve_position(self, winid: int) -> Position:
        lnum, col = await self.host.cursor(winid)
        return Position.from_cursor(lnum, col)

    async def document_params(self, bufnr: int) -> dict[str, Any] | None:
        uri = await self.resolve_document(bufnr)
        if uri is None:
            return None
        return {"textDocument": {"uri": uri}}

    async def position_params(self, bufnr: int, winid: int) -> dict[str, Any] | None:
        """Return ``TextDocumentPositionParams`` for the cursor of a window."""
        params = await self.document_params(bufnr)
        if params is None:
            return None
        position = await self.resolve_position(winid)
        params["position"] = position.to_wire()
        return params


__all__ = ["IdentityResolver"]
