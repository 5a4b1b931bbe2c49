"""Editor host for running outside an editor."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class StaticEditorHost:
    """Serve fixed buffer names and cursors, keyed by buffer and window number."""

    buffers: dict[int, str] = field(default_factory=dict)
    cursors: dict[int, tuple[int, int]] = field(default_factory=dict)

    @classmethod
    def for_file(cls, path: str | Path, line: int = 1, col: int = 1, *, bufnr: int = 1, winid: int = 1000) -> StaticEditorHost:
        name = str(path)
        if "://" not in name and not name.startswith(("deno:", "untitled:")):
            name = str(Path(name).resolve())
        return cls(buffers={bufnr: name}, cursors={winid: (line, col)})

    async def buffer_path(self, bufnr: int) -> str | None:
        return self.buffers.get(bufnr)

    async def cursor(self, winid: int) -> tuple[int, int]:
        return self.cursors.get(winid, (1, 1))


__all__ = ["StaticEditorHost"]
