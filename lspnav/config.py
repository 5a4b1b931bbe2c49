"""Configuration models for lspnav."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SourceParams(BaseModel):
    method: str = ""
    query: str = ""
    volatile: bool = False
    include_declaration: bool = True
    kind_width: int = Field(default=15, ge=0)


class LspnavConfig(BaseModel):
    recording: str | None = None
    log_level: str = "INFO"
    expand_depth: int = Field(default=1, ge=0)
    source: SourceParams = Field(default_factory=SourceParams)


__all__ = ["LspnavConfig", "SourceParams"]
