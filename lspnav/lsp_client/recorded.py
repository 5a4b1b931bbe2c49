"""Replay transport backed by a recording of server answers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import orjson
import yaml
from pydantic import BaseModel, Field, ValidationError

from ..logging import get_logger
from .base import Response

LOGGER = get_logger(__name__)


class RecordingError(ValueError):
    """Raised when a recording file cannot be loaded."""


class RecordedResponse(BaseModel):
    match: dict[str, Any] = Field(default_factory=dict)
    result: list[Any] | None = None


class Recording(BaseModel):
    attached: bool = True
    capabilities: dict[str, bool] = Field(default_factory=dict)
    responses: dict[str, list[RecordedResponse]] = Field(default_factory=dict)


def _is_subset(expected: Any, actual: Any) -> bool:
    if isinstance(expected, Mapping):
        if not isinstance(actual, Mapping):
            return False
        return all(key in actual and _is_subset(value, actual[key]) for key, value in expected.items())
    if isinstance(expected, list):
        if not isinstance(actual, list) or len(expected) != len(actual):
            return False
        return all(_is_subset(left, right) for left, right in zip(expected, actual))
    return expected == actual


class RecordedSession:
    """Serve capabilities and responses from a :class:`Recording`.

    Response rules for a method are tried in order; the first whose ``match``
    object is a subset of the request params wins. A method with no recorded
    rule answers ``None``.
    """

    def __init__(self, recording: Recording) -> None:
        self.recording = recording
        self.requests: list[tuple[int, str, Any]] = []

    @classmethod
    def from_path(cls, path: Path) -> RecordedSession:
        return cls(load_recording(path))

    async def supports_method(self, bufnr: int, method: str) -> bool | None:
        if not self.recording.attached:
            return None
        return self.recording.capabilities.get(method, method in self.recording.responses)

    async def request(self, bufnr: int, method: str, params: Any) -> Response | None:
        self.requests.append((bufnr, method, params))
        for rule in self.recording.responses.get(method, []):
            if _is_subset(rule.match, params):
                return rule.result
        LOGGER.debug("No recorded response for %s", method)
        return None


def load_recording(path: Path) -> Recording:
    try:
        raw = path.read_bytes()
    except OSError as error:
        raise RecordingError(f"Unable to read {path}: {error}") from error
    try:
        if path.suffix.lower() == ".json":
            data = orjson.loads(raw)
        else:
            data = yaml.safe_load(raw) or {}
    except (orjson.JSONDecodeError, yaml.YAMLError) as error:
        raise RecordingError(f"Failed to parse {path}: {error}") from error
    if not isinstance(data, dict):
        raise RecordingError(f"{path} must contain a mapping")
    try:
        return Recording.model_validate(data)
    except ValidationError as error:
        raise RecordingError(f"Invalid recording {path}: {error}") from error


__all__ = ["Recording", "RecordedResponse", "RecordedSession", "RecordingError", "load_recording"]
