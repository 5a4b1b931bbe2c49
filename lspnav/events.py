"""Structured events for terminal conditions of a navigation request."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from .logging import get_logger

LOGGER = get_logger(__name__)


class ReasonCode(str, Enum):
    CONFIGURATION_ERROR = "configuration-error"
    CAPABILITY_ABSENT = "capability-absent"
    EMPTY_RESULT = "empty-result"
    IDENTITY_UNAVAILABLE = "identity-unavailable"
    MALFORMED_RESPONSE = "malformed-response"


@dataclass(slots=True, frozen=True)
class NavEvent:
    """A terminal condition reported instead of raising to the consumer."""

    reason: ReasonCode
    message: str
    severity: int = logging.WARNING
    method: str | None = None


class EventSink(Protocol):
    def emit(self, event: NavEvent) -> None:
        """Receive one event."""


class LoggingEventSink:
    """Write each event as a single log line at the event's severity.

    Empty results are not logged at any level.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or LOGGER

    def emit(self, event: NavEvent) -> None:
        if event.reason is ReasonCode.EMPTY_RESULT:
            return
        self.logger.log(event.severity, "%s [%s]", event.message, event.reason.value)


@dataclass(slots=True)
class CollectingEventSink:
    """Keep events in memory."""

    events: list[NavEvent] = field(default_factory=list)

    def emit(self, event: NavEvent) -> None:
        self.events.append(event)

    def reasons(self) -> list[ReasonCode]:
        return [event.reason for event in self.events]


__all__ = ["CollectingEventSink", "EventSink", "LoggingEventSink", "NavEvent", "ReasonCode"]
