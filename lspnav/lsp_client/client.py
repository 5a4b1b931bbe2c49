"""Request dispatch against the attached language servers."""

from __future__ import annotations

import logging
from typing import Any

from ..events import EventSink, LoggingEventSink, NavEvent, ReasonCode
from ..logging import get_logger
from ..methods import Method, parse_method
from .base import CapabilityProbe, LspTransport, Response

LOGGER = get_logger(__name__)


class RequestDispatcher:
    """Validate a method tag, negotiate support and perform the request.

    Every terminal condition is reported through the event sink; nothing is
    raised to the caller.
    """

    def __init__(
        self,
        transport: LspTransport,
        probe: CapabilityProbe,
        events: EventSink | None = None,
    ) -> None:
        self.transport = transport
        self.probe = probe
        self.events = events or LoggingEventSink()

    async def check(self, bufnr: int, tag: str) -> Method | None:
        """Return the method if it is known and supported for the buffer."""
        method = parse_method(tag)
        if method is None:
            self.events.emit(
                NavEvent(ReasonCode.CONFIGURATION_ERROR, f"Unknown method: {tag}", method=tag)
            )
            return None

        supported = await self.probe.supports_method(bufnr, method.value)
        if supported is False:
            self.events.emit(
                NavEvent(
                    ReasonCode.CAPABILITY_ABSENT,
                    f"{method.value} is not supported by any of the servers",
                    method=method.value,
                )
            )
            return None
        if supported is None:
            self.events.emit(
                NavEvent(ReasonCode.CAPABILITY_ABSENT, "No server attached", method=method.value)
            )
            return None
        return method

    async def request(self, bufnr: int, method: Method, params: Any) -> Response | None:
        """Perform the call; ``None`` means no server produced a result."""
        LOGGER.debug("Requesting %s for buffer %s", method.value, bufnr)
        response = await self.transport.request(bufnr, method.value, params)
        if response is None:
            self.events.emit(
                NavEvent(
                    ReasonCode.EMPTY_RESULT,
                    f"{method.value} returned no result",
                    severity=logging.DEBUG,
                    method=method.value,
                )
            )
            return None
        return list(response)

    async def dispatch(self, bufnr: int, tag: str, params: Any) -> Response | None:
        method = await self.check(bufnr, tag)
        if method is None:
            return None
        return await self.request(bufnr, method, params)


__all__ = ["RequestDispatcher"]
