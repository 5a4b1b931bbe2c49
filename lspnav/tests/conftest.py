"""Shared fixtures."""

from __future__ import annotations

import pytest

from lspnav.events import CollectingEventSink
from lspnav.host import StaticEditorHost
from lspnav.lsp_client.recorded import RecordedSession
from lspnav.source import GatherContext, NavigationSource
from lspnav.tests.wire import BUFNR, FILE_PATH, WINID


@pytest.fixture()
def events() -> CollectingEventSink:
    return CollectingEventSink()


@pytest.fixture()
def host() -> StaticEditorHost:
    return StaticEditorHost(buffers={BUFNR: FILE_PATH}, cursors={WINID: (5, 3)})


@pytest.fixture()
def context() -> GatherContext:
    return GatherContext(bufnr=BUFNR, winid=WINID)


@pytest.fixture()
def build_source(host: StaticEditorHost, events: CollectingEventSink):
    def _build(session: RecordedSession) -> NavigationSource:
        return NavigationSource(session, session, host, events=events)

    return _build
