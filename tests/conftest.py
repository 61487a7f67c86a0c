"""Pytest configuration and shared fixtures.

This file ensures that:
- `src/` is importable
- HTTP traffic is served by `httpx.MockTransport` handlers, never the network
- the loading of `conf/bynder.yml` is not influenced by the caller's environment
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

# Ensure src directory is in path for imports
repo_root = Path(__file__).parent.parent
src_path = repo_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from bynder_sdk.config import TransportAgents  # noqa: E402

BASE_URL = "https://portal.example.com"

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """Mock transport that keeps every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BYNDER_CONFIG_PATH", raising=False)


@pytest.fixture
def make_agents() -> Callable[[Handler], tuple[TransportAgents, RecordingTransport]]:
    def _make(handler: Handler) -> tuple[TransportAgents, RecordingTransport]:
        transport = RecordingTransport(handler)
        return TransportAgents(http=transport, https=transport), transport

    return _make
