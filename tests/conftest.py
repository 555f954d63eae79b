"""Shared test fixtures for the SiliconFlow chat proxy."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from src.core.utils.config import SiliconFlowSettings, CloudSettings
from src.functions.call_silicium import SiliciumProxy
from src.main import app


class FakeUpstream:
    """httpx transport that records requests and answers from a handler."""

    def __init__(self, handler):
        self.requests = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture(autouse=True)
def clear_credential_env(monkeypatch):
    """Keep a developer's real key out of the tests."""
    monkeypatch.delenv("SILICIUM_KEY", raising=False)
    monkeypatch.delenv("SILICONFLOW__API_KEY", raising=False)


@pytest.fixture
def client():
    """Synchronous test client."""
    return TestClient(app)


@pytest.fixture
def upstream_settings():
    """Upstream settings with a test credential."""
    return SiliconFlowSettings(api_key="test-key-123")


@pytest.fixture
def completion_body():
    """Typical successful upstream reply."""
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "model": "deepseek-ai/deepseek-vl2",
        "choices": [{
            "index": 0,
            "message": {"role": "assistant", "content": "Hello!"},
            "finish_reason": "stop"
        }],
        "usage": {"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7}
    }


@pytest.fixture
def fake_upstream():
    """Factory for a recording fake upstream."""
    def _make(handler):
        return FakeUpstream(handler)
    return _make


@pytest.fixture
def make_proxy(upstream_settings):
    """Build a proxy wired to a fake upstream."""
    def _make(upstream: FakeUpstream, settings: SiliconFlowSettings = None):
        return SiliciumProxy(settings or upstream_settings, transport=upstream.transport)
    return _make


@pytest.fixture
def cloud_settings():
    """Cloud settings pointing at a test function host."""
    return CloudSettings(functions_url="http://functions.test/api/v1/functions", env="test-env")
