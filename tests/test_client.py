"""Tests for the client wrapper and cloud initialization."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from src.client.cloud import CloudHandle, CloudInvocationError, init_cloud
from src.client.silicium import SiliciumService, create_silicium_service
from src.core.utils.config import CloudSettings, Settings, SiliconFlowSettings
from src.main import app


def test_init_cloud_unavailable():
    init = init_cloud(CloudSettings(functions_url=None))
    assert init.available is False
    assert init.handle is None
    assert init.error


def test_init_cloud_available(cloud_settings):
    init = init_cloud(cloud_settings)
    assert init.available is True
    assert init.handle.env == "test-env"
    assert init.handle.trace_user is True


def test_create_service_returns_none_without_cloud():
    settings = Settings(cloud=CloudSettings(functions_url=None))
    assert create_silicium_service(settings) is None


def test_create_service(cloud_settings):
    service = create_silicium_service(Settings(cloud=cloud_settings))
    assert isinstance(service, SiliciumService)


def test_build_options_defaults(cloud_settings):
    service = SiliciumService(CloudHandle(cloud_settings), defaults=SiliconFlowSettings())
    assert service.build_options() == {
        "temperature": 0.7,
        "max_tokens": 1500,
        "model": "deepseek-ai/deepseek-vl2",
    }


def test_build_options_merges_caller_values(cloud_settings):
    service = SiliciumService(CloudHandle(cloud_settings), defaults=SiliconFlowSettings())
    options = service.build_options({"temperature": 0.2, "max_tokens": 500})
    assert options["temperature"] == 0.2
    assert options["max_tokens"] == 500


@pytest.mark.asyncio
async def test_send_message_invokes_function(cloud_settings, fake_upstream):
    envelope = {"success": True, "data": "Hello!", "finish_reason": "stop"}
    host = fake_upstream(lambda request: httpx.Response(200, json=envelope))
    service = SiliciumService(CloudHandle(cloud_settings, transport=host.transport))

    result = await service.send_message("Hi", {"temperature": 0.2})

    assert result.success is True
    assert result.data == "Hello!"
    request = host.requests[0]
    assert str(request.url) == "http://functions.test/api/v1/functions/callSilicium"
    assert request.headers["X-Cloud-Env"] == "test-env"
    assert host.last_json() == {
        "message": "Hi",
        "options": {"temperature": 0.2, "max_tokens": 1500, "model": "deepseek-ai/deepseek-vl2"},
    }


@pytest.mark.asyncio
async def test_send_message_returns_function_failure_verbatim(cloud_settings, fake_upstream):
    envelope = {"success": False, "error": "Call failed: rate limited", "code": 429, "details": {}}
    host = fake_upstream(lambda request: httpx.Response(200, json=envelope))
    service = SiliciumService(CloudHandle(cloud_settings, transport=host.transport))

    result = await service.send_message("Hi")

    assert result.to_payload() == envelope


@pytest.mark.asyncio
async def test_send_message_transport_failure(cloud_settings, fake_upstream):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    host = fake_upstream(handler)
    service = SiliciumService(CloudHandle(cloud_settings, transport=host.transport))

    result = await service.send_message("Hi")

    assert result.success is False
    assert result.error == "connection refused"
    assert result.code is None


@pytest.mark.asyncio
async def test_send_message_host_error_status(cloud_settings, fake_upstream):
    host = fake_upstream(lambda request: httpx.Response(502, text="Bad Gateway"))
    service = SiliciumService(CloudHandle(cloud_settings, transport=host.transport))

    result = await service.send_message("Hi")

    assert result.success is False
    assert "502" in result.error


@pytest.mark.asyncio
async def test_send_message_error_without_text_uses_fallback(cloud_settings):
    handle = CloudHandle(cloud_settings)
    handle.call_function = AsyncMock(side_effect=CloudInvocationError(""))
    service = SiliciumService(handle)

    result = await service.send_message("Hi")

    assert result.to_payload() == {"success": False, "error": "Request failed"}


@pytest.mark.asyncio
async def test_send_message_through_function_host(cloud_settings, fake_upstream, make_proxy, completion_body):
    """Client wrapper → function host → fake upstream."""
    upstream = fake_upstream(lambda request: httpx.Response(200, json=completion_body))
    handle = CloudHandle(cloud_settings, transport=httpx.ASGITransport(app=app))
    service = SiliciumService(handle)

    with patch('src.api.routes.functions.get_silicium_proxy', return_value=make_proxy(upstream)):
        result = await service.send_message("Hi", {"max_tokens": 64})

    assert result.success is True
    assert result.data == "Hello!"
    assert upstream.last_json()["max_tokens"] == 64


def test_build_options_follow_configured_defaults(cloud_settings):
    defaults = SiliconFlowSettings(temperature=0.3, max_tokens=800, model_name="Qwen/Qwen2.5-7B-Instruct")
    service = create_silicium_service(Settings(cloud=cloud_settings, siliconflow=defaults))
    assert service.build_options({"max_tokens": 10}) == {
        "temperature": 0.3,
        "max_tokens": 10,
        "model": "Qwen/Qwen2.5-7B-Instruct",
    }


@pytest.mark.asyncio
async def test_send_message_keeps_extra_reply_fields(cloud_settings, fake_upstream):
    envelope = {"success": True, "data": "Hello!", "requestId": "req-7"}
    host = fake_upstream(lambda request: httpx.Response(200, json=envelope))
    service = SiliciumService(CloudHandle(cloud_settings, transport=host.transport))

    result = await service.send_message("Hi")

    assert result.to_payload() == envelope


@pytest.mark.asyncio
async def test_send_message_malformed_reply(cloud_settings, fake_upstream):
    host = fake_upstream(lambda request: httpx.Response(200, json={"success": True}))
    service = SiliciumService(CloudHandle(cloud_settings, transport=host.transport))

    result = await service.send_message("Hi")

    assert result.to_payload() == {"success": False, "error": "Invalid reply from callSilicium"}
