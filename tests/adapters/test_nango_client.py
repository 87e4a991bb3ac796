"""Unit tests for NangoClient."""

import pytest
from unittest.mock import patch

from slack_bridge.adapters.nango.client import NangoClient, NangoError
from slack_bridge.config import NangoConfig


def _mock_aiohttp_session(responses, calls):
    """Return a class replacing aiohttp.ClientSession.
    responses: list of (status, body) consumed in order by request() calls.
    calls: list that receives (method, url, kwargs) for each request.
    """
    call_idx = 0

    class FakeResponse:
        def __init__(self, status, data):
            self.status = status
            self._data = data

        async def json(self, content_type=None):
            if isinstance(self._data, str):
                raise ValueError("not json")
            return self._data

        async def text(self):
            return str(self._data)

        async def __aenter__(self):
            return self

        async def __aexit__(self, *args):
            pass

    class FakeSession:
        def __init__(self, *args, **kwargs):
            pass

        def request(self, method, url, **kwargs):
            nonlocal call_idx
            calls.append((method, url, kwargs))
            status, data = responses[call_idx]
            call_idx += 1
            return FakeResponse(status, data)

        async def __aenter__(self):
            return self

        async def __aexit__(self, *args):
            pass

    return FakeSession


@pytest.fixture
def client():
    return NangoClient(NangoConfig(secret_key="sk-test", host="https://nango.test"))


class TestIsConfigured:
    def test_configured(self, client):
        assert client.is_configured is True

    def test_unconfigured(self):
        assert NangoClient(NangoConfig()).is_configured is False

    @pytest.mark.asyncio
    async def test_unconfigured_raises(self):
        with pytest.raises(NangoError) as exc:
            await NangoClient(NangoConfig()).proxy("/auth.test", "conn")
        assert "NANGO_SECRET_KEY" in str(exc.value)


class TestProxy:
    @pytest.mark.asyncio
    async def test_headers_and_url(self, client):
        calls = []
        session = _mock_aiohttp_session([(200, {"ok": True})], calls)
        with patch("slack_bridge.adapters.nango.client.aiohttp.ClientSession", session):
            body = await client.proxy("conversations.list", "conn-1", params={"limit": 1})
        assert body == {"ok": True}
        method, url, kwargs = calls[0]
        assert method == "GET"
        assert url == "https://nango.test/proxy/conversations.list"
        assert kwargs["params"] == {"limit": 1}
        assert kwargs["headers"] == {
            "Authorization": "Bearer sk-test",
            "Connection-Id": "conn-1",
            "Provider-Config-Key": "slack",
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,message", [
        (401, "Authentication failed - token may be expired"),
        (403, "Insufficient permissions"),
        (429, "Rate limit exceeded"),
    ])
    async def test_known_statuses(self, client, status, message):
        session = _mock_aiohttp_session([(status, {"error": "x"})], [])
        with patch("slack_bridge.adapters.nango.client.aiohttp.ClientSession", session):
            with pytest.raises(NangoError) as exc:
                await client.proxy("/users.list", "conn-1")
        assert exc.value.status == status
        assert str(exc.value) == message

    @pytest.mark.asyncio
    async def test_other_status_includes_body(self, client):
        session = _mock_aiohttp_session([(502, "bad gateway")], [])
        with patch("slack_bridge.adapters.nango.client.aiohttp.ClientSession", session):
            with pytest.raises(NangoError) as exc:
                await client.proxy("/users.list", "conn-1")
        assert "HTTP 502" in str(exc.value)
        assert "bad gateway" in str(exc.value)
        assert exc.value.is_retryable is True


class TestTriggerAction:
    @pytest.mark.asyncio
    async def test_body(self, client):
        calls = []
        session = _mock_aiohttp_session([(200, {"ok": True, "ts": "1.2"})], calls)
        with patch("slack_bridge.adapters.nango.client.aiohttp.ClientSession", session):
            body = await client.trigger_action("conn-1", "send-message", {"channel": "#g", "text": "hi"})
        assert body["ts"] == "1.2"
        method, url, kwargs = calls[0]
        assert method == "POST"
        assert url == "https://nango.test/action/trigger"
        assert kwargs["json"] == {"action_name": "send-message", "input": {"channel": "#g", "text": "hi"}}


class TestConnectSession:
    @pytest.mark.asyncio
    async def test_returns_token(self, client):
        calls = []
        session = _mock_aiohttp_session(
            [(200, {"data": {"token": "tok", "expires_at": "2026-01-01T00:00:00Z"}})], calls,
        )
        with patch("slack_bridge.adapters.nango.client.aiohttp.ClientSession", session):
            result = await client.create_connect_session({"id": "u1"}, ["slack"])
        assert result == {"token": "tok", "expires_at": "2026-01-01T00:00:00Z"}
        _, url, kwargs = calls[0]
        assert url == "https://nango.test/connect/sessions"
        assert "Connection-Id" not in kwargs["headers"]
        assert kwargs["json"] == {"end_user": {"id": "u1"}, "allowed_integrations": ["slack"]}

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        session = _mock_aiohttp_session([(200, {"data": {}})], [])
        with patch("slack_bridge.adapters.nango.client.aiohttp.ClientSession", session):
            with pytest.raises(NangoError) as exc:
                await client.create_connect_session({"id": "u1"}, ["slack"])
        assert exc.value.status == 502


class TestNangoError:
    def test_retryable(self):
        assert NangoError(429, "x").is_retryable is True
        assert NangoError(503, "x").is_retryable is True
        assert NangoError(404, "x").is_retryable is False
