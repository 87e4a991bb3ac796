"""Unit tests for the Slack integration routes."""

import pytest
from unittest.mock import AsyncMock, MagicMock
from httpx import AsyncClient, ASGITransport

from slack_bridge.adapters.nango.client import NangoError
from slack_bridge.adapters.web.server import create_app
from slack_bridge.config import AppConfig, NangoConfig
from slack_bridge.server.state import AppState


def _nango(configured=True):
    mock = MagicMock()
    mock.is_configured = configured
    mock.proxy = AsyncMock()
    mock.trigger_action = AsyncMock()
    mock.create_connect_session = AsyncMock()
    return mock


@pytest.fixture
def nango():
    return _nango()


@pytest.fixture
def transport(nango):
    state = AppState(AppConfig(environment="test", nango=NangoConfig(secret_key="sk")), nango=nango)
    return ASGITransport(app=create_app(state))


@pytest.fixture
def unconfigured_transport():
    state = AppState(AppConfig(environment="test"), nango=_nango(configured=False))
    return ASGITransport(app=create_app(state))


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_unconfigured(self, unconfigured_transport):
        async with AsyncClient(transport=unconfigured_transport, base_url="http://test") as ac:
            resp = await ac.post("/api/integrations/slack/send-message", json={
                "nangoConnectionId": "c", "channel": "#g", "text": "hi",
            })
        assert resp.status_code == 503

    @pytest.mark.asyncio
    async def test_missing_fields(self, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/integrations/slack/send-message", json={"channel": "#g"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_success(self, transport, nango):
        nango.trigger_action.return_value = {"ok": True, "ts": "1.1", "channel": "C1"}
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/integrations/slack/send-message", json={
                "nangoConnectionId": "c", "channel": "#general", "text": "hi",
            })
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["data"]["messageId"] == "1.1"
        assert data["meta"]["integration"] == "slack"

    @pytest.mark.asyncio
    async def test_auth_failure_is_401(self, transport, nango):
        nango.trigger_action.side_effect = NangoError(401, "Authentication failed - token may be expired")
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/integrations/slack/send-message", json={
                "nangoConnectionId": "c", "channel": "#general", "text": "hi",
            })
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "AUTHENTICATION_FAILED"

    @pytest.mark.asyncio
    async def test_info(self, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/api/integrations/slack/send-message")
        assert resp.status_code == 200
        assert resp.json()["requiredFields"] == ["nangoConnectionId", "channel", "text"]


class TestReads:
    @pytest.mark.asyncio
    async def test_channels(self, transport, nango):
        nango.proxy.return_value = {"ok": True, "channels": [{"id": "C1", "name": "general"}]}
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/integrations/slack/channels", json={"nangoConnectionId": "c", "limit": 5})
        assert resp.status_code == 200
        assert resp.json()["data"]["channels"][0]["name"] == "general"
        assert nango.proxy.await_args.kwargs["params"]["limit"] == 5

    @pytest.mark.asyncio
    async def test_users(self, transport, nango):
        nango.proxy.return_value = {"ok": True, "members": [{"id": "U1", "name": "jane"}]}
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/integrations/slack/users", json={"nangoConnectionId": "c"})
        assert resp.status_code == 200
        assert resp.json()["data"]["users"][0]["id"] == "U1"

    @pytest.mark.asyncio
    async def test_user_info_not_found(self, transport, nango):
        nango.proxy.return_value = {"ok": False, "error": "user_not_found"}
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/integrations/slack/user-info", json={"nangoConnectionId": "c", "user": "U9"})
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "RESOURCE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_health(self, transport, nango):
        nango.proxy.side_effect = [{"ok": True}, {"ok": True, "channels": []}]
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/integrations/slack/health", json={"nangoConnectionId": "c"})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["status"] == "healthy"
        assert data["checks"]["apiAccess"] is True


class TestAIMessage:
    @pytest.mark.asyncio
    async def test_success(self, transport, nango):
        nango.trigger_action.return_value = {"ok": True, "ts": "9.9"}
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/integrations/slack/ai-message", json={
                "nangoConnectionId": "c",
                "command": "send 'Good morning' to the development channel",
            })
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["messageId"] == "9.9"
        assert data["parsedCommand"] == {
            "originalCommand": "send 'Good morning' to the development channel",
            "extractedMessage": "Good morning",
            "extractedChannel": "#dev",
        }
        assert nango.trigger_action.await_args.args[2] == {"channel": "#dev", "text": "Good morning"}

    @pytest.mark.asyncio
    async def test_parse_failure(self, transport, nango):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/integrations/slack/ai-message", json={
                "nangoConnectionId": "c", "command": "xyzzy plugh",
            })
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "INVALID_REQUEST"
        assert len(error["details"]["examples"]) == 3
        nango.trigger_action.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_channel_not_found(self, transport, nango):
        nango.trigger_action.return_value = {"ok": False, "error": "channel_not_found"}
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/integrations/slack/ai-message", json={
                "nangoConnectionId": "c", "command": "send 'hi' to the bowling club",
            })
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["message"] == 'Channel "#bowling-club" not found or not accessible'
        assert error["details"]["originalChannel"] == "#bowling-club"
        assert len(error["details"]["suggestions"]) == 3

    @pytest.mark.asyncio
    async def test_missing_command(self, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/integrations/slack/ai-message", json={"nangoConnectionId": "c"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_help(self, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/api/integrations/slack/ai-message")
        assert resp.status_code == 200
        assert "supportedPatterns" in resp.json()["data"]


class TestStatus:
    @pytest.mark.asyncio
    async def test_status(self, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/status")
        assert resp.status_code == 200
        data = resp.json()
        assert data["nangoConfigured"] is True
        assert data["tools"] == 6
        assert data["environment"] == "test"
