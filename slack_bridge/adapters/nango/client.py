"""Nango REST client using aiohttp — implements ConnectionBrokerPort."""

import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

import aiohttp

from slack_bridge.config import NangoConfig

_STATUS_MESSAGES = {
    401: "Authentication failed - token may be expired",
    403: "Insufficient permissions",
    429: "Rate limit exceeded",
}


def _log(msg: str):
    print(f"[{datetime.now().isoformat()}] [nango] {msg}", file=sys.stderr)


class NangoError(Exception):
    """Non-2xx answer from Nango (or from the provider behind its proxy)."""

    def __init__(self, status: int, message: str, body: Any = None):
        self.status = status
        self.body = body
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return self.status == 429 or self.status >= 500


class NangoClient:
    """Async Nango API client (proxy, action trigger, connect sessions)."""

    def __init__(self, config: NangoConfig, timeout: float = 30.0):
        self._config = config
        self._timeout = timeout

    @property
    def is_configured(self) -> bool:
        return self._config.is_configured

    @property
    def provider_config_key(self) -> str:
        return self._config.provider_config_key

    def _headers(self, connection_id: Optional[str] = None) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {self._config.secret_key}"}
        if connection_id:
            headers["Connection-Id"] = connection_id
            headers["Provider-Config-Key"] = self._config.provider_config_key
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        connection_id: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        if not self.is_configured:
            raise NangoError(500, "NANGO_SECRET_KEY environment variable is required")

        url = f"{self._config.host}{path}"
        timeout = aiohttp.ClientTimeout(total=self._timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.request(
                method,
                url,
                headers=self._headers(connection_id),
                params=params,
                json=data,
            ) as resp:
                try:
                    body = await resp.json(content_type=None)
                except ValueError:
                    body = await resp.text()
                if resp.status >= 400:
                    message = _STATUS_MESSAGES.get(resp.status)
                    if message is None:
                        detail = body.get("error", body) if isinstance(body, dict) else body
                        message = f"API call failed: HTTP {resp.status}: {detail}"
                    _log(f"{method} {path} -> {resp.status}")
                    raise NangoError(resp.status, message, body)
                return body if isinstance(body, dict) else {"data": body}

    async def proxy(
        self,
        endpoint: str,
        connection_id: str,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Call a provider API endpoint (e.g. ``/conversations.list``) through Nango."""
        if not endpoint.startswith("/"):
            endpoint = "/" + endpoint
        return await self._request(method, f"/proxy{endpoint}", connection_id, params, data)

    async def trigger_action(
        self,
        connection_id: str,
        action_name: str,
        payload: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Run a pre-built Nango action (e.g. Slack ``send-message``)."""
        return await self._request(
            "POST",
            "/action/trigger",
            connection_id,
            data={"action_name": action_name, "input": payload},
        )

    async def create_connect_session(
        self,
        end_user: Dict[str, Any],
        allowed_integrations: List[str],
    ) -> Dict[str, Any]:
        """Create a Connect UI session token for the OAuth flow."""
        body = await self._request(
            "POST",
            "/connect/sessions",
            data={"end_user": end_user, "allowed_integrations": allowed_integrations},
        )
        data = body.get("data") or {}
        if "token" not in data:
            raise NangoError(502, f"Unexpected connect session response: {body}", body)
        return {"token": data["token"], "expires_at": data.get("expires_at")}
