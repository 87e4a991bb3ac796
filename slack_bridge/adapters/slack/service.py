"""Slack operations over Nango — implements MessagingPort.

Every operation takes the Nango connection id explicitly, so one service
instance is shared by all requests. Reads go through the Nango proxy and
are retried on rate limits and 5xx; sends use Nango's pre-built
``send-message`` action and are never retried.
"""

import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from slack_bridge.adapters.nango.client import NangoError
from slack_bridge.adapters.slack.transform import to_standard_channel, to_standard_user
from slack_bridge.domain.errors import ErrorCode, slack_error_suggestion
from slack_bridge.domain.models import HealthReport, IntegrationError, IntegrationResponse, now_iso
from slack_bridge.infrastructure.retry import retry
from slack_bridge.ports.outbound import ConnectionBrokerPort, SendResult

MAX_MESSAGE_LENGTH = 4000
MAX_PAGE_SIZE = 1000
DEFAULT_CHANNEL_TYPES = "public_channel,private_channel"


def _log(msg: str):
    print(f"[{datetime.now().isoformat()}] [slack] {msg}", file=sys.stderr)


@dataclass
class SendMessageRequest:
    channel: str
    text: str
    thread_ts: Optional[str] = None
    username: Optional[str] = None
    icon_emoji: Optional[str] = None

    def validate(self) -> List[str]:
        errors = []
        if not self.channel or not self.channel.strip():
            errors.append("Channel is required")
        if not self.text or not self.text.strip():
            errors.append("Message text is required")
        elif len(self.text) > MAX_MESSAGE_LENGTH:
            errors.append("Message too long")
        return errors


def _query(**kwargs: Any) -> Dict[str, Any]:
    """Drop unset values; Slack wants booleans as "true"/"false"."""
    out: Dict[str, Any] = {}
    for key, value in kwargs.items():
        if value is None:
            continue
        out[key] = ("true" if value else "false") if isinstance(value, bool) else value
    return out


def _code_for_status(status: int) -> ErrorCode:
    if status == 401:
        return ErrorCode.AUTHENTICATION_FAILED
    if status == 403:
        return ErrorCode.INSUFFICIENT_PERMISSIONS
    if status == 429:
        return ErrorCode.RATE_LIMITED
    if status >= 500:
        return ErrorCode.SERVICE_UNAVAILABLE
    return ErrorCode.API_ERROR


class SlackService:
    """Slack integration service: messages, users, channels, health."""

    id = "slack"
    name = "Slack"
    description = "Send messages, fetch users, and manage channels in Slack"
    version = "1.0.0"

    SUPPORTED_OPERATIONS = [
        "sendMessage",
        "getUserInfo",
        "getUsers",
        "getChannels",
        "testConnection",
    ]
    REQUIRED_PERMISSIONS = [
        "channels:read",
        "chat:write",
        "users:read",
        "users:read.email",
    ]
    CONFIGURATION_FIELDS = [
        {
            "key": "nangoConnectionId",
            "label": "Nango Connection ID",
            "type": "string",
            "required": True,
            "description": "The connection ID from Nango for this Slack workspace",
        },
        {
            "key": "defaultChannel",
            "label": "Default Channel",
            "type": "string",
            "required": False,
            "description": "Default channel for sending messages (optional)",
        },
    ]

    def __init__(
        self,
        nango: ConnectionBrokerPort,
        max_attempts: int = 3,
        base_delay: float = 1.0,
    ):
        self._nango = nango
        self._max_attempts = max_attempts
        self._base_delay = base_delay

    @property
    def is_configured(self) -> bool:
        return self._nango.is_configured

    def get_metadata(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "supportedOperations": list(self.SUPPORTED_OPERATIONS),
            "requiredPermissions": list(self.REQUIRED_PERMISSIONS),
            "configurationFields": [dict(f) for f in self.CONFIGURATION_FIELDS],
        }

    # ── Envelope helpers ──

    def _meta(self) -> Dict[str, str]:
        return {"timestamp": now_iso(), "integration": self.id, "version": self.version}

    def _ok(self, data: Any) -> IntegrationResponse:
        return IntegrationResponse(success=True, data=data, meta=self._meta())

    def _fail(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> IntegrationResponse:
        return IntegrationResponse(
            success=False,
            error=IntegrationError(code=code.value, message=message, details=details),
            meta=self._meta(),
        )

    def _fail_from_exception(self, prefix: str, e: Exception) -> IntegrationResponse:
        code = _code_for_status(e.status) if isinstance(e, NangoError) else ErrorCode.API_ERROR
        _log(f"{prefix}: {e}")
        return self._fail(code, f"{prefix}: {e}")

    async def _api_call(self, endpoint: str, connection_id: str, params: Dict[str, Any]) -> Dict[str, Any]:
        return await retry(
            lambda: self._nango.proxy(endpoint, connection_id, method="GET", params=params),
            max_attempts=self._max_attempts,
            base_delay=self._base_delay,
            should_retry=lambda e: isinstance(e, NangoError) and e.is_retryable,
        )

    # ── Operations ──

    async def send_message(self, connection_id: str, request: SendMessageRequest) -> IntegrationResponse:
        errors = request.validate()
        if errors:
            return self._fail(ErrorCode.INVALID_REQUEST, f"Validation failed: {', '.join(errors)}")

        payload: Dict[str, Any] = {"channel": request.channel, "text": request.text}
        for key in ("thread_ts", "username", "icon_emoji"):
            value = getattr(request, key)
            if value:
                payload[key] = value

        try:
            response = await self._nango.trigger_action(connection_id, "send-message", payload)
        except Exception as e:
            return self._fail_from_exception("Failed to send message", e)

        if not response.get("ok"):
            slack_error = response.get("error") or "Unknown error"
            suggestion = slack_error_suggestion(response.get("error"))
            _log(f"send-message to {request.channel} failed: {slack_error}")
            return self._fail(
                ErrorCode.API_ERROR,
                f"Failed to send message: {slack_error} {suggestion}",
                {
                    "slackError": response.get("error"),
                    "suggestions": suggestion,
                    "errorType": response.get("error"),
                },
            )

        ts = response.get("ts") or ""
        return self._ok({
            "messageId": ts,
            "timestamp": ts,
            "channel": response.get("channel") or request.channel,
        })

    async def send(self, connection_id: str, channel: str, text: str) -> SendResult:
        response = await self.send_message(connection_id, SendMessageRequest(channel=channel, text=text))
        if response.success:
            return SendResult(success=True, message_id=response.data.get("messageId"))
        return SendResult(
            success=False,
            error_code=response.error.code,
            error=response.error.message,
        )

    async def get_users(
        self,
        connection_id: str,
        cursor: Optional[str] = None,
        limit: int = 100,
        include_locale: Optional[bool] = None,
    ) -> IntegrationResponse:
        if not 1 <= limit <= MAX_PAGE_SIZE:
            return self._fail(ErrorCode.INVALID_REQUEST, f"Validation failed: limit must be 1-{MAX_PAGE_SIZE}")
        try:
            response = await self._api_call(
                "/users.list",
                connection_id,
                _query(cursor=cursor, limit=limit, include_locale=include_locale),
            )
        except Exception as e:
            return self._fail_from_exception("Failed to fetch users", e)

        if not response.get("ok") or response.get("members") is None:
            return self._fail(
                ErrorCode.API_ERROR,
                f"Failed to fetch users: {response.get('error')}",
                {"slackError": response.get("error")},
            )
        return self._ok({
            "users": [to_standard_user(u).to_dict() for u in response["members"]],
            "nextCursor": (response.get("response_metadata") or {}).get("next_cursor"),
        })

    async def get_channels(
        self,
        connection_id: str,
        cursor: Optional[str] = None,
        limit: int = 100,
        exclude_archived: bool = True,
        types: str = DEFAULT_CHANNEL_TYPES,
    ) -> IntegrationResponse:
        if not 1 <= limit <= MAX_PAGE_SIZE:
            return self._fail(ErrorCode.INVALID_REQUEST, f"Validation failed: limit must be 1-{MAX_PAGE_SIZE}")
        try:
            response = await self._api_call(
                "/conversations.list",
                connection_id,
                _query(cursor=cursor, limit=limit, exclude_archived=exclude_archived, types=types),
            )
        except Exception as e:
            return self._fail_from_exception("Failed to fetch channels", e)

        if not response.get("ok") or response.get("channels") is None:
            return self._fail(
                ErrorCode.API_ERROR,
                f"Failed to fetch channels: {response.get('error')}",
                {"slackError": response.get("error")},
            )
        return self._ok({
            "channels": [to_standard_channel(c).to_dict() for c in response["channels"]],
            "nextCursor": (response.get("response_metadata") or {}).get("next_cursor"),
        })

    async def get_user_info(
        self,
        connection_id: str,
        user: str,
        include_locale: Optional[bool] = None,
    ) -> IntegrationResponse:
        if not user or not user.strip():
            return self._fail(ErrorCode.INVALID_REQUEST, "Validation failed: User ID is required")
        try:
            response = await self._api_call(
                "/users.info",
                connection_id,
                _query(user=user, include_locale=include_locale),
            )
        except Exception as e:
            return self._fail_from_exception("Failed to get user info", e)

        if not response.get("ok") or not response.get("user"):
            return self._fail(
                ErrorCode.RESOURCE_NOT_FOUND,
                f"User not found: {response.get('error')}",
                {"slackError": response.get("error")},
            )
        return self._ok(to_standard_user(response["user"]).to_dict())

    async def test_connection(self, connection_id: str) -> HealthReport:
        checks = {"authentication": False, "api_access": False, "permissions": False}
        try:
            auth = await self._nango.proxy("/auth.test", connection_id, method="GET")
        except Exception as e:
            _log(f"Health check failed for {connection_id}: {e}")
            return HealthReport.from_checks(checks, {"error": str(e)})

        if auth.get("ok"):
            checks["authentication"] = True
            checks["api_access"] = True
            try:
                listing = await self._nango.proxy(
                    "/conversations.list", connection_id, method="GET", params={"limit": 1},
                )
                checks["permissions"] = bool(listing.get("ok"))
            except Exception as e:
                _log(f"Limited permissions detected: {e}")

        return HealthReport.from_checks(checks, {"connectionId": connection_id})
