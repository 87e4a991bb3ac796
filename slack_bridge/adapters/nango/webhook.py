"""Nango webhook events — connection created / failed / deleted."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from slack_bridge.domain.models import now_iso


@dataclass
class NangoWebhookEvent:
    type: Optional[str]
    operation: Optional[str]
    success: bool
    connection_id: Optional[str] = None
    integration_id: Optional[str] = None
    event_id: Optional[str] = None
    end_user_id: Optional[str] = None
    end_user_email: Optional[str] = None
    end_user_display_name: Optional[str] = None
    end_user_tags: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_connection_created(self) -> bool:
        return self.type == "auth" and self.operation == "creation" and self.success

    @property
    def is_connection_failed(self) -> bool:
        return self.type == "auth" and self.operation == "creation" and not self.success

    @property
    def is_connection_deleted(self) -> bool:
        return self.type == "auth" and self.operation == "deletion"


def parse_webhook_event(payload: Dict[str, Any]) -> NangoWebhookEvent:
    end_user = payload.get("endUser") or {}
    return NangoWebhookEvent(
        type=payload.get("type"),
        operation=payload.get("operation"),
        success=bool(payload.get("success")),
        connection_id=payload.get("connectionId"),
        integration_id=payload.get("integrationId") or payload.get("providerConfigKey"),
        event_id=payload.get("id"),
        end_user_id=end_user.get("endUserId"),
        end_user_email=end_user.get("email"),
        end_user_display_name=end_user.get("display_name") or end_user.get("displayName"),
        end_user_tags=dict(end_user.get("tags") or {}),
    )


def connection_record(event: NangoWebhookEvent, environment: str) -> Dict[str, Any]:
    """Structured summary of a newly established connection."""
    received_at = now_iso()
    tags = event.end_user_tags
    session_info = None
    if tags.get("sessionId"):
        session_info = {
            "sessionId": tags["sessionId"],
            "source": tags.get("source"),
            "timestamp": tags.get("timestamp"),
        }
    return {
        "userId": event.end_user_id,
        "userEmail": event.end_user_email,
        "userDisplayName": event.end_user_display_name,
        "connectionId": event.connection_id,
        "provider": "slack",
        "integrationId": event.integration_id or "slack",
        "status": "connected",
        "environment": environment,
        "createdAt": received_at,
        "webhook": {
            "receivedAt": received_at,
            "eventId": event.event_id,
            "eventType": f"{event.type}/{event.operation}",
        },
        "metadata": {
            "userTags": tags,
            "sessionInfo": session_info,
        },
    }
