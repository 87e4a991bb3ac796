"""Outbound ports — interfaces for external system adapters."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@dataclass
class SendResult:
    """Result of handing a resolved (reference, message) pair to the platform."""

    success: bool
    message_id: Optional[str] = None
    error_code: Optional[str] = None
    error: Optional[str] = None


@runtime_checkable
class MessagingPort(Protocol):
    """Send capability consumed by natural-language commands."""

    async def send(self, connection_id: str, channel: str, text: str) -> SendResult: ...


@runtime_checkable
class ConnectionBrokerPort(Protocol):
    """OAuth connection broker (token exchange, proxying, connect sessions)."""

    @property
    def is_configured(self) -> bool: ...

    async def proxy(
        self,
        endpoint: str,
        connection_id: str,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]: ...

    async def trigger_action(
        self,
        connection_id: str,
        action_name: str,
        payload: Dict[str, Any],
    ) -> Dict[str, Any]: ...

    async def create_connect_session(
        self,
        end_user: Dict[str, Any],
        allowed_integrations: List[str],
    ) -> Dict[str, Any]: ...
