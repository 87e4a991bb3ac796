"""Port interfaces (Hexagonal Architecture)."""

from slack_bridge.ports.inbound import CommandRequest
from slack_bridge.ports.outbound import ConnectionBrokerPort, MessagingPort, SendResult

__all__ = [
    "CommandRequest",
    "ConnectionBrokerPort",
    "MessagingPort",
    "SendResult",
]
