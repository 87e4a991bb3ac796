from slack_bridge.adapters.nango.client import NangoClient, NangoError
from slack_bridge.adapters.nango.webhook import NangoWebhookEvent, connection_record, parse_webhook_event

__all__ = [
    "NangoClient",
    "NangoError",
    "NangoWebhookEvent",
    "connection_record",
    "parse_webhook_event",
]
