"""Slack adapters — service over Nango and payload transformers."""

from slack_bridge.adapters.slack.service import SendMessageRequest, SlackService
from slack_bridge.adapters.slack.transform import to_standard_channel, to_standard_user

__all__ = [
    "SendMessageRequest",
    "SlackService",
    "to_standard_channel",
    "to_standard_user",
]
