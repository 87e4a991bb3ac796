"""Slack Bridge — Slack over Nango with natural-language send commands."""

from slack_bridge.config import CONFIG, AppConfig, __version__
from slack_bridge.domain.command_parser import interpret_command, parse_command
from slack_bridge.domain.references import resolve_reference
from slack_bridge.domain.dispatcher import CommandDispatcher, CommandOutcome
from slack_bridge.adapters.nango.client import NangoClient, NangoError
from slack_bridge.adapters.slack.service import SendMessageRequest, SlackService

__all__ = [
    "__version__",
    "CONFIG",
    "AppConfig",
    "interpret_command",
    "parse_command",
    "resolve_reference",
    "CommandDispatcher",
    "CommandOutcome",
    "NangoClient",
    "NangoError",
    "SendMessageRequest",
    "SlackService",
]
