"""Domain layer — pure Python, no framework dependencies."""

from slack_bridge.domain.models import (
    HealthReport,
    IntegrationError,
    IntegrationResponse,
    ParsedCommand,
    ParseFailure,
    ResolvedCommand,
    StandardChannel,
    StandardUser,
)
from slack_bridge.domain.command_parser import (
    COMMAND_HELP,
    EXAMPLE_COMMANDS,
    interpret_command,
    parse_command,
)
from slack_bridge.domain.references import CHANNEL_SYNONYMS, reference_kind, resolve_reference
from slack_bridge.domain.errors import ErrorCode, status_for_error
from slack_bridge.domain.dispatcher import CommandDispatcher, CommandOutcome

__all__ = [
    "HealthReport",
    "IntegrationError",
    "IntegrationResponse",
    "ParsedCommand",
    "ParseFailure",
    "ResolvedCommand",
    "StandardChannel",
    "StandardUser",
    "COMMAND_HELP",
    "EXAMPLE_COMMANDS",
    "interpret_command",
    "parse_command",
    "CHANNEL_SYNONYMS",
    "reference_kind",
    "resolve_reference",
    "ErrorCode",
    "status_for_error",
    "CommandDispatcher",
    "CommandOutcome",
]
