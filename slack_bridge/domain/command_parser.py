"""Natural-language command parsing — "send 'hi' to #general" style instructions.

Pure Python, no framework dependencies. Rules are tried in order and the
first match wins; a "send/message" instruction always beats "tell/notify".
"""

import re
from typing import Optional, Union

from slack_bridge.domain.models import ParsedCommand, ParseFailure, ResolvedCommand
from slack_bridge.domain.references import resolve_reference

# Quoted text: opening and closing quote must be the same character
_QUOTED = r"(?:'(?P<sq>[^']*)'|\"(?P<dq>[^\"]*)\"|`(?P<bq>[^`]*)`)"

# Pattern A: [hey] send|message '<text>' to <rest>
SEND_RE = re.compile(
    r"(?:\bhey\s+)?\b(?:send|message)\s+" + _QUOTED + r"\s+to\s+(?P<rest>.+)",
    re.IGNORECASE,
)

# Pattern B: tell|notify <target> [that] ['<text>' | <text>]
TELL_RE = re.compile(
    r"\b(?:tell|notify)\s+(?P<target>.+?)\s+(?:that\s+)?"
    r"(?:" + _QUOTED + r"|(?P<bare>[^'\"`]+?))\s*$",
    re.IGNORECASE,
)

# "in the dev channel now" -> "dev"
_PATH_CHANNEL_RE = re.compile(r"^(?:in\s+)?(?:the\s+)?(.+?)\s+channel\b", re.IGNORECASE)

EXAMPLE_COMMANDS = (
    "send 'Hello team!' to #general",
    "message 'Meeting in 5 minutes' to @john",
    "send 'Good morning' to the development channel",
)

NO_MATCH = "Could not understand the command"
EMPTY_MESSAGE = "Message text is empty"
EMPTY_TARGET = "No channel or user given"

COMMAND_HELP = {
    "description": "AI-driven message sending for Slack",
    "examples": [
        {
            "command": "send 'Hello team!' to #general",
            "description": "Send a message to a public channel",
        },
        {
            "command": "message 'Meeting in 5 minutes' to @john",
            "description": "Send a direct message to a user",
        },
        {
            "command": "send 'Good morning' to the development channel",
            "description": "Send to development channel (maps to #dev)",
        },
        {
            "command": "tell #random that 'Coffee break!'",
            "description": "Alternative command format",
        },
    ],
    "supportedPatterns": [
        "send '[message]' to [channel/user]",
        "message '[message]' to [channel/user]",
        "tell [channel/user] that '[message]'",
        "notify [channel/user] that '[message]'",
    ],
    "channelFormats": [
        "#channelname - for public channels",
        "@username - for direct messages",
        "channel name - will auto-add # prefix for common channels",
    ],
}


def _quoted_text(match: "re.Match[str]") -> Optional[str]:
    for group in ("sq", "dq", "bq"):
        value = match.group(group)
        if value is not None:
            return value
    return None


def _target_from_path(rest: str) -> str:
    """Handle "user/in some channel" targets.

    A second segment mentioning "channel" names the channel; otherwise the
    first segment is taken as a username.
    """
    parts = rest.split("/")
    if "channel" in parts[1].lower():
        m = _PATH_CHANNEL_RE.match(parts[1].strip())
        if m:
            return m.group(1).strip()
    head = parts[0].strip()
    return f"@{head}" if head else ""


def _failure(instruction: str, reason: str) -> ParseFailure:
    return ParseFailure(instruction=instruction, reason=reason, examples=EXAMPLE_COMMANDS)


def _build(instruction: str, target: str, message: Optional[str], pattern: str) -> Union[ParsedCommand, ParseFailure]:
    message = (message or "").strip()
    target = target.strip()
    if not message:
        return _failure(instruction, EMPTY_MESSAGE)
    if not target:
        return _failure(instruction, EMPTY_TARGET)
    return ParsedCommand(target_phrase=target, message_body=message, pattern=pattern)


def parse_command(instruction: str) -> Union[ParsedCommand, ParseFailure]:
    """Extract (target phrase, message body) from a free-text instruction.

    Never raises: anything that does not yield both a target and a non-empty
    message comes back as a ParseFailure carrying EXAMPLE_COMMANDS.
    """
    text = instruction.strip()

    m = SEND_RE.search(text)
    if m:
        rest = m.group("rest").strip()
        target = _target_from_path(rest) if "/" in rest else rest
        return _build(instruction, target, _quoted_text(m), "send")

    m = TELL_RE.search(text)
    if m:
        message = _quoted_text(m)
        if message is None:
            message = m.group("bare")
        return _build(instruction, m.group("target"), message, "tell")

    return _failure(instruction, NO_MATCH)


def interpret_command(instruction: str) -> Union[ResolvedCommand, ParseFailure]:
    """Parse an instruction and resolve its target to a Slack reference."""
    parsed = parse_command(instruction)
    if isinstance(parsed, ParseFailure):
        return parsed
    return ResolvedCommand(
        reference=resolve_reference(parsed.target_phrase),
        message_body=parsed.message_body,
        parsed=parsed,
    )
