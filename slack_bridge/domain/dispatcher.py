"""CommandDispatcher — natural-language send, no framework dependencies.

Both the HTTP ai-message route and the slack_ai_message tool go through
this class, so they parse and resolve commands identically.
"""

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from slack_bridge.domain.command_parser import interpret_command
from slack_bridge.domain.errors import ErrorCode, send_failure_hint
from slack_bridge.domain.models import ParseFailure, ResolvedCommand
from slack_bridge.domain.references import reference_kind
from slack_bridge.ports.inbound import CommandRequest
from slack_bridge.ports.outbound import MessagingPort


def _log(msg: str):
    print(msg, file=sys.stderr)


@dataclass
class CommandOutcome:
    """What happened to one natural-language command."""

    request: CommandRequest
    success: bool
    command: Optional[ResolvedCommand] = None
    failure: Optional[ParseFailure] = None
    message_id: Optional[str] = None
    error_code: Optional[str] = None
    error: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)

    @property
    def parsed_command(self) -> Dict[str, Any]:
        return {
            "originalCommand": self.request.instruction,
            "extractedMessage": self.command.message_body if self.command else None,
            "extractedChannel": self.command.reference if self.command else None,
        }


class CommandDispatcher:
    """Parses an instruction, resolves its target and sends through MessagingPort."""

    def __init__(self, messaging: MessagingPort):
        self._messaging = messaging

    async def dispatch(self, request: CommandRequest) -> CommandOutcome:
        interpreted = interpret_command(request.instruction)
        if isinstance(interpreted, ParseFailure):
            _log(f"[command] Parse failed ({interpreted.reason}): {request.instruction!r}")
            return CommandOutcome(
                request=request,
                success=False,
                failure=interpreted,
                error_code=ErrorCode.INVALID_REQUEST.value,
                error=interpreted.reason,
            )

        if not request.connection_id:
            return CommandOutcome(
                request=request,
                success=False,
                command=interpreted,
                error_code=ErrorCode.MISSING_REQUIRED_FIELD.value,
                error="connection id is required",
            )

        _log(
            f"[command] {interpreted.parsed.pattern}: -> {interpreted.reference} "
            f"({reference_kind(interpreted.reference)})"
        )
        result = await self._messaging.send(
            request.connection_id, interpreted.reference, interpreted.message_body,
        )
        if result.success:
            return CommandOutcome(
                request=request,
                success=True,
                command=interpreted,
                message_id=result.message_id,
            )

        message, suggestions = send_failure_hint(result.error or "Unknown error", interpreted.reference)
        return CommandOutcome(
            request=request,
            success=False,
            command=interpreted,
            error_code=result.error_code or ErrorCode.API_ERROR.value,
            error=message,
            suggestions=suggestions,
        )
