"""Inbound port — transport-agnostic command representation."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CommandRequest:
    """HTTP/MCP-agnostic natural-language command."""

    instruction: str
    connection_id: Optional[str] = None
    user_id: Optional[str] = None
