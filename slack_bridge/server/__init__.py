"""Tool registry, Slack tool server, app state and MCP entrypoint."""

from slack_bridge.server.registry import ToolDefinition, ToolEntry, ToolError, ToolRegistry, ToolResult
from slack_bridge.server.slack_tools import SLACK_SERVER_ID, SlackToolServer
from slack_bridge.server.state import AppState

__all__ = [
    "AppState",
    "SLACK_SERVER_ID",
    "SlackToolServer",
    "ToolDefinition",
    "ToolEntry",
    "ToolError",
    "ToolRegistry",
    "ToolResult",
]
