"""Slack bridge MCP stdio server — FastMCP entrypoint."""

import builtins
import sys
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from slack_bridge.config import AppConfig
from slack_bridge.server.registry import ToolError, ToolResult
from slack_bridge.server.slack_tools import SLACK_SERVER_ID
from slack_bridge.server.state import AppState


def _protect_stdout():
    """MCP JSON-RPC owns stdout; route every print() to stderr."""
    original_print = builtins.print

    def _safe_print(*args, **kwargs):
        kwargs.setdefault("file", sys.stderr)
        original_print(*args, **kwargs)

    builtins.print = _safe_print


def _payload(result: ToolResult) -> dict:
    return {"success": not result.is_error, "message": result.message, "data": result.data}


def build_server(state: AppState) -> FastMCP:
    """FastMCP server whose tools delegate to ``state.registry``."""
    server = FastMCP(
        "slack-bridge",
        instructions="Slack bridge - send messages, list channels and users, and run "
                     "natural-language send commands through Nango-managed Slack connections.",
    )
    registry = state.registry

    async def _call(tool_name: str, args: Dict[str, Any]) -> dict:
        args = {k: v for k, v in args.items() if v is not None}
        try:
            result = await registry.execute_tool(SLACK_SERVER_ID, tool_name, args)
        except ToolError as e:
            return {"success": False, "error": e.message, "code": e.code}
        return _payload(result)

    @server.tool()
    async def slack_send_message(
        channel: str,
        text: str,
        connectionId: Optional[str] = None,
        thread_ts: Optional[str] = None,
        username: Optional[str] = None,
        icon_emoji: Optional[str] = None,
    ) -> dict:
        """Send a message to a Slack channel or user.

        Args:
            channel: Channel ID, channel name (#general), or user (@username).
            text: The message text to send.
            connectionId: Nango connection ID (optional if a default is configured).
            thread_ts: Reply in a thread by giving its timestamp.
            username: Custom username for the message.
            icon_emoji: Custom emoji icon, e.g. :robot_face:.
        """
        return await _call("slack_send_message", {
            "channel": channel,
            "text": text,
            "connectionId": connectionId,
            "thread_ts": thread_ts,
            "username": username,
            "icon_emoji": icon_emoji,
        })

    @server.tool()
    async def slack_get_channels(
        connectionId: Optional[str] = None,
        limit: int = 100,
        cursor: Optional[str] = None,
        exclude_archived: bool = True,
        types: Optional[str] = None,
    ) -> dict:
        """List channels in the Slack workspace.

        Args:
            connectionId: Nango connection ID (optional if a default is configured).
            limit: Maximum number of channels to return.
            cursor: Pagination cursor from a previous call.
            exclude_archived: Skip archived channels.
            types: Comma-separated channel types (default: public_channel,private_channel).
        """
        return await _call("slack_get_channels", {
            "connectionId": connectionId,
            "limit": limit,
            "cursor": cursor,
            "exclude_archived": exclude_archived,
            "types": types,
        })

    @server.tool()
    async def slack_get_users(
        connectionId: Optional[str] = None,
        limit: int = 100,
        cursor: Optional[str] = None,
        include_locale: bool = False,
    ) -> dict:
        """List users in the Slack workspace.

        Args:
            connectionId: Nango connection ID (optional if a default is configured).
            limit: Maximum number of users to return.
            cursor: Pagination cursor from a previous call.
            include_locale: Include user locale information.
        """
        return await _call("slack_get_users", {
            "connectionId": connectionId,
            "limit": limit,
            "cursor": cursor,
            "include_locale": include_locale,
        })

    @server.tool()
    async def slack_get_user_info(
        user: str,
        connectionId: Optional[str] = None,
        include_locale: bool = False,
    ) -> dict:
        """Get detailed information about one Slack user.

        Args:
            user: Slack user ID.
            connectionId: Nango connection ID (optional if a default is configured).
            include_locale: Include user locale information.
        """
        return await _call("slack_get_user_info", {
            "user": user,
            "connectionId": connectionId,
            "include_locale": include_locale,
        })

    @server.tool()
    async def slack_health_check(connectionId: Optional[str] = None) -> dict:
        """Check connectivity and permissions of a Slack connection.

        Args:
            connectionId: Nango connection ID (optional if a default is configured).
        """
        return await _call("slack_health_check", {"connectionId": connectionId})

    @server.tool()
    async def slack_ai_message(command: str, connectionId: Optional[str] = None) -> dict:
        """Send a message described in natural language.

        Args:
            command: e.g. "send 'Hello team!' to #general" or "tell #random that 'Coffee break!'".
            connectionId: Nango connection ID (optional if a default is configured).
        """
        return await _call("slack_ai_message", {"command": command, "connectionId": connectionId})

    @server.tool()
    async def tools_registry_info() -> dict:
        """Registered tool servers, their tools and registry statistics."""
        return registry.get_info()

    @server.tool()
    async def tools_search(query: str) -> dict:
        """Search registered tools by name, description or capability.

        Args:
            query: Case-insensitive substring.
        """
        tools = registry.search_tools(query)
        return {"query": query, "count": len(tools), "tools": [t.to_dict() for t in tools]}

    return server


def main():
    """Run the MCP server via stdio transport."""
    _protect_stdout()
    build_server(AppState(AppConfig.from_env())).run(transport="stdio")


if __name__ == "__main__":
    main()
