"""Slack tool server — six tools over SlackService."""

import sys
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional

from slack_bridge.adapters.slack.service import DEFAULT_CHANNEL_TYPES, SendMessageRequest, SlackService
from slack_bridge.config import SLACK_CAPABILITIES
from slack_bridge.domain.dispatcher import CommandDispatcher
from slack_bridge.domain.references import reference_kind
from slack_bridge.ports.inbound import CommandRequest
from slack_bridge.server.registry import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    ToolDefinition,
    ToolError,
    ToolResult,
    object_schema,
)

SLACK_SERVER_ID = "slack-mcp"

_CONNECTION_ID = {
    "type": "string",
    "description": "Nango connection ID for the Slack workspace (optional if default is set)",
}


def _log(msg: str):
    print(f"[{datetime.now().isoformat()}] [tools] {msg}", file=sys.stderr)


def _require(args: Dict[str, Any], keys: List[str]):
    missing = [k for k in keys if args.get(k) is None]
    if missing:
        raise ToolError(INVALID_PARAMS, f"Missing required arguments: {', '.join(missing)}")


def _int_arg(args: Dict[str, Any], key: str, default: int) -> int:
    value = args.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ToolError(INVALID_PARAMS, f"{key} must be a number")


_TOOLS = [
    ToolDefinition(
        name="slack_send_message",
        description="Send a message to a Slack channel or user",
        input_schema=object_schema({
            "connectionId": _CONNECTION_ID,
            "channel": {
                "type": "string",
                "description": "Channel ID, channel name (#general), or user ID (@username) to send message to",
            },
            "text": {"type": "string", "description": "The message text to send"},
            "thread_ts": {
                "type": "string",
                "description": "Optional: Reply to a specific thread by providing the thread timestamp",
            },
            "username": {"type": "string", "description": "Optional: Custom username for the message"},
            "icon_emoji": {
                "type": "string",
                "description": "Optional: Custom emoji icon for the message (e.g., :robot_face:)",
            },
        }, ["channel", "text"]),
        capabilities=["messaging"],
    ),
    ToolDefinition(
        name="slack_get_channels",
        description="Get a list of channels in the Slack workspace",
        input_schema=object_schema({
            "connectionId": _CONNECTION_ID,
            "limit": {"type": "number", "description": "Maximum number of channels to return (default: 100)"},
            "cursor": {"type": "string", "description": "Pagination cursor for getting next page of results"},
            "exclude_archived": {
                "type": "boolean",
                "description": "Whether to exclude archived channels (default: true)",
            },
            "types": {
                "type": "string",
                "description": "Channel types to include: public_channel,private_channel,mpim,im "
                               "(default: public_channel,private_channel)",
            },
        }),
        capabilities=["channel-management"],
    ),
    ToolDefinition(
        name="slack_get_users",
        description="Get a list of users in the Slack workspace",
        input_schema=object_schema({
            "connectionId": _CONNECTION_ID,
            "limit": {"type": "number", "description": "Maximum number of users to return (default: 100)"},
            "cursor": {"type": "string", "description": "Pagination cursor for getting next page of results"},
            "include_locale": {
                "type": "boolean",
                "description": "Whether to include user locale information (default: false)",
            },
        }),
        capabilities=["user-management"],
    ),
    ToolDefinition(
        name="slack_get_user_info",
        description="Get detailed information about a specific user",
        input_schema=object_schema({
            "connectionId": _CONNECTION_ID,
            "user": {"type": "string", "description": "User ID or username to get information for"},
            "include_locale": {
                "type": "boolean",
                "description": "Whether to include user locale information (default: false)",
            },
        }, ["user"]),
        capabilities=["user-management"],
    ),
    ToolDefinition(
        name="slack_health_check",
        description="Check the health and connectivity of the Slack integration",
        input_schema=object_schema({"connectionId": _CONNECTION_ID}),
        capabilities=["health-checking"],
    ),
    ToolDefinition(
        name="slack_ai_message",
        description='Send a message using natural language command parsing '
                    '(e.g., "send \'hello\' to the general channel")',
        input_schema=object_schema({
            "connectionId": _CONNECTION_ID,
            "command": {
                "type": "string",
                "description": "Natural language command describing what message to send where "
                               "(e.g., \"send 'hello world' to the general channel\")",
            },
        }, ["command"]),
        capabilities=["messaging", "ai-commands"],
    ),
]


class SlackToolServer:
    """Slack tools for the registry; connection id per call or a configured default."""

    id = SLACK_SERVER_ID
    name = SLACK_SERVER_ID
    version = "1.0.0"
    description = "MCP server for Slack integration with messaging, channels, and user management"
    authentication = "nango-oauth"

    def __init__(
        self,
        service: SlackService,
        dispatcher: Optional[CommandDispatcher] = None,
        default_connection_id: Optional[str] = None,
        capabilities: Optional[List[str]] = None,
    ):
        self._service = service
        self._dispatcher = dispatcher or CommandDispatcher(service)
        self._default_connection_id = default_connection_id
        self._capabilities = list(SLACK_CAPABILITIES if capabilities is None else capabilities)
        self._handlers: Dict[str, Callable[[str, Dict[str, Any]], Awaitable[ToolResult]]] = {
            "slack_send_message": self._send_message,
            "slack_get_channels": self._get_channels,
            "slack_get_users": self._get_users,
            "slack_get_user_info": self._get_user_info,
            "slack_health_check": self._health_check,
            "slack_ai_message": self._ai_message,
        }

    def list_tools(self) -> List[ToolDefinition]:
        """Tools with at least one enabled capability."""
        return [
            t for t in _TOOLS
            if any(c in self._capabilities for c in t.capabilities)
        ]

    async def execute(self, tool_name: str, args: Dict[str, Any]) -> ToolResult:
        handler = self._handlers.get(tool_name)
        if handler is None or tool_name not in {t.name for t in self.list_tools()}:
            raise ToolError(METHOD_NOT_FOUND, f"Unknown tool: {tool_name}")

        connection_id = args.get("connectionId") or self._default_connection_id
        if not connection_id:
            raise ToolError(
                INVALID_PARAMS,
                "No connection ID provided and no default connection ID configured",
            )

        try:
            return await handler(connection_id, args)
        except ToolError:
            raise
        except Exception as e:
            _log(f"Tool execution failed: {tool_name}: {e}")
            return ToolResult.error(f"Failed to execute {tool_name}: {e}", {"error": str(e)})

    async def _send_message(self, connection_id: str, args: Dict[str, Any]) -> ToolResult:
        _require(args, ["channel", "text"])
        result = await self._service.send_message(connection_id, SendMessageRequest(
            channel=args["channel"],
            text=args["text"],
            thread_ts=args.get("thread_ts"),
            username=args.get("username"),
            icon_emoji=args.get("icon_emoji"),
        ))
        if not result.success:
            return ToolResult.error(f"Failed to send message: {result.error.message}", result.error.to_dict())
        return ToolResult.ok(f"Message sent successfully to {args['channel']}", result.data)

    async def _get_channels(self, connection_id: str, args: Dict[str, Any]) -> ToolResult:
        exclude_archived = args.get("exclude_archived")
        result = await self._service.get_channels(
            connection_id,
            cursor=args.get("cursor"),
            limit=_int_arg(args, "limit", 100),
            exclude_archived=True if exclude_archived is None else bool(exclude_archived),
            types=args.get("types") or DEFAULT_CHANNEL_TYPES,
        )
        if not result.success:
            return ToolResult.error(f"Failed to get channels: {result.error.message}", result.error.to_dict())
        channels = result.data["channels"]
        return ToolResult.ok(f"Retrieved {len(channels)} channels", {
            "channels": [
                {"id": c["id"], "name": c["name"], "type": c["type"], "memberCount": c["memberCount"]}
                for c in channels
            ],
            "nextCursor": result.data.get("nextCursor"),
            "total": len(channels),
        })

    async def _get_users(self, connection_id: str, args: Dict[str, Any]) -> ToolResult:
        result = await self._service.get_users(
            connection_id,
            cursor=args.get("cursor"),
            limit=_int_arg(args, "limit", 100),
            include_locale=bool(args.get("include_locale")),
        )
        if not result.success:
            return ToolResult.error(f"Failed to get users: {result.error.message}", result.error.to_dict())
        users = result.data["users"]
        return ToolResult.ok(f"Retrieved {len(users)} users", {
            "users": [
                {"id": u["id"], "name": u["name"], "email": u["email"], "status": u["status"]}
                for u in users
            ],
            "nextCursor": result.data.get("nextCursor"),
            "total": len(users),
        })

    async def _get_user_info(self, connection_id: str, args: Dict[str, Any]) -> ToolResult:
        _require(args, ["user"])
        result = await self._service.get_user_info(
            connection_id, args["user"], include_locale=bool(args.get("include_locale")),
        )
        if not result.success:
            return ToolResult.error(f"Failed to get user info: {result.error.message}", result.error.to_dict())
        return ToolResult.ok(f"Retrieved user information for {args['user']}", result.data)

    async def _health_check(self, connection_id: str, args: Dict[str, Any]) -> ToolResult:
        report = await self._service.test_connection(connection_id)
        return ToolResult.ok(f"Health check completed - Status: {report.status}", report.to_dict())

    async def _ai_message(self, connection_id: str, args: Dict[str, Any]) -> ToolResult:
        _require(args, ["command"])
        outcome = await self._dispatcher.dispatch(CommandRequest(
            instruction=args["command"],
            connection_id=connection_id,
            user_id=args.get("userId"),
        ))
        if outcome.failure is not None:
            return ToolResult.error(
                "Could not parse the command. Please specify both a channel/user and a message.",
                {
                    "command": args["command"],
                    "reason": outcome.failure.reason,
                    "examples": list(outcome.failure.examples),
                },
            )
        if not outcome.success:
            return ToolResult.error(f"Failed to send AI message: {outcome.error}", {
                "code": outcome.error_code,
                "suggestions": outcome.suggestions,
                "parsedCommand": outcome.parsed_command,
            })
        return ToolResult.ok(f"AI message sent successfully to {outcome.command.reference}", {
            "originalCommand": args["command"],
            "parsedChannel": outcome.command.reference,
            "targetKind": reference_kind(outcome.command.reference),
            "parsedMessage": outcome.command.message_body,
            "result": {"messageId": outcome.message_id},
        })
