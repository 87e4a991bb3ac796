"""Slack integration API routes."""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from slack_bridge.adapters.slack.service import DEFAULT_CHANNEL_TYPES, SendMessageRequest
from slack_bridge.adapters.web.server import get_state, integration_json, internal_error, require_nango
from slack_bridge.domain.command_parser import COMMAND_HELP
from slack_bridge.domain.errors import ErrorCode, status_for_error
from slack_bridge.domain.models import now_iso
from slack_bridge.ports.inbound import CommandRequest
from slack_bridge.server.state import AppState

slack_router = APIRouter(prefix="/api/integrations/slack", tags=["Slack"])

PARSE_FAILURE_MESSAGE = (
    "Could not understand the command. Try formats like: "
    "\"send 'Hello' to #general\" or \"message 'Hi there' to @username\""
)


class SendMessageBody(BaseModel):
    nangoConnectionId: str
    channel: str
    text: str
    thread_ts: Optional[str] = None
    username: Optional[str] = None
    icon_emoji: Optional[str] = None


class ChannelsBody(BaseModel):
    nangoConnectionId: str
    limit: int = 100
    cursor: Optional[str] = None
    exclude_archived: bool = True
    types: str = DEFAULT_CHANNEL_TYPES


class UsersBody(BaseModel):
    nangoConnectionId: str
    limit: int = 100
    cursor: Optional[str] = None
    include_locale: Optional[bool] = None


class UserInfoBody(BaseModel):
    nangoConnectionId: str
    user: str
    include_locale: Optional[bool] = None


class HealthBody(BaseModel):
    nangoConnectionId: str


class AIMessageBody(BaseModel):
    nangoConnectionId: str
    command: str
    userId: Optional[str] = None


@slack_router.post("/send-message")
async def send_message(req: SendMessageBody, state: AppState = Depends(get_state)):
    require_nango(state)
    try:
        result = await state.slack.send_message(req.nangoConnectionId, SendMessageRequest(
            channel=req.channel,
            text=req.text,
            thread_ts=req.thread_ts,
            username=req.username,
            icon_emoji=req.icon_emoji,
        ))
    except Exception as e:
        return internal_error(state, "send-message", e)
    return integration_json(result)


@slack_router.get("/send-message")
async def send_message_info():
    return {
        "endpoint": "send-message",
        "methods": ["POST"],
        "description": "Send a message to a Slack channel or user",
        "requiredFields": ["nangoConnectionId", "channel", "text"],
        "optionalFields": ["thread_ts", "username", "icon_emoji"],
    }


@slack_router.post("/channels")
async def list_channels(req: ChannelsBody, state: AppState = Depends(get_state)):
    require_nango(state)
    try:
        result = await state.slack.get_channels(
            req.nangoConnectionId,
            cursor=req.cursor,
            limit=req.limit,
            exclude_archived=req.exclude_archived,
            types=req.types,
        )
    except Exception as e:
        return internal_error(state, "channels", e)
    return integration_json(result)


@slack_router.get("/channels")
async def channels_info():
    return {
        "endpoint": "channels",
        "methods": ["POST"],
        "description": "List channels in the Slack workspace",
        "requiredFields": ["nangoConnectionId"],
        "optionalFields": ["limit", "cursor", "exclude_archived", "types"],
    }


@slack_router.post("/users")
async def list_users(req: UsersBody, state: AppState = Depends(get_state)):
    require_nango(state)
    try:
        result = await state.slack.get_users(
            req.nangoConnectionId,
            cursor=req.cursor,
            limit=req.limit,
            include_locale=req.include_locale,
        )
    except Exception as e:
        return internal_error(state, "users", e)
    return integration_json(result)


@slack_router.get("/users")
async def users_info():
    return {
        "endpoint": "users",
        "methods": ["POST"],
        "description": "List users in the Slack workspace",
        "requiredFields": ["nangoConnectionId"],
        "optionalFields": ["limit", "cursor", "include_locale"],
    }


@slack_router.post("/user-info")
async def user_info(req: UserInfoBody, state: AppState = Depends(get_state)):
    require_nango(state)
    try:
        result = await state.slack.get_user_info(
            req.nangoConnectionId, req.user, include_locale=req.include_locale,
        )
    except Exception as e:
        return internal_error(state, "user-info", e)
    return integration_json(result)


@slack_router.get("/user-info")
async def user_info_info():
    return {
        "endpoint": "user-info",
        "methods": ["POST"],
        "description": "Get detailed information about a Slack user",
        "requiredFields": ["nangoConnectionId", "user"],
        "optionalFields": ["include_locale"],
    }


@slack_router.post("/health")
async def health(req: HealthBody, state: AppState = Depends(get_state)):
    require_nango(state)
    try:
        report = await state.slack.test_connection(req.nangoConnectionId)
    except Exception as e:
        return internal_error(state, "health", e)
    return {
        "success": True,
        "data": report.to_dict(),
        "meta": {"timestamp": now_iso(), "integration": "slack", "version": state.slack.version},
    }


@slack_router.get("/health")
async def health_info(state: AppState = Depends(get_state)):
    return {
        "endpoint": "health",
        "methods": ["POST"],
        "description": "Check Slack connection health and permissions",
        "requiredFields": ["nangoConnectionId"],
        "integration": state.slack.get_metadata(),
    }


@slack_router.post("/ai-message")
async def ai_message(req: AIMessageBody, state: AppState = Depends(get_state)):
    require_nango(state)
    try:
        outcome = await state.dispatcher.dispatch(CommandRequest(
            instruction=req.command,
            connection_id=req.nangoConnectionId,
            user_id=req.userId,
        ))
    except Exception as e:
        return internal_error(state, "ai-message", e)

    if outcome.failure is not None:
        return JSONResponse(status_code=400, content={
            "success": False,
            "error": {
                "code": ErrorCode.INVALID_REQUEST.value,
                "message": PARSE_FAILURE_MESSAGE,
                "details": {
                    "reason": outcome.failure.reason,
                    "examples": list(outcome.failure.examples),
                },
            },
        })

    if not outcome.success:
        return JSONResponse(status_code=status_for_error(outcome.error_code), content={
            "success": False,
            "error": {
                "code": outcome.error_code,
                "message": outcome.error,
                "details": {
                    "originalChannel": outcome.command.reference,
                    "suggestions": outcome.suggestions,
                    "parsedCommand": outcome.parsed_command,
                },
            },
        })

    return {
        "success": True,
        "data": {
            "messageId": outcome.message_id,
            "timestamp": outcome.message_id,
            "parsedCommand": outcome.parsed_command,
        },
        "meta": {"timestamp": now_iso(), "integration": "slack", "version": state.slack.version},
    }


@slack_router.get("/ai-message")
async def ai_message_help():
    return {"success": True, "data": COMMAND_HELP}
