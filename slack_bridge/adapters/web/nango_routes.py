"""Nango connect-session and webhook routes."""

import json
import secrets
import sys
import time
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from slack_bridge.adapters.nango.webhook import connection_record, parse_webhook_event
from slack_bridge.adapters.web.server import get_state, require_nango
from slack_bridge.domain.models import now_iso
from slack_bridge.server.state import AppState

nango_router = APIRouter(prefix="/api/nango", tags=["Nango"])


def _log(msg: str):
    print(f"[{datetime.now().isoformat()}] [nango] {msg}", file=sys.stderr)


class SessionTokenRequest(BaseModel):
    userId: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None


class SessionTokenResponse(BaseModel):
    sessionToken: str
    expiresAt: Optional[str] = None


def build_end_user(req: SessionTokenRequest, environment: str, email_domain: str) -> dict:
    """End-user record for a connect session; missing fields get generated values."""
    timestamp = int(time.time() * 1000)
    random_id = secrets.token_hex(6)
    return {
        "id": req.userId or f"user_{timestamp}_{random_id}",
        "email": req.email or f"user_{timestamp}@{email_domain}",
        "display_name": req.name or f"Slack Bridge User {datetime.now().date().isoformat()}",
        "tags": {
            "source": "slack-bridge",
            "environment": environment,
            "timestamp": now_iso(),
            "sessionId": f"session_{timestamp}_{random_id}",
        },
    }


@nango_router.post("/session-token", response_model=SessionTokenResponse)
async def session_token(
    req: Optional[SessionTokenRequest] = None,
    state: AppState = Depends(get_state),
):
    require_nango(state)
    end_user = build_end_user(
        req or SessionTokenRequest(),
        state.config.environment,
        state.config.nango.end_user_email_domain,
    )
    try:
        session = await state.nango.create_connect_session(
            end_user, [state.config.nango.provider_config_key],
        )
    except Exception as e:
        _log(f"Failed to create session token: {e}")
        content = {"error": "Failed to create session token"}
        if state.config.is_development:
            content["details"] = str(e)
        return JSONResponse(status_code=500, content=content)

    _log(f"Session token created for {end_user['id']}")
    return SessionTokenResponse(sessionToken=session["token"], expiresAt=session.get("expires_at"))


@nango_router.post("/webhook")
async def webhook(request: Request, state: AppState = Depends(get_state)):
    """Always answers 200 so Nango does not retry delivery."""
    try:
        payload = await request.json()
        if not isinstance(payload, dict):
            raise ValueError("webhook payload must be a JSON object")
        event = parse_webhook_event(payload)

        if event.is_connection_created:
            _log(f"New Slack connection: {event.connection_id} (user {event.end_user_id}, {event.end_user_email})")
            record = connection_record(event, state.config.environment)
            _log(f"Connection data: {json.dumps(record)}")
        elif event.is_connection_failed:
            _log(f"Connection failed: {json.dumps(payload)}")
        elif event.is_connection_deleted:
            _log(f"Connection deleted: {event.connection_id}")
        else:
            _log(f"Other webhook type: {event.type} {event.operation}")
    except Exception as e:
        _log(f"Error processing Nango webhook: {e}")
        return {"error": "Processing failed"}
    return {"received": True}


@nango_router.get("/webhook")
async def webhook_info():
    return {
        "success": True,
        "message": "Nango webhook endpoint is ready",
        "endpoint": "/api/nango/webhook",
        "methods": ["POST"],
        "timestamp": now_iso(),
    }
