"""FastAPI app factory and shared route helpers."""

import sys
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from slack_bridge.config import __version__
from slack_bridge.domain.errors import ErrorCode, status_for_error
from slack_bridge.domain.models import IntegrationResponse
from slack_bridge.server.state import AppState


def _log(msg: str):
    print(f"[{datetime.now().isoformat()}] [web] {msg}", file=sys.stderr)


def get_state(request: Request) -> AppState:
    return request.app.state.bridge


def require_nango(state: AppState):
    if not state.nango_configured:
        raise HTTPException(status_code=503, detail="Nango not configured. Set NANGO_SECRET_KEY.")


def integration_json(response: IntegrationResponse) -> JSONResponse:
    """Serialize a service envelope; failures get their mapped HTTP status."""
    status = 200 if response.success else status_for_error(response.error.code)
    return JSONResponse(status_code=status, content=response.to_dict())


def internal_error(state: AppState, where: str, e: Exception) -> JSONResponse:
    _log(f"Error in {where}: {e}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {
                "code": ErrorCode.API_ERROR.value,
                "message": "Internal server error",
                "details": {"error": str(e)} if state.config.is_development else {},
            },
        },
    )


class StatusResponse(BaseModel):
    service: str
    version: str
    environment: str
    nangoConfigured: bool
    toolServers: int
    tools: int


def create_app(state: Optional[AppState] = None) -> FastAPI:
    """Build the HTTP app around ``state`` (built from the environment when omitted)."""
    from slack_bridge.adapters.web.integration_routes import slack_router
    from slack_bridge.adapters.web.nango_routes import nango_router
    from slack_bridge.adapters.web.tool_routes import tools_router

    if state is None:
        from slack_bridge.config import AppConfig
        state = AppState(AppConfig.from_env())

    app = FastAPI(title="Slack Bridge", version=__version__)
    app.state.bridge = state
    app.include_router(slack_router)
    app.include_router(nango_router)
    app.include_router(tools_router)

    @app.get("/status", response_model=StatusResponse)
    async def status(request: Request):
        """Server status endpoint"""
        s = get_state(request)
        return StatusResponse(
            service="slack-bridge",
            version=__version__,
            environment=s.config.environment,
            nangoConfigured=s.nango_configured,
            toolServers=len(s.registry.server_ids),
            tools=len(s.registry.get_all_tools()),
        )

    return app
