"""Tool registry routes — discovery, search, execution and health."""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from slack_bridge.adapters.web.server import get_state
from slack_bridge.server.registry import METHOD_NOT_FOUND, ToolError
from slack_bridge.server.state import AppState

tools_router = APIRouter(prefix="/api/tools", tags=["Tools"])


@tools_router.get("")
async def registry_info(state: AppState = Depends(get_state)):
    return state.registry.get_info()


@tools_router.get("/search")
async def search_tools(q: str = Query(..., min_length=1), state: AppState = Depends(get_state)):
    tools = state.registry.search_tools(q)
    return {"query": q, "count": len(tools), "tools": [t.to_dict() for t in tools]}


@tools_router.get("/health")
async def tools_health(state: AppState = Depends(get_state)):
    return {"servers": await state.registry.health_check_all()}


@tools_router.post("/{server_id}/{tool_name}")
async def execute_tool(
    server_id: str,
    tool_name: str,
    args: Dict[str, Any] = Body(default_factory=dict),
    state: AppState = Depends(get_state),
):
    try:
        result = await state.registry.execute_tool(server_id, tool_name, args)
    except ToolError as e:
        status = 404 if e.code == METHOD_NOT_FOUND else 400
        raise HTTPException(status_code=status, detail={"code": e.code, "message": e.message})
    return {"success": not result.is_error, "result": result.to_dict()}
