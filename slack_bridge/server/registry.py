"""Tool registry — catalog of tool servers and their tools.

Constructed explicitly and handed to the HTTP layer and the MCP server;
there is no module-level instance.
"""

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable

INVALID_PARAMS = "INVALID_PARAMS"
METHOD_NOT_FOUND = "METHOD_NOT_FOUND"


def _log(msg: str):
    print(f"[{datetime.now().isoformat()}] [tools] {msg}", file=sys.stderr)


class ToolError(Exception):
    """Caller mistake: unknown tool or bad arguments."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


@dataclass
class ToolResult:
    message: str
    data: Optional[Any] = None
    is_error: bool = False

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "ToolResult":
        return cls(message=message, data=data)

    @classmethod
    def error(cls, message: str, details: Any = None) -> "ToolResult":
        return cls(message=message, data=details, is_error=True)

    @property
    def text(self) -> str:
        if self.data is None:
            return self.message
        body = json.dumps(self.data, indent=2, default=str)
        if self.is_error:
            return f"{self.message}\n\nDetails: {body}"
        return f"{self.message}\n\n{body}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": [{"type": "text", "text": self.text}],
            "isError": self.is_error,
        }


@dataclass
class ToolDefinition:
    name: str
    description: str
    input_schema: Dict[str, Any]
    capabilities: List[str] = field(default_factory=list)


@dataclass
class ToolEntry:
    server_id: str
    server_name: str
    server_version: str
    tool_name: str
    description: str
    input_schema: Dict[str, Any]
    capabilities: List[str]
    authentication: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "serverId": self.server_id,
            "serverName": self.server_name,
            "serverVersion": self.server_version,
            "toolName": self.tool_name,
            "toolDescription": self.description,
            "inputSchema": self.input_schema,
            "capabilities": list(self.capabilities),
            "authentication": self.authentication,
        }


@runtime_checkable
class ToolServer(Protocol):
    """A named group of tools sharing one backend."""

    id: str
    name: str
    version: str
    description: str
    authentication: str

    def list_tools(self) -> List[ToolDefinition]: ...

    async def execute(self, tool_name: str, args: Dict[str, Any]) -> ToolResult: ...


def object_schema(properties: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
    return {"type": "object", "properties": properties, "required": list(required or [])}


class ToolRegistry:
    def __init__(self):
        self._servers: Dict[str, ToolServer] = {}
        self._tools: Dict[Tuple[str, str], ToolEntry] = {}

    def register_server(self, server: ToolServer):
        """Add (or replace) a server and index its tools."""
        if server.id in self._servers:
            self.unregister_server(server.id)
        self._servers[server.id] = server
        for tool in server.list_tools():
            self._tools[(server.id, tool.name)] = ToolEntry(
                server_id=server.id,
                server_name=server.name,
                server_version=server.version,
                tool_name=tool.name,
                description=tool.description,
                input_schema=tool.input_schema,
                capabilities=list(tool.capabilities),
                authentication=server.authentication,
            )
        _log(f"Registered {server.id} ({len(self.get_tools_by_server(server.id))} tools)")

    def unregister_server(self, server_id: str) -> bool:
        if self._servers.pop(server_id, None) is None:
            return False
        for key in [k for k in self._tools if k[0] == server_id]:
            del self._tools[key]
        _log(f"Unregistered {server_id}")
        return True

    @property
    def server_ids(self) -> List[str]:
        return list(self._servers)

    def get_tool(self, server_id: str, tool_name: str) -> Optional[ToolEntry]:
        return self._tools.get((server_id, tool_name))

    def get_all_tools(self) -> List[ToolEntry]:
        return list(self._tools.values())

    def get_tools_by_server(self, server_id: str) -> List[ToolEntry]:
        return [t for t in self._tools.values() if t.server_id == server_id]

    def get_tools_by_capability(self, capability: str) -> List[ToolEntry]:
        return [t for t in self._tools.values() if capability in t.capabilities]

    def search_tools(self, query: str) -> List[ToolEntry]:
        """Case-insensitive substring match on name, description or capability."""
        q = query.lower()
        return [
            t for t in self._tools.values()
            if q in t.tool_name.lower()
            or q in t.description.lower()
            or any(q in c.lower() for c in t.capabilities)
        ]

    async def execute_tool(self, server_id: str, tool_name: str, args: Optional[Dict[str, Any]] = None) -> ToolResult:
        server = self._servers.get(server_id)
        if server is None:
            raise ToolError(METHOD_NOT_FOUND, f"Server '{server_id}' not found in registry")
        if self.get_tool(server_id, tool_name) is None:
            raise ToolError(METHOD_NOT_FOUND, f"Tool '{tool_name}' not found in server '{server_id}'")
        return await server.execute(tool_name, dict(args or {}))

    def get_stats(self) -> Dict[str, Any]:
        servers_by_type: Dict[str, int] = {}
        for server_id in self._servers:
            kind = server_id.replace("-mcp", "")
            servers_by_type[kind] = servers_by_type.get(kind, 0) + 1
        tools_by_capability: Dict[str, int] = {}
        for tool in self._tools.values():
            for cap in tool.capabilities:
                tools_by_capability[cap] = tools_by_capability.get(cap, 0) + 1
        return {
            "totalServers": len(self._servers),
            "totalTools": len(self._tools),
            "serversByType": servers_by_type,
            "toolsByCapability": tools_by_capability,
        }

    def get_info(self) -> Dict[str, Any]:
        servers = []
        for server_id, server in self._servers.items():
            tools = self.get_tools_by_server(server_id)
            caps: List[str] = []
            for tool in tools:
                caps.extend(c for c in tool.capabilities if c not in caps)
            servers.append({
                "id": server_id,
                "name": server.name,
                "version": server.version,
                "description": server.description,
                "toolCount": len(tools),
                "capabilities": caps,
            })
        return {
            "stats": self.get_stats(),
            "servers": servers,
            "tools": [t.to_dict() for t in self.get_all_tools()],
        }

    async def health_check_all(self, args: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run each server's ``<type>_health_check`` tool where one exists."""
        results: Dict[str, Any] = {}
        for server_id in list(self._servers):
            tool_name = f"{server_id.replace('-mcp', '')}_health_check"
            if self.get_tool(server_id, tool_name) is None:
                results[server_id] = {"status": "unknown", "message": "No health check available"}
                continue
            try:
                result = await self.execute_tool(server_id, tool_name, args)
                results[server_id] = result.to_dict()
            except Exception as e:
                _log(f"Health check for {server_id} failed: {e}")
                results[server_id] = {"status": "error", "message": str(e)}
        return results
