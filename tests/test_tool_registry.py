"""Unit tests for ToolRegistry."""

import json

import pytest

from slack_bridge.server.registry import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    ToolDefinition,
    ToolError,
    ToolRegistry,
    ToolResult,
    ToolServer,
    object_schema,
)


class EchoServer:
    id = "echo-mcp"
    name = "echo-mcp"
    version = "0.1.0"
    description = "Echoes its input"
    authentication = "none"

    def __init__(self):
        self.calls = []

    def list_tools(self):
        return [
            ToolDefinition("echo_say", "Repeat a phrase", object_schema({"text": {"type": "string"}}, ["text"]),
                           ["messaging"]),
            ToolDefinition("echo_health_check", "Always healthy", object_schema({}), ["health-checking"]),
        ]

    async def execute(self, tool_name, args):
        self.calls.append((tool_name, args))
        if tool_name == "echo_say":
            if "text" not in args:
                raise ToolError(INVALID_PARAMS, "Missing required arguments: text")
            return ToolResult.ok("Echoed", {"text": args["text"]})
        return ToolResult.ok("Health check completed - Status: healthy", {"status": "healthy"})


class QuietServer(EchoServer):
    id = "quiet-mcp"
    name = "quiet-mcp"

    def list_tools(self):
        return [ToolDefinition("quiet_nothing", "Does nothing", object_schema({}), ["misc"])]


@pytest.fixture
def registry():
    reg = ToolRegistry()
    reg.register_server(EchoServer())
    return reg


class TestRegistration:
    def test_server_protocol(self):
        assert isinstance(EchoServer(), ToolServer)

    def test_tools_indexed(self, registry):
        assert len(registry.get_all_tools()) == 2
        entry = registry.get_tool("echo-mcp", "echo_say")
        assert entry.server_version == "0.1.0"
        assert entry.authentication == "none"
        assert entry.to_dict()["toolDescription"] == "Repeat a phrase"

    def test_reregister_replaces(self, registry):
        registry.register_server(EchoServer())
        assert len(registry.get_all_tools()) == 2

    def test_unregister(self, registry):
        assert registry.unregister_server("echo-mcp") is True
        assert registry.get_all_tools() == []
        assert registry.unregister_server("echo-mcp") is False


class TestLookup:
    def test_by_capability(self, registry):
        assert [t.tool_name for t in registry.get_tools_by_capability("messaging")] == ["echo_say"]

    def test_search_name(self, registry):
        assert [t.tool_name for t in registry.search_tools("SAY")] == ["echo_say"]

    def test_search_description(self, registry):
        assert [t.tool_name for t in registry.search_tools("always")] == ["echo_health_check"]

    def test_search_capability(self, registry):
        assert len(registry.search_tools("health")) == 1

    def test_stats(self, registry):
        stats = registry.get_stats()
        assert stats["totalServers"] == 1
        assert stats["totalTools"] == 2
        assert stats["serversByType"] == {"echo": 1}
        assert stats["toolsByCapability"] == {"messaging": 1, "health-checking": 1}

    def test_info(self, registry):
        info = registry.get_info()
        assert info["servers"][0]["toolCount"] == 2
        assert info["servers"][0]["capabilities"] == ["messaging", "health-checking"]


class TestExecute:
    @pytest.mark.asyncio
    async def test_execute(self, registry):
        result = await registry.execute_tool("echo-mcp", "echo_say", {"text": "hi"})
        assert result.is_error is False
        assert result.data == {"text": "hi"}

    @pytest.mark.asyncio
    async def test_unknown_server(self, registry):
        with pytest.raises(ToolError) as exc:
            await registry.execute_tool("nope", "echo_say", {})
        assert exc.value.code == METHOD_NOT_FOUND

    @pytest.mark.asyncio
    async def test_unknown_tool(self, registry):
        with pytest.raises(ToolError) as exc:
            await registry.execute_tool("echo-mcp", "echo_shout", {})
        assert exc.value.code == METHOD_NOT_FOUND

    @pytest.mark.asyncio
    async def test_invalid_params_propagate(self, registry):
        with pytest.raises(ToolError) as exc:
            await registry.execute_tool("echo-mcp", "echo_say", {})
        assert exc.value.code == INVALID_PARAMS


class TestHealthCheckAll:
    @pytest.mark.asyncio
    async def test_runs_health_tools(self, registry):
        registry.register_server(QuietServer())
        results = await registry.health_check_all()
        assert results["echo-mcp"]["isError"] is False
        assert results["quiet-mcp"] == {"status": "unknown", "message": "No health check available"}


class TestToolResult:
    def test_text_with_data(self):
        result = ToolResult.ok("Done", {"a": 1})
        assert result.text == "Done\n\n" + json.dumps({"a": 1}, indent=2)

    def test_error_text(self):
        result = ToolResult.error("Failed", {"code": "X"})
        assert result.text.startswith("Failed\n\nDetails: ")
        assert result.to_dict()["isError"] is True

    def test_plain(self):
        assert ToolResult.ok("Done").to_dict() == {"content": [{"type": "text", "text": "Done"}], "isError": False}
