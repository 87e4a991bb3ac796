"""Application state — owns config, Nango client, Slack service and tool registry."""

import sys
from typing import Optional

from slack_bridge.adapters.nango.client import NangoClient
from slack_bridge.adapters.slack.service import SlackService
from slack_bridge.config import AppConfig
from slack_bridge.domain.dispatcher import CommandDispatcher
from slack_bridge.server.registry import ToolRegistry
from slack_bridge.server.slack_tools import SlackToolServer


def _log(msg: str):
    print(msg, file=sys.stderr)


class AppState:
    """Built once per process and passed to the HTTP app and the MCP server.

    Collaborators can be injected (tests pass fakes); anything omitted is
    built from ``config``.
    """

    def __init__(
        self,
        config: AppConfig,
        nango=None,
        slack: Optional[SlackService] = None,
        registry: Optional[ToolRegistry] = None,
    ):
        _log("Initializing Slack bridge state...")
        self.config = config
        self.nango = nango or NangoClient(config.nango, timeout=config.registry.timeout_seconds)
        self.slack = slack or SlackService(self.nango, max_attempts=config.registry.max_retries)
        self.dispatcher = CommandDispatcher(self.slack)

        if registry is None:
            registry = ToolRegistry()
            if config.registry.auto_discovery:
                self._register_default_servers(registry)
        self.registry = registry

        _log(f"Slack bridge state initialized ({len(self.registry.get_all_tools())} tools).")

    def _register_default_servers(self, registry: ToolRegistry):
        tools_cfg = self.config.slack_tools
        if not tools_cfg.enabled:
            _log("Slack tool server disabled in tool config")
            return
        if not self.nango.is_configured:
            _log("NANGO_SECRET_KEY not set; Slack tool server not registered")
            return
        registry.register_server(SlackToolServer(
            self.slack,
            dispatcher=self.dispatcher,
            default_connection_id=tools_cfg.default_connection_id,
            capabilities=tools_cfg.capabilities,
        ))

    @property
    def nango_configured(self) -> bool:
        return self.nango.is_configured
