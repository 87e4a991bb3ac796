"""Configuration and environment loading."""

__version__ = "0.1.0"

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

_stderr_print = lambda *a, **kw: print(*a, **kw, file=sys.stderr)

SUPPORTED_ENVIRONMENTS = ("production", "development", "test")
APP_ENV = os.getenv("APP_ENV", "production").strip().lower()
if APP_ENV not in SUPPORTED_ENVIRONMENTS:
    _stderr_print(f"Unsupported APP_ENV={APP_ENV!r}, falling back to 'production'")
    APP_ENV = "production"

CONFIG = {
    "port": int(os.getenv("PORT", "3000")),
    "environment": APP_ENV,
    # Nango (OAuth connection broker)
    "nango_secret_key": os.getenv("NANGO_SECRET_KEY", ""),
    "nango_host": os.getenv("NANGO_HOST", "https://api.nango.dev").rstrip("/"),
    "nango_provider_config_key": os.getenv("NANGO_PROVIDER_CONFIG_KEY", "slack"),
    "nango_end_user_email_domain": os.getenv("NANGO_END_USER_EMAIL_DOMAIN", "slack-bridge.local"),
    # Slack tools
    "slack_default_connection_id": os.getenv("SLACK_DEFAULT_CONNECTION_ID", ""),
    # Tool server config file (optional JSON)
    "mcp_config_path": os.getenv("MCP_CONFIG_PATH", ""),
}

SLACK_CAPABILITIES = [
    "messaging",
    "channel-management",
    "user-management",
    "health-checking",
    "ai-commands",
]


# ── Typed config ────────────────────────────────────────────


@dataclass
class NangoConfig:
    secret_key: str = ""
    host: str = "https://api.nango.dev"
    provider_config_key: str = "slack"
    end_user_email_domain: str = "slack-bridge.local"

    @property
    def is_configured(self) -> bool:
        return bool(self.secret_key)


@dataclass
class ToolServerConfig:
    enabled: bool = True
    default_connection_id: Optional[str] = None
    capabilities: List[str] = field(default_factory=lambda: list(SLACK_CAPABILITIES))


@dataclass
class RegistryConfig:
    auto_discovery: bool = True
    health_check_interval: int = 300_000  # ms
    max_retries: int = 3
    timeout: int = 30_000  # ms

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000


@dataclass
class AppConfig:
    """Typed configuration handed to AppState at process start."""

    port: int = 3000
    environment: str = "production"
    nango: NangoConfig = field(default_factory=NangoConfig)
    slack_tools: ToolServerConfig = field(default_factory=ToolServerConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create AppConfig from environment variables and the optional tool config file."""
        slack_tools, registry = load_tool_config(CONFIG["mcp_config_path"] or None)
        if not slack_tools.default_connection_id:
            slack_tools.default_connection_id = CONFIG["slack_default_connection_id"] or None
        return cls(
            port=CONFIG["port"],
            environment=CONFIG["environment"],
            nango=NangoConfig(
                secret_key=CONFIG["nango_secret_key"],
                host=CONFIG["nango_host"],
                provider_config_key=CONFIG["nango_provider_config_key"],
                end_user_email_domain=CONFIG["nango_end_user_email_domain"],
            ),
            slack_tools=slack_tools,
            registry=registry,
        )


# ── Tool server config file ─────────────────────────────────


def _candidate_config_paths(explicit: Optional[str]) -> List[Path]:
    paths = []
    if explicit:
        paths.append(Path(explicit))
    cwd = Path.cwd()
    paths.append(cwd / "mcp" / "config.json")
    paths.append(cwd / "mcp.config.json")
    return paths


def _read_config_file(explicit: Optional[str]) -> Dict[str, Any]:
    for path in _candidate_config_paths(explicit):
        if not path.exists():
            continue
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            _stderr_print(f"[config] Failed to load tool config {path}: {e}; using defaults")
            return {}
        if not isinstance(raw, dict):
            _stderr_print(f"[config] Tool config {path} is not an object; using defaults")
            return {}
        _stderr_print(f"[config] Tool config loaded from {path}")
        return raw
    return {}


def load_tool_config(path: Optional[str] = None) -> Tuple[ToolServerConfig, RegistryConfig]:
    """Load the Slack tool-server and registry settings, merged over defaults.

    The file layout is ``{"servers": {"slack": {...}}, "registry": {...}}``
    with camelCase keys. Missing or unreadable files yield the defaults.
    """
    raw = _read_config_file(path)

    slack_raw = (raw.get("servers") or {}).get("slack") or {}
    slack_cfg = slack_raw.get("config") or {}
    slack = ToolServerConfig(
        enabled=bool(slack_raw.get("enabled", True)),
        default_connection_id=slack_cfg.get("defaultConnectionId") or None,
        capabilities=list(slack_raw.get("capabilities") or SLACK_CAPABILITIES),
    )

    registry_raw = raw.get("registry") or {}
    defaults = RegistryConfig()
    registry = RegistryConfig(
        auto_discovery=bool(registry_raw.get("autoDiscovery", defaults.auto_discovery)),
        health_check_interval=int(
            registry_raw.get("healthCheckInterval", defaults.health_check_interval)
        ),
        max_retries=int(registry_raw.get("maxRetries", defaults.max_retries)),
        timeout=int(registry_raw.get("timeout", defaults.timeout)),
    )
    return slack, registry
