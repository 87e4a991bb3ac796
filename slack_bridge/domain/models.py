"""Domain data models — pure Python dataclasses."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ParsedCommand:
    """Target phrase and message body extracted from an instruction."""

    target_phrase: str
    message_body: str
    pattern: str  # "send" | "tell"


@dataclass(frozen=True)
class ParseFailure:
    """Returned instead of a ParsedCommand when no rule produced both fields."""

    instruction: str
    reason: str
    examples: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ResolvedCommand:
    """A parsed command whose target has been resolved to a Slack reference."""

    reference: str
    message_body: str
    parsed: ParsedCommand


@dataclass
class StandardUser:
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None
    status: str = "offline"  # "online" | "offline"
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "avatar": self.avatar,
            "status": self.status,
            "metadata": dict(self.metadata),
        }


@dataclass
class StandardChannel:
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    type: str = "public"  # "public" | "private" | "group" | "direct"
    member_count: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "memberCount": self.member_count,
            "metadata": dict(self.metadata),
        }


@dataclass
class HealthReport:
    status: str  # "healthy" | "degraded" | "unhealthy"
    timestamp: str
    checks: Dict[str, bool]
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_checks(cls, checks: Dict[str, bool], details: Optional[Dict[str, Any]] = None) -> "HealthReport":
        if all(checks.values()):
            status = "healthy"
        elif checks.get("authentication"):
            status = "degraded"
        else:
            status = "unhealthy"
        return cls(status=status, timestamp=now_iso(), checks=dict(checks), details=details or {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "timestamp": self.timestamp,
            "checks": {
                "authentication": self.checks.get("authentication", False),
                "apiAccess": self.checks.get("api_access", False),
                "permissions": self.checks.get("permissions", False),
            },
            "details": dict(self.details),
        }


@dataclass
class IntegrationError:
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            out["details"] = self.details
        return out


@dataclass
class IntegrationResponse:
    """Uniform envelope returned by every integration operation."""

    success: bool
    data: Optional[Any] = None
    error: Optional[IntegrationError] = None
    meta: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success}
        if self.data is not None:
            out["data"] = self.data
        if self.error is not None:
            out["error"] = self.error.to_dict()
        if self.meta:
            out["meta"] = dict(self.meta)
        return out


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
