"""Integration error codes and remediation text."""

from enum import Enum
from typing import Dict, List, Optional, Tuple


class ErrorCode(str, Enum):
    # Authentication
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    # API
    API_ERROR = "API_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    # Validation
    INVALID_REQUEST = "INVALID_REQUEST"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_FORMAT = "INVALID_FORMAT"
    # Resources
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"
    # Configuration
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTEGRATION_DISABLED = "INTEGRATION_DISABLED"



# Slack error string -> what the user should do about it
SLACK_ERROR_SUGGESTIONS: Dict[str, str] = {
    "not_in_channel": "You are not a member of this channel. Please join the channel first.",
    "channel_not_found": "The specified channel does not exist or you do not have access to it.",
    "access_denied": "You do not have permission to post messages to this channel. Check your channel permissions.",
    "account_inactive": "Your Slack account or workspace is inactive.",
    "token_expired": "Your authentication token has expired. Please reconnect the integration.",
    "restricted_action": "Message posting is restricted in this channel. Contact your workspace admin.",
}
DEFAULT_SLACK_SUGGESTION = "Please check the channel ID and ensure you have access to post messages."


def status_for_error(code: Optional[str]) -> int:
    """HTTP status for a failed integration response."""
    if code == ErrorCode.AUTHENTICATION_FAILED:
        return 401
    if code == ErrorCode.RESOURCE_NOT_FOUND:
        return 404
    return 400


def slack_error_suggestion(slack_error: Optional[str]) -> str:
    return SLACK_ERROR_SUGGESTIONS.get(slack_error or "", DEFAULT_SLACK_SUGGESTION)


def send_failure_hint(message: str, reference: str) -> Tuple[str, List[str]]:
    """Rewrite a failed natural-language send into a user-facing message and suggestions.

    Only channel lookup and membership failures get a rewrite; any other
    message passes through with no suggestions.
    """
    if "channel_not_found" in message:
        return (
            f'Channel "{reference}" not found or not accessible',
            [
                "Try using exact channel names like #general, #dev, or #random",
                f'Make sure you\'re a member of the channel "{reference}"',
                "Use @username for direct messages instead of channel names",
            ],
        )
    if "not_in_channel" in message:
        return (
            f'You\'re not a member of channel "{reference}"',
            [
                f"Ask an admin to invite you to {reference}",
                "Try a public channel you're already in like #general",
            ],
        )
    return message, []
