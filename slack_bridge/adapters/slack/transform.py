"""Slack API payloads -> standard domain models."""

from typing import Any, Dict

from slack_bridge.domain.models import StandardChannel, StandardUser


def to_standard_user(user: Dict[str, Any]) -> StandardUser:
    profile = user.get("profile") or {}
    return StandardUser(
        id=user["id"],
        name=profile.get("display_name") or user.get("real_name") or user.get("name"),
        email=profile.get("email") or user.get("email"),
        avatar=profile.get("image_192") or user.get("image_192"),
        status="online" if user.get("presence") == "active" else "offline",
        metadata={
            "isBot": user.get("is_bot"),
            "isAppUser": user.get("is_app_user"),
            "statusText": profile.get("status_text"),
            "statusEmoji": profile.get("status_emoji"),
        },
    )


def to_standard_channel(channel: Dict[str, Any]) -> StandardChannel:
    if channel.get("is_im"):
        kind = "direct"
    elif channel.get("is_mpim") or channel.get("is_group"):
        kind = "group"
    elif channel.get("is_private"):
        kind = "private"
    else:
        kind = "public"

    purpose = (channel.get("purpose") or {}).get("value")
    topic = (channel.get("topic") or {}).get("value")
    return StandardChannel(
        id=channel["id"],
        name=channel.get("name"),
        description=purpose or topic,
        type=kind,
        member_count=channel.get("num_members"),
        metadata={
            "isArchived": channel.get("is_archived"),
            "isGeneral": channel.get("is_general"),
            "isShared": channel.get("is_shared"),
            "isMember": channel.get("is_member"),
        },
    )
