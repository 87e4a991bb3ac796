"""Target phrase -> Slack reference resolution.

Pure Python, no framework dependencies. Users name channels colloquially
("the dev channel", "developers"), so phrases are cleaned and mapped through
a static synonym table instead of a live directory lookup. Whether the
resulting channel exists is left to the send call.
"""

import re
from typing import Dict

# Channel/DM/group IDs, e.g. C0123456789; all-caps words such as MARKETING are not IDs
PLATFORM_ID_RE = re.compile(r"^[A-Z](?=[A-Z0-9]*[0-9])[A-Z0-9]{8,}$")

_ARTICLE_RE = re.compile(r"^(?:the|a|an)\s+")
_TRAILING_NOUN_RE = re.compile(r"\s+(?:channel|room)$")
_WHITESPACE_RE = re.compile(r"\s+")

CHANNEL_SYNONYMS: Dict[str, str] = {
    "development": "dev",
    "developer": "dev",
    "developers": "dev",
    "programming": "dev",
    "coding": "dev",
    "general": "general",
    "random": "random",
    "team": "team",
    "announcements": "announcements",
    "announce": "announcements",
    "marketing": "marketing",
    "sales": "sales",
    "support": "support",
    "help": "support",
    "design": "design",
    "product": "product",
    "engineering": "engineering",
    "tech": "tech",
    "technology": "tech",
}


def is_platform_id(phrase: str) -> bool:
    """True for opaque Slack IDs; only the leading letter's case is ignored.

    An ID carries at least one digit, so shouted channel names stay names.
    """
    if not phrase:
        return False
    return bool(PLATFORM_ID_RE.match(phrase[0].upper() + phrase[1:]))


def is_explicit_reference(phrase: str) -> bool:
    return phrase.startswith(("#", "@")) or is_platform_id(phrase)


def clean_phrase(phrase: str) -> str:
    """Lower-case, drop a leading article and trailing channel/room, hyphenate."""
    cleaned = phrase.strip().lower()
    cleaned = _ARTICLE_RE.sub("", cleaned)
    cleaned = _TRAILING_NOUN_RE.sub("", cleaned)
    return _WHITESPACE_RE.sub("-", cleaned.strip())


def resolve_reference(target_phrase: str) -> str:
    """Map a loosely specified target to ``#channel``, ``@user`` or a platform ID.

    Explicit references pass through unchanged. Anything else is treated as
    a channel: cleaned, looked up in CHANNEL_SYNONYMS (exact match only) and
    prefixed with ``#``. Unknown phrases degrade to ``#<cleaned-phrase>``.

    A blank phrase resolves to ``""``; the command parser never produces one.
    """
    phrase = (target_phrase or "").strip()
    if not phrase:
        return ""
    if is_explicit_reference(phrase):
        return phrase

    cleaned = clean_phrase(phrase)
    slug = CHANNEL_SYNONYMS.get(cleaned, cleaned)
    return f"#{slug}"


def reference_kind(reference: str) -> str:
    """Classify a resolved reference as "channel", "user" or "id"."""
    if not reference:
        return "unknown"
    if reference.startswith("@"):
        return "user"
    if reference.startswith("#"):
        return "channel"
    return "id"
