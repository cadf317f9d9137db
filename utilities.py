"""
Utility Functions for GitAnalyzer

This module provides small helpers shared by the aggregator and exporter:
timestamp parsing for the mixed date formats found in API payloads and
conversion of repository names into safe file names.
"""

import re
from datetime import datetime, timezone
from typing import Any, Optional

_UNSAFE_FILENAME_CHARS = re.compile(r'[^A-Za-z0-9._-]+')
# Fractional seconds directly before the UTC offset or end of string
_FRACTION = re.compile(r'\.(\d+)(?=[+-]\d{2}:?\d{2}$|$)')


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure a datetime object has UTC timezone information.

    Naive datetimes are assumed to already be in UTC; aware datetimes are
    converted.

    Args:
        dt: Datetime object to normalize

    Returns:
        Datetime object in UTC, or None if input was None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an API timestamp into an aware UTC datetime.

    Accepts ISO 8601 strings (with ``Z`` or an explicit offset, with or
    without fractional seconds), epoch seconds and datetime objects.

    Returns:
        The parsed datetime in UTC, or None when the value is not a usable date
    """
    if isinstance(value, datetime):
        return ensure_utc(value)

    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    # fromisoformat only understands the Z suffix from Python 3.11 on
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # Before Python 3.11 fromisoformat only takes 3 or 6 fraction digits
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text)

    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def safe_filename(name: str, fallback: str = "repo") -> str:
    """
    Turn a repository name such as ``owner/name`` into a single file name component.

    Args:
        name: Name to convert
        fallback: Value used when nothing usable remains

    Returns:
        Name with path separators and other unsafe characters replaced by ``_``
    """
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", name.strip()).strip("._")
    return cleaned or fallback
