"""ISO 8601 and Unix timestamp utilities.

This module centralizes all transformations between Python datetime objects,
ISO 8601 strings and Unix timestamps. Token claims use Unix seconds; stored
records use ISO 8601 strings.
"""

from datetime import datetime, UTC


def to_timestamp(dt: datetime) -> str:
    """Convert datetime to ISO 8601 UTC timestamp string."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.isoformat().replace("+00:00", "Z")


def now() -> str:
    """Get current UTC timestamp as ISO 8601 string."""
    return to_timestamp(datetime.now(UTC))


def now_unix() -> int:
    """Get current UTC time as integer Unix seconds."""
    return int(datetime.now(UTC).timestamp())
