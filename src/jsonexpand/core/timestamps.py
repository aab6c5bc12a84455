"""Timestamp parsing and formatting for event fields.

Event timestamps are always timezone-aware datetimes in UTC. Strings arriving
in decoded JSON are accepted in RFC 3339 form and the common variants that
`datetime.fromisoformat` understands (space separator, missing seconds,
fractional seconds of any precision). Naive values are taken to be UTC.
"""

import re
from datetime import UTC, datetime

# fromisoformat accepts at most 6 fractional digits
_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339-ish timestamp string and normalise it to UTC.

    Args:
        value: Timestamp text, e.g. "2020-01-01T00:00:00Z" or
            "2020-01-01 01:00:00+01:00"

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        ValueError: If the text is not a recognisable timestamp
    """
    text = value.strip()
    if not text:
        raise ValueError("empty timestamp")
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"
    text = _FRACTION_PATTERN.sub(r"\1", text)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO 8601 UTC with millisecond precision and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
