"""Date parsing and rendering for exercise records.

Stored datetimes are naive UTC. Responses render dates as
``Www Mmm dd yyyy`` (for example ``Mon Jan 02 2006``).
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

DISPLAY_FORMAT = "%a %b %d %Y"
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_date(raw) -> datetime | None:
    """Parse a client supplied date string.

    Accepts ISO-8601 dates and datetimes (a trailing ``Z`` is read as
    UTC) and the display format itself. Returns ``None`` when the value
    is empty or is not a valid calendar date.
    """
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return _to_naive_utc(datetime.fromisoformat(iso))
    except (ValueError, OverflowError):
        # offsets can push dates near the calendar edges out of range
        pass
    try:
        return datetime.strptime(text, DISPLAY_FORMAT)
    except ValueError:
        return None


def format_date(value: datetime) -> str:
    """Render `value` as ``Www Mmm dd yyyy`` with a zero padded 4 digit year."""
    return f"{value:%a %b %d} {value.year:04d}"


def parse_limit(raw) -> int | None:
    """Read the leading integer of `raw`, e.g. ``"5"`` or ``"2abc"``.

    Returns ``None`` when no integer prefix is present.
    """
    if raw is None:
        return None
    match = _LEADING_INT.match(str(raw))
    if not match:
        return None
    return int(match.group(1))
