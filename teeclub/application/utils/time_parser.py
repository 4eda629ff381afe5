from __future__ import annotations

import re
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

TIME_PATTERNS = [
    r"\b(\d{1,2}):(\d{2})(?::\d{2})?\s*(am|pm)?\b",
    r"\b(\d{1,2})\s*(am|pm)\b",
]


def parse_clock_time(text: str | None) -> time | None:
    """Parse '9:00 am', '14:00', '09:00:00' or '2pm'. Returns time or None."""
    if not text:
        return None
    normalized = str(text).lower().strip()

    for pattern in TIME_PATTERNS:
        match = re.search(pattern, normalized)
        if not match:
            continue
        groups = match.groups()
        hour = int(groups[0])
        minute = int(groups[1]) if len(groups) == 3 else 0
        am_pm = groups[-1]

        if am_pm == "pm" and hour != 12:
            hour += 12
        elif am_pm == "am" and hour == 12:
            hour = 0

        if 0 <= hour <= 23 and 0 <= minute <= 59:
            return time(hour, minute)

    return None


def parse_day(text: str | None) -> date | None:
    """Parse the YYYY-MM-DD day format used by the member store."""
    if not text:
        return None
    try:
        return date.fromisoformat(str(text).strip()[:10])
    except ValueError:
        return None


def format_clock_time(value: time) -> str:
    """Format as '9:30 AM' without a leading zero on the hour."""
    hour = value.hour % 12 or 12
    am_pm = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {am_pm}"


def current_period(timezone: ZoneInfo, now: datetime | None = None) -> str:
    """Guest-pass accounting period ('YYYY-MM') for the club's local calendar month."""
    current = now.astimezone(timezone) if now else datetime.now(timezone)
    return f"{current.year:04d}-{current.month:02d}"


def safe_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except Exception:
        return ZoneInfo("UTC")
