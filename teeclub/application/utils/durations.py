from __future__ import annotations

import re
from typing import Callable

DurationResolver = Callable[[str], int]

DEFAULT_SLOT_MINUTES = 30

_HOURS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:hr|hrs|hour|hours)\b")
_MINUTES_PATTERN = re.compile(r"(\d+)\s*(?:min|mins|minutes)\b")


def duration_from_service_name(service_name: str | None) -> int:
    """Guess a reservation length from the service name ('Bay 1 hr' -> 60).

    Only used for services that have no catalog entry.
    """
    if not service_name:
        return DEFAULT_SLOT_MINUTES
    normalized = service_name.lower()

    match = _HOURS_PATTERN.search(normalized)
    if match:
        return int(float(match.group(1)) * 60)

    match = _MINUTES_PATTERN.search(normalized)
    if match:
        return int(match.group(1))

    return DEFAULT_SLOT_MINUTES
