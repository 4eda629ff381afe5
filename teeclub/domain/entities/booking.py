from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta


@dataclass(frozen=True)
class GuestRef:
    name: str
    email: str = ""
    phone: str | None = None
    booking_id: int | None = None


@dataclass(frozen=True)
class GuestPassUsage:
    free: int = 0
    charged: int = 0


@dataclass(frozen=True)
class Slot:
    """A bookable bay-time unit identified by (day, resource_id, start)."""

    day: date
    resource_id: int
    start: time
    bay_name: str = field(default="", compare=False)
    service_name: str = field(default="", compare=False)

    def starts_at(self) -> datetime:
        return datetime.combine(self.day, self.start)

    def span(self, duration_minutes: int) -> tuple[datetime, datetime]:
        begin = self.starts_at()
        return begin, begin + timedelta(minutes=duration_minutes)


@dataclass(frozen=True)
class ExistingSession:
    day: date
    resource_id: int
    start: time
    end: time | None = None


@dataclass(frozen=True)
class Booking:
    id: int
    day: date
    start_time: time
    service_name: str
    location_name: str = ""
    bay_name: str = ""
    guests: tuple[GuestRef, ...] = ()
    guest_pass_usage: GuestPassUsage = GuestPassUsage()
