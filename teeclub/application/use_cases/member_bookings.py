from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from teeclub.application.ports.reservations import ReservationPort
from teeclub.application.use_cases.guest_ledger import GuestLedgerService
from teeclub.application.utils.guest_ledger_codec import guests_for_booking
from teeclub.application.utils.time_parser import parse_clock_time, parse_day
from teeclub.domain.entities.booking import Booking
from teeclub.domain.entities.member import MemberSession


class MemberBookingsUseCase:
    def __init__(self, reservations: ReservationPort, ledger: GuestLedgerService, default_location: str = "") -> None:
        self._reservations = reservations
        self._ledger = ledger
        self._default_location = default_location
        self._logger = logging.getLogger(__name__)

    def execute(self, session: MemberSession) -> list[Booking]:
        raw_bookings = self._reservations.list_member_bookings(session.token)
        ledger = self._ledger.load(session)

        bookings: list[Booking] = []
        for raw in raw_bookings:
            booking = self._to_booking(raw)
            if booking is None:
                continue
            guests = tuple(guests_for_booking(ledger, booking.id))
            if guests:
                booking = replace(booking, guests=guests)
            bookings.append(booking)

        bookings.sort(key=lambda b: (b.day, b.start_time))
        return bookings

    def _to_booking(self, raw: dict[str, Any]) -> Booking | None:
        day = parse_day(raw.get("day"))
        # start_str ("9:00 am") is preferred over the raw starttime column
        start = parse_clock_time(raw.get("start_str")) or parse_clock_time(raw.get("starttime"))
        if raw.get("id") is None or day is None or start is None:
            self._logger.warning("Skipping unreadable booking", extra={"booking_id": raw.get("id")})
            return None
        return Booking(
            id=int(raw["id"]),
            day=day,
            start_time=start,
            service_name=str(raw.get("type") or raw.get("name") or ""),
            location_name=str(raw.get("location") or self._default_location),
            bay_name=str(raw.get("name") or "Unknown"),
        )
