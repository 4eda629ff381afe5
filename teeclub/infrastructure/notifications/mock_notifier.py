from __future__ import annotations

import logging
from typing import Any

from teeclub.application.ports.notifications import NotificationPort
from teeclub.domain.entities.booking import Booking, GuestRef


class MockNotifier(NotificationPort):
    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self._logger = logging.getLogger(__name__)

    def send_invite(self, guest: GuestRef, referral_code: str, link: str) -> None:
        self.sent.append({"kind": "invite", "to": guest.email or guest.phone, "code": referral_code, "link": link})
        self._logger.info("Mock invite sent", extra={"reason": guest.name})

    def send_booking_confirmation(
        self,
        recipient_email: str | None,
        recipient_phone: str | None,
        recipient_name: str,
        bookings: list[Booking],
    ) -> None:
        self.sent.append(
            {
                "kind": "confirmation",
                "to": recipient_email or recipient_phone,
                "booking_ids": [b.id for b in bookings],
            }
        )
        self._logger.info("Mock booking confirmation sent", extra={"reason": recipient_name})
