from __future__ import annotations

from abc import ABC, abstractmethod

from teeclub.domain.entities.booking import Booking, GuestRef


class NotificationPort(ABC):
    @abstractmethod
    def send_invite(self, guest: GuestRef, referral_code: str, link: str) -> None:
        """Send a referral invite to a guest by email and/or SMS."""
        raise NotImplementedError

    @abstractmethod
    def send_booking_confirmation(
        self,
        recipient_email: str | None,
        recipient_phone: str | None,
        recipient_name: str,
        bookings: list[Booking],
    ) -> None:
        raise NotImplementedError
