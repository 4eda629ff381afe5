from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, time
from typing import Any

from teeclub.domain.entities.booking import ExistingSession
from teeclub.domain.entities.member import Resource, TeeService


class ReservationPort(ABC):
    @abstractmethod
    def list_services(self, token: str, company_id: int | None = None) -> list[TeeService]:
        raise NotImplementedError

    @abstractmethod
    def resources_and_sessions(
        self,
        token: str,
        service_id: int,
        day: date,
        company_id: int,
    ) -> tuple[list[Resource], list[ExistingSession]]:
        """Bookable resources and the sessions already taken on them for a day."""
        raise NotImplementedError

    @abstractmethod
    def create_reservation(
        self,
        token: str,
        service_id: int,
        resource_id: int,
        membership_id: int,
        day: date,
        start: time,
    ) -> int:
        """Create a reservation. Returns the booking id assigned remotely."""
        raise NotImplementedError

    @abstractmethod
    def cancel_reservation(self, token: str, booking_id: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_member_bookings(self, token: str) -> list[dict[str, Any]]:
        raise NotImplementedError
