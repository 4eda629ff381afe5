from __future__ import annotations

import logging
from datetime import date, time
from typing import Any

from teeclub.application.exceptions import RemoteRequestError
from teeclub.application.ports.reservations import ReservationPort
from teeclub.application.utils.time_parser import parse_clock_time, parse_day
from teeclub.domain.entities.booking import ExistingSession
from teeclub.domain.entities.member import Resource, TeeService
from teeclub.infrastructure.gymmaster.gymmaster_client import GymMasterClient


class GymMasterReservations(ReservationPort):
    def __init__(self, client: GymMasterClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    def list_services(self, token: str, company_id: int | None = None) -> list[TeeService]:
        data = self._client.get("/v1/booking/services", {"token": token, "companyid": company_id})
        return [
            TeeService(
                service_id=int(s["serviceid"]),
                name=str(s.get("servicename") or ""),
                membership_id=s.get("membershipid"),
                benefit_id=s.get("benefitid"),
            )
            for s in data.get("result") or []
        ]

    def resources_and_sessions(
        self,
        token: str,
        service_id: int,
        day: date,
        company_id: int,
    ) -> tuple[list[Resource], list[ExistingSession]]:
        data = self._client.get(
            "/v1/booking/resources_and_sessions",
            {"token": token, "serviceid": service_id, "day": day.isoformat(), "companyid": company_id},
        )
        result = data.get("result") or {}
        resources = [
            Resource(id=int(r["id"]), name=str(r.get("name") or ""), company_id=r.get("companyid"))
            for r in result.get("resources") or []
        ]
        sessions: list[ExistingSession] = []
        for raw in result.get("dates") or []:
            start = parse_clock_time(raw.get("bookingstart"))
            session_day = parse_day(raw.get("day")) or day
            if start is None or raw.get("rid") is None:
                continue
            sessions.append(
                ExistingSession(
                    day=session_day,
                    resource_id=int(raw["rid"]),
                    start=start,
                    end=parse_clock_time(raw.get("bookingend")),
                )
            )
        return resources, sessions

    def create_reservation(
        self,
        token: str,
        service_id: int,
        resource_id: int,
        membership_id: int,
        day: date,
        start: time,
    ) -> int:
        data = self._client.post_form(
            "/v1/booking/service/book",
            {
                "token": token,
                "serviceid": service_id,
                "resourceid": resource_id,
                "membershipid": membership_id,
                "day": day.isoformat(),
                "starttime": start.strftime("%H:%M"),
            },
        )
        result = data.get("result")
        booking_id = (result.get("bookingid") or result.get("id")) if isinstance(result, dict) else result
        try:
            return int(booking_id)
        except (TypeError, ValueError) as e:
            raise RemoteRequestError("GymMaster did not return a booking id") from e

    def cancel_reservation(self, token: str, booking_id: int) -> None:
        self._client.post_form("/v1/booking/service/cancel", {"token": token, "bookingid": booking_id})

    def list_member_bookings(self, token: str) -> list[dict[str, Any]]:
        data = self._client.get("/v2/member/bookings", {"token": token})
        return list(data.get("servicebookings") or [])
