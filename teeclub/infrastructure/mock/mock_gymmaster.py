from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Any

from teeclub.application.exceptions import AuthFailure, RemoteRequestError
from teeclub.application.ports.door_access import DoorAccessPort
from teeclub.application.ports.member_store import MemberStorePort
from teeclub.application.ports.reservations import ReservationPort
from teeclub.domain.entities.booking import ExistingSession
from teeclub.domain.entities.member import (
    CheckinResult,
    Club,
    Door,
    Membership,
    MembershipType,
    MemberSession,
    Resource,
    SignupResult,
    TeeService,
)

DEMO_TOKEN = "demo-token"
DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo"


class MockGymMaster(MemberStorePort, ReservationPort):
    """In-memory stand-in for the GymMaster member store and booking API."""

    def __init__(self, seed_demo_member: bool = True) -> None:
        self._profiles: dict[str, dict[str, Any]] = {}
        self._passwords: dict[str, tuple[str, str]] = {}
        self._memberships: dict[str, list[Membership]] = {}
        self._reservations: dict[int, dict[str, Any]] = {}
        self._next_booking_id = 1000
        self._next_member_id = 1
        self.profile_writes: list[tuple[str, dict[str, str]]] = []
        self.signatures: list[tuple[str, int, str]] = []
        self.agreements: dict[int, str] = {10: "I accept the risks of swinging golf clubs indoors."}
        self.clubs = [Club(id=1, name="Simcoquitos Barrie", billing_provider="square")]
        self.membership_types = [MembershipType(id=10, name="Monthly", description="24/7 access", price="$99.00")]
        self.resources = [Resource(id=i, name=f"Bay {i}", company_id=1) for i in (1, 2, 3)]
        self.services = [
            TeeService(service_id=1, name="Simulator Bay 1 hr", membership_id=10),
            TeeService(service_id=2, name="Simulator Bay 30 min", membership_id=10),
        ]
        self._logger = logging.getLogger(__name__)

        if seed_demo_member:
            self.add_member(
                DEMO_TOKEN,
                {"firstname": "Demo", "surname": "Member", "email": DEMO_EMAIL, "phonecell": "+17055550100"},
                password=DEMO_PASSWORD,
            )

    def add_member(
        self,
        token: str,
        profile: dict[str, Any],
        password: str | None = None,
        memberships: list[Membership] | None = None,
    ) -> str:
        member_id = str(self._next_member_id)
        self._next_member_id += 1
        self._profiles[token] = {"memberid": member_id, **profile}
        if password and profile.get("email"):
            self._passwords[str(profile["email"]).lower()] = (password, token)
        if memberships is None:
            memberships = [Membership(id=10, name="Monthly", start_date=date.today() - timedelta(days=30))]
        self._memberships[token] = list(memberships)
        return member_id

    # member store

    def login(self, email: str, password: str) -> MemberSession:
        entry = self._passwords.get(email.lower())
        if not entry or entry[0] != password:
            raise RemoteRequestError("Invalid email or password")
        token = entry[1]
        return MemberSession(token=token, member_id=self._profiles[token]["memberid"])

    def signup(self, details: dict[str, Any]) -> SignupResult:
        email = str(details.get("email") or "").lower()
        if not email:
            raise RemoteRequestError("Email is required")
        if email in self._passwords:
            raise RemoteRequestError("A member with this email already exists")
        token = f"mock_token_{self._next_member_id}"
        profile = {k: v for k, v in details.items() if k not in {"password", "membershiptypeid", "companyid"}}
        start = date.fromisoformat(str(details.get("startdate") or date.today().isoformat()))
        member_id = self.add_member(
            token,
            profile,
            password=str(details.get("password") or ""),
            memberships=[Membership(id=int(details.get("membershiptypeid") or 10), name="Monthly", start_date=start)],
        )
        return SignupResult(
            session=MemberSession(token=token, member_id=member_id),
            membership_id=self._memberships[token][0].id,
        )

    def fetch_agreement(self, membership_type_id: int, token: str | None = None) -> str:
        return self.agreements.get(membership_type_id) or "No waiver content"

    def save_signature(self, token: str, membership_id: int, signature: str) -> None:
        self._profile(token)
        if not any(m.id == membership_id for m in self._memberships.get(token, [])):
            raise RemoteRequestError(f"Membership {membership_id} not found")
        self.signatures.append((token, membership_id, signature))

    def list_clubs(self) -> list[Club]:
        return list(self.clubs)

    def list_membership_types(self) -> list[MembershipType]:
        return list(self.membership_types)

    def get_profile(self, token: str) -> dict[str, Any]:
        return dict(self._profile(token))

    def update_profile(self, token: str, fields: dict[str, str]) -> None:
        self._profile(token).update(fields)
        self.profile_writes.append((token, dict(fields)))

    def get_memberships(self, token: str) -> list[Membership]:
        self._profile(token)
        return list(self._memberships.get(token, []))

    def get_outstanding_balance(self, token: str) -> dict[str, Any]:
        self._profile(token)
        return {"owing_amount": "0.00", "charges": []}

    def list_all_profiles(self) -> list[dict[str, Any]]:
        return [dict(p) for p in self._profiles.values()]

    # reservations

    def list_services(self, token: str, company_id: int | None = None) -> list[TeeService]:
        self._profile(token)
        return list(self.services)

    def resources_and_sessions(
        self,
        token: str,
        service_id: int,
        day: date,
        company_id: int,
    ) -> tuple[list[Resource], list[ExistingSession]]:
        self._profile(token)
        sessions = [
            ExistingSession(day=r["day"], resource_id=r["resource_id"], start=r["start"])
            for r in self._reservations.values()
            if r["day"] == day
        ]
        return list(self.resources), sessions

    def create_reservation(
        self,
        token: str,
        service_id: int,
        resource_id: int,
        membership_id: int,
        day: date,
        start: time,
    ) -> int:
        self._profile(token)
        for r in self._reservations.values():
            if r["day"] == day and r["resource_id"] == resource_id and r["start"] == start:
                raise RemoteRequestError("This time is no longer available")
        booking_id = self._next_booking_id
        self._next_booking_id += 1
        self._reservations[booking_id] = {
            "token": token,
            "service_id": service_id,
            "resource_id": resource_id,
            "day": day,
            "start": start,
        }
        self._logger.info("Mock reservation created", extra={"booking_id": booking_id})
        return booking_id

    def cancel_reservation(self, token: str, booking_id: int) -> None:
        self._profile(token)
        reservation = self._reservations.get(booking_id)
        if not reservation or reservation["token"] != token:
            raise RemoteRequestError(f"Booking {booking_id} not found")
        del self._reservations[booking_id]
        self._logger.info("Mock reservation cancelled", extra={"booking_id": booking_id})

    def list_member_bookings(self, token: str) -> list[dict[str, Any]]:
        self._profile(token)
        resource_names = {r.id: r.name for r in self.resources}
        service_names = {s.service_id: s.name for s in self.services}
        bookings = []
        for booking_id, r in self._reservations.items():
            if r["token"] != token:
                continue
            starts = datetime.combine(r["day"], r["start"])
            bookings.append(
                {
                    "id": booking_id,
                    "day": r["day"].isoformat(),
                    "starttime": r["start"].strftime("%H:%M:%S"),
                    "start_str": starts.strftime("%I:%M %p").lstrip("0").lower(),
                    "name": resource_names.get(r["resource_id"], "Unknown"),
                    "type": service_names.get(r["service_id"], ""),
                }
            )
        return bookings

    def _profile(self, token: str) -> dict[str, Any]:
        profile = self._profiles.get(token)
        if profile is None:
            raise AuthFailure("Your session has expired, please log in again")
        return profile


class MockDoorAccess(DoorAccessPort):
    def __init__(self, store: MockGymMaster) -> None:
        self._store = store
        self.doors = [Door(id=1, name="Front Door", company_id=1, site_id=1, status=1)]
        self._logger = logging.getLogger(__name__)

    def list_doors(self) -> list[Door]:
        return list(self.doors)

    def check_in(self, token: str, door_id: int) -> CheckinResult:
        self._store.get_profile(token)
        if door_id not in {d.id for d in self.doors}:
            return CheckinResult(access_granted=False, message="Access denied", denied_reason="Unknown door")
        self._logger.info("Mock door opened", extra={"reason": door_id})
        return CheckinResult(access_granted=True, message="Door opened")
