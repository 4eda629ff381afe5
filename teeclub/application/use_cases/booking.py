from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from zoneinfo import ZoneInfo

from teeclub.application.exceptions import (
    AuthFailure,
    FailedSlot,
    NoActiveMembership,
    PartialBookingFailure,
    RemoteRequestError,
    RemoteUnavailable,
    SlotConflict,
)
from teeclub.application.ports.member_store import MemberStorePort
from teeclub.application.ports.notifications import NotificationPort
from teeclub.application.ports.reservations import ReservationPort
from teeclub.application.use_cases.availability import SlotAvailabilityChecker
from teeclub.application.use_cases.guest_ledger import GuestLedgerService
from teeclub.application.use_cases.referrals import ReferralService
from teeclub.application.utils.guest_ledger_codec import add_referral_code, record_guest_invites
from teeclub.domain.entities.booking import Booking, ExistingSession, GuestPassUsage, GuestRef, Slot
from teeclub.domain.entities.guest_ledger import GuestLedger
from teeclub.domain.entities.member import Membership, MemberSession


@dataclass(frozen=True)
class BookingRequest:
    service_id: int
    service_name: str
    company_id: int
    slots: list[Slot]
    location_name: str = ""
    guests: list[GuestRef] = field(default_factory=list)


@dataclass(frozen=True)
class LedgerDelta:
    free: int
    charged: int
    referral_codes: list[str]
    guest_passes_used: int


@dataclass(frozen=True)
class BookingResult:
    bookings: list[Booking]
    ledger_delta: LedgerDelta | None = None
    amount_due_cents: int = 0
    partial_failure: PartialBookingFailure | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def booking_ids(self) -> list[int]:
        return [b.id for b in self.bookings]


class BookingOrchestrator:
    def __init__(
        self,
        members: MemberStorePort,
        reservations: ReservationPort,
        ledger: GuestLedgerService,
        referrals: ReferralService,
        notifications: NotificationPort,
        checker: SlotAvailabilityChecker,
        timezone: ZoneInfo,
        guest_pass_charge_cents: int = 1000,
    ) -> None:
        self._members = members
        self._reservations = reservations
        self._ledger = ledger
        self._referrals = referrals
        self._notifications = notifications
        self._checker = checker
        self._timezone = timezone
        self._guest_pass_charge_cents = guest_pass_charge_cents
        self._logger = logging.getLogger(__name__)

    def book_slots(self, session: MemberSession, request: BookingRequest) -> BookingResult:
        if not request.slots:
            raise ValueError("At least one slot is required")

        slots = [s if s.service_name else replace(s, service_name=request.service_name) for s in request.slots]
        request = replace(request, slots=slots)

        membership = self._active_membership(session)

        conflicts = self._checker.conflicting_slots(request.slots)
        if conflicts:
            raise SlotConflict("Selected times overlap each other on the same bay", conflicts)

        taken = self._taken_slots(session, request)

        booked: list[tuple[Slot, int]] = []
        failed: list[FailedSlot] = []
        auth_error: AuthFailure | None = None
        for slot in request.slots:
            if slot in taken:
                failed.append(FailedSlot(slot=slot, reason="This time is no longer available"))
                continue
            try:
                booking_id = self._reservations.create_reservation(
                    token=session.token,
                    service_id=request.service_id,
                    resource_id=slot.resource_id,
                    membership_id=membership.id,
                    day=slot.day,
                    start=slot.start,
                )
            except AuthFailure as e:
                auth_error = e
                failed.append(FailedSlot(slot=slot, reason=str(e)))
            except (RemoteUnavailable, RemoteRequestError) as e:
                self._logger.warning(
                    "Slot reservation failed",
                    extra={"member": session.member_id, "slot": _slot_label(slot), "error": str(e)},
                )
                failed.append(FailedSlot(slot=slot, reason=str(e)))
            else:
                self._logger.info(
                    "Slot reserved",
                    extra={"member": session.member_id, "slot": _slot_label(slot), "booking_id": booking_id},
                )
                booked.append((slot, booking_id))

        if not booked and auth_error is not None:
            raise auth_error

        partial = PartialBookingFailure(booked=list(booked), failed=failed) if failed else None
        bookings = [self._to_booking(slot, booking_id, request) for slot, booking_id in booked]
        if not bookings:
            return BookingResult(bookings=[], partial_failure=partial)

        warnings: list[str] = []
        ledger_delta: LedgerDelta | None = None
        codes: list[str] = []
        if request.guests:
            codes = [self._referrals.generate_code() for _ in request.guests]
            first_booking_id = bookings[0].id
            try:
                usage, updated = self._record_guests(session, request.guests, codes, first_booking_id)
            except (AuthFailure, RemoteUnavailable, RemoteRequestError) as e:
                self._logger.error(
                    "Guest ledger update failed",
                    extra={"member": session.member_id, "booking_id": first_booking_id, "error": str(e)},
                )
                warnings.append("Guests could not be recorded; invitations were not sent")
                codes = []
            else:
                ledger_delta = LedgerDelta(
                    free=usage.free,
                    charged=usage.charged,
                    referral_codes=codes,
                    guest_passes_used=updated.guest_passes_used,
                )
                bookings[0] = replace(
                    bookings[0],
                    guests=tuple(replace(g, booking_id=first_booking_id) for g in request.guests),
                    guest_pass_usage=usage,
                )

        self._notify(session, request.guests if codes else [], codes, bookings)

        charged = ledger_delta.charged if ledger_delta else 0
        return BookingResult(
            bookings=bookings,
            ledger_delta=ledger_delta,
            amount_due_cents=charged * self._guest_pass_charge_cents,
            partial_failure=partial,
            warnings=warnings,
        )

    def _active_membership(self, session: MemberSession) -> Membership:
        today = datetime.now(self._timezone).date()
        for membership in self._members.get_memberships(session.token):
            if membership.is_active(today):
                return membership
        raise NoActiveMembership("No active membership found for this account")

    def _taken_slots(self, session: MemberSession, request: BookingRequest) -> set[Slot]:
        taken: set[Slot] = set()
        sessions_by_day: dict[date, list[ExistingSession]] = {}
        for slot in request.slots:
            if slot.day not in sessions_by_day:
                _, sessions = self._reservations.resources_and_sessions(
                    session.token, request.service_id, slot.day, request.company_id
                )
                sessions_by_day[slot.day] = sessions
            if not self._checker.is_available(slot, sessions_by_day[slot.day]):
                taken.add(slot)
        return taken

    def _record_guests(
        self,
        session: MemberSession,
        guests: list[GuestRef],
        codes: list[str],
        booking_id: int,
    ) -> tuple[GuestPassUsage, GuestLedger]:
        usage_holder: list[GuestPassUsage] = []

        def change(ledger: GuestLedger) -> GuestLedger:
            usage_holder.append(self._ledger.split_passes(ledger, len(guests)))
            for code in codes:
                ledger = add_referral_code(ledger, code)
            return record_guest_invites(ledger, guests, booking_id)

        updated = self._ledger.mutate(session, change)
        return usage_holder[-1], updated

    def _notify(
        self,
        session: MemberSession,
        guests: list[GuestRef],
        codes: list[str],
        bookings: list[Booking],
    ) -> None:
        for guest, code in zip(guests, codes):
            try:
                self._notifications.send_invite(guest, code, self._referrals.referral_link(code))
            except Exception as e:
                self._logger.error("Invite notification failed", extra={"reason": guest.name, "error": str(e)})

        try:
            profile = self._members.get_profile(session.token)
            name = " ".join(p for p in (profile.get("firstname"), profile.get("surname")) if p) or "Member"
            self._notifications.send_booking_confirmation(
                recipient_email=profile.get("email") or None,
                recipient_phone=profile.get("phonecell") or None,
                recipient_name=name,
                bookings=bookings,
            )
        except Exception as e:
            self._logger.error(
                "Booking confirmation failed",
                extra={"member": session.member_id, "booking_id": bookings[0].id, "error": str(e)},
            )

    def _to_booking(self, slot: Slot, booking_id: int, request: BookingRequest) -> Booking:
        return Booking(
            id=booking_id,
            day=slot.day,
            start_time=slot.start,
            service_name=slot.service_name or request.service_name,
            location_name=request.location_name,
            bay_name=slot.bay_name,
        )


def _slot_label(slot: Slot) -> str:
    return f"{slot.day.isoformat()} {slot.start.strftime('%H:%M')} bay={slot.resource_id}"
