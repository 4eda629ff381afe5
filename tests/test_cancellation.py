"""
Tests for cancelling bookings and releasing guest passes.
"""

from __future__ import annotations

from datetime import date, time, timedelta

import pytest

from teeclub.application.exceptions import RemoteRequestError, RemoteUnavailable
from teeclub.application.use_cases.booking import BookingRequest
from teeclub.application.use_cases.cancellation import CancelBookingUseCase
from teeclub.domain.entities.booking import GuestRef, Slot
from teeclub.infrastructure.mock.mock_gymmaster import DEMO_TOKEN

DAY = date.today() + timedelta(days=2)


def _book(orchestrator, session, resource_id: int, guests: list[GuestRef]) -> int:
    request = BookingRequest(
        service_id=1,
        service_name="Simulator Bay 1 hr",
        company_id=1,
        slots=[Slot(day=DAY, resource_id=resource_id, start=time(15, 0))],
        guests=guests,
    )
    return orchestrator.book_slots(session, request).booking_ids[0]


def test_cancel_releases_guest_passes(orchestrator, gymmaster, ledger_service, session):
    kept = _book(orchestrator, session, 1, [GuestRef(name="Ann")])
    cancelled = _book(orchestrator, session, 2, [GuestRef(name="Bob")])
    assert ledger_service.load(session).guest_passes_used == 2

    CancelBookingUseCase(reservations=gymmaster, ledger=ledger_service).execute(session, cancelled)

    ledger = ledger_service.load(session)
    assert ledger.guest_passes_used == 1
    assert ledger.guest_booking_ids == (kept,)
    assert [g.name for g in ledger.guests] == ["Ann"]
    assert [b["id"] for b in gymmaster.list_member_bookings(DEMO_TOKEN)] == [kept]


def test_cancel_without_guests_does_not_write_ledger(orchestrator, gymmaster, ledger_service, session):
    booking_id = _book(orchestrator, session, 1, [])
    writes_before = len(gymmaster.profile_writes)

    CancelBookingUseCase(reservations=gymmaster, ledger=ledger_service).execute(session, booking_id)

    assert len(gymmaster.profile_writes) == writes_before
    assert gymmaster.list_member_bookings(DEMO_TOKEN) == []


def test_remote_cancel_failure_leaves_ledger_untouched(orchestrator, gymmaster, ledger_service, session, monkeypatch):
    booking_id = _book(orchestrator, session, 1, [GuestRef(name="Ann")])
    before = ledger_service.load(session)

    def down(token, booking_id):
        raise RemoteUnavailable("GymMaster returned 503")

    monkeypatch.setattr(gymmaster, "cancel_reservation", down)

    with pytest.raises(RemoteUnavailable):
        CancelBookingUseCase(reservations=gymmaster, ledger=ledger_service).execute(session, booking_id)

    assert ledger_service.load(session) == before


def test_cancel_unknown_booking_is_rejected_remotely(gymmaster, ledger_service, session):
    with pytest.raises(RemoteRequestError):
        CancelBookingUseCase(reservations=gymmaster, ledger=ledger_service).execute(session, 424242)

    assert gymmaster.profile_writes == []
