#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP, in-memory GymMaster).

Usage:
  ENV=dev python3 scripts/book_local.py

Commands:
  /grid [YYYY-MM-DD]                 show open bay times
  /book BAY HH:MM [GUEST ...]        book a bay tomorrow, guests by first name
  /list                              list your bookings
  /cancel ID                         cancel a booking
  /ledger                            show guest passes and referral codes
  /quit
"""

from __future__ import annotations

import sys
from datetime import date, timedelta
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from teeclub.application.exceptions import AuthFailure, NoActiveMembership, RemoteRequestError, SlotConflict
from teeclub.application.use_cases.booking import BookingRequest
from teeclub.application.utils.time_parser import format_clock_time, parse_clock_time
from teeclub.domain.entities.booking import GuestRef, Slot
from teeclub.domain.entities.member import MemberSession
from teeclub.infrastructure.mock.mock_gymmaster import DEMO_TOKEN
from teeclub.wiring.dependencies import (
    get_availability_checker,
    get_booking_orchestrator,
    get_cancel_booking_use_case,
    get_ledger_service,
    get_member_bookings_use_case,
    get_reservations,
)

SERVICE_ID = 1
SERVICE_NAME = "Simulator Bay 1 hr"
COMPANY_ID = 1


def _grid(session: MemberSession, day: date) -> None:
    resources, sessions = get_reservations().resources_and_sessions(session.token, SERVICE_ID, day, COMPANY_ID)
    cells = get_availability_checker().open_slots(day, resources, sessions, SERVICE_NAME)
    print(f"\n--- {day.isoformat()} ---")
    for cell in cells:
        mark = "open" if cell.available else "taken"
        print(f"{format_clock_time(cell.slot.start):>9}  {cell.slot.bay_name:<6} {mark}")


def _book(session: MemberSession, args: list[str]) -> None:
    if len(args) < 2:
        print("Usage: /book BAY HH:MM [GUEST ...]")
        return
    start = parse_clock_time(args[1])
    if start is None:
        print(f"Could not read time {args[1]!r}")
        return
    day = date.today() + timedelta(days=1)
    resource_id = int(args[0])
    request = BookingRequest(
        service_id=SERVICE_ID,
        service_name=SERVICE_NAME,
        company_id=COMPANY_ID,
        slots=[Slot(day=day, resource_id=resource_id, start=start, bay_name=f"Bay {resource_id}")],
        guests=[GuestRef(name=name, email=f"{name.lower()}@example.com") for name in args[2:]],
    )
    result = get_booking_orchestrator().book_slots(session, request)

    print("\n--- Result ---")
    print(f"booked: {result.booking_ids or 'nothing'}")
    if result.partial_failure:
        for failed in result.partial_failure.failed:
            print(f"failed: {failed.slot.bay_name} {format_clock_time(failed.slot.start)} ({failed.reason})")
    if result.ledger_delta:
        delta = result.ledger_delta
        print(f"guest passes: {delta.free} free, {delta.charged} charged, {delta.guest_passes_used} used this month")
        print(f"referral codes: {', '.join(delta.referral_codes)}")
    if result.amount_due_cents:
        print(f"amount due: ${result.amount_due_cents / 100:.2f}")
    for warning in result.warnings:
        print(f"warning: {warning}")


def _list(session: MemberSession) -> None:
    bookings = get_member_bookings_use_case().execute(session)
    if not bookings:
        print("(no bookings)")
    for b in bookings:
        guests = f" with {', '.join(g.name for g in b.guests)}" if b.guests else ""
        print(f"#{b.id}  {b.day.isoformat()} {format_clock_time(b.start_time)}  {b.bay_name}{guests}")


def _ledger(session: MemberSession) -> None:
    summary = get_ledger_service().summary(session)
    print(f"period: {summary.period}")
    print(f"guest passes used: {summary.guest_passes_used} ({summary.free_passes_remaining} free left)")
    print(f"referral codes: {', '.join(summary.referral_codes) or '-'}")


def main() -> None:
    session = MemberSession(token=DEMO_TOKEN, member_id="1")
    print(__doc__)

    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return
        if not line:
            continue

        cmd, *args = line.split()
        cmd = cmd.lower()
        try:
            if cmd in ("/quit", "/exit"):
                print("Bye!")
                return
            elif cmd == "/grid":
                _grid(session, date.fromisoformat(args[0]) if args else date.today() + timedelta(days=1))
            elif cmd == "/book":
                _book(session, args)
            elif cmd == "/list":
                _list(session)
            elif cmd == "/cancel" and args:
                get_cancel_booking_use_case().execute(session, int(args[0]))
                print(f"Cancelled #{args[0]}")
            elif cmd == "/ledger":
                _ledger(session)
            else:
                print("Unknown command, see the list above")
        except (AuthFailure, NoActiveMembership, RemoteRequestError, SlotConflict, ValueError) as e:
            print(f"ERROR: {e}")


if __name__ == "__main__":
    main()
