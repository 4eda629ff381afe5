from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, Query, Response

from teeclub.api.session import get_member_session
from teeclub.api.v1.schemas import (
    AvailabilityResponseSchema,
    BookingRequestSchema,
    BookingResponseSchema,
    BookingSchema,
    FailedSlotSchema,
    GridCellSchema,
    GuestPassUsageSchema,
    GuestSchema,
    LedgerDeltaSchema,
    LedgerSummarySchema,
    ServiceSchema,
    SlotSchema,
)
from teeclub.application.ports.reservations import ReservationPort
from teeclub.application.ports.service_catalog import ServiceCatalogPort
from teeclub.application.use_cases.availability import SlotAvailabilityChecker
from teeclub.application.use_cases.booking import BookingOrchestrator, BookingRequest
from teeclub.application.use_cases.cancellation import CancelBookingUseCase
from teeclub.application.use_cases.guest_ledger import GuestLedgerService
from teeclub.application.use_cases.member_bookings import MemberBookingsUseCase
from teeclub.domain.entities.booking import Booking, GuestRef, Slot
from teeclub.domain.entities.member import MemberSession
from teeclub.wiring.dependencies import (
    get_availability_checker,
    get_booking_orchestrator,
    get_cancel_booking_use_case,
    get_ledger_service,
    get_member_bookings_use_case,
    get_reservations,
    get_service_catalog,
)

router = APIRouter()


@router.get("/services", response_model=list[ServiceSchema])
def services(
    company_id: int | None = Query(None),
    session: MemberSession = Depends(get_member_session),
    reservations: ReservationPort = Depends(get_reservations),
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
):
    return [
        ServiceSchema(service_id=s.service_id, name=s.name, duration_minutes=catalog.get_duration_minutes(s.name))
        for s in reservations.list_services(session.token, company_id)
    ]


@router.get("/availability", response_model=AvailabilityResponseSchema)
def availability(
    service_id: int,
    day: date,
    company_id: int,
    service_name: str = "",
    session: MemberSession = Depends(get_member_session),
    reservations: ReservationPort = Depends(get_reservations),
    checker: SlotAvailabilityChecker = Depends(get_availability_checker),
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
):
    resources, sessions = reservations.resources_and_sessions(session.token, service_id, day, company_id)
    cells = checker.open_slots(day, resources, sessions, service_name)
    return AvailabilityResponseSchema(
        day=day,
        service_id=service_id,
        duration_minutes=catalog.get_duration_minutes(service_name),
        cells=[
            GridCellSchema(
                resource_id=c.slot.resource_id,
                bay_name=c.slot.bay_name,
                start=c.slot.start,
                available=c.available,
            )
            for c in cells
        ],
    )


@router.post("/bookings", response_model=BookingResponseSchema)
def book(
    req: BookingRequestSchema,
    response: Response,
    session: MemberSession = Depends(get_member_session),
    uc: BookingOrchestrator = Depends(get_booking_orchestrator),
):
    request = BookingRequest(
        service_id=req.service_id,
        service_name=req.service_name,
        company_id=req.company_id,
        location_name=req.location_name,
        slots=[
            Slot(day=s.day, resource_id=s.resource_id, start=s.start, bay_name=s.bay_name, service_name=req.service_name)
            for s in req.slots
        ],
        guests=[GuestRef(name=g.name, email=g.email, phone=g.phone) for g in req.guests],
    )
    result = uc.book_slots(session, request)

    failed = result.partial_failure.failed if result.partial_failure else []
    if not result.bookings:
        response.status_code = 502
        message = "None of the selected times could be booked"
    elif failed:
        response.status_code = 207
        message = result.partial_failure.message
    else:
        response.status_code = 201
        message = "Tee time booked!"

    delta = result.ledger_delta
    return BookingResponseSchema(
        message=message,
        booking_ids=result.booking_ids,
        bookings=[_booking_schema(b) for b in result.bookings],
        ledger_delta=LedgerDeltaSchema(**asdict(delta)) if delta else None,
        amount_due_cents=result.amount_due_cents,
        failed=[FailedSlotSchema(slot=_slot_schema(f.slot), reason=f.reason) for f in failed],
        warnings=result.warnings,
    )


@router.get("/bookings", response_model=list[BookingSchema])
def my_bookings(
    session: MemberSession = Depends(get_member_session),
    uc: MemberBookingsUseCase = Depends(get_member_bookings_use_case),
):
    return [_booking_schema(b) for b in uc.execute(session)]


@router.delete("/bookings/{booking_id}", status_code=204)
def cancel(
    booking_id: int,
    session: MemberSession = Depends(get_member_session),
    uc: CancelBookingUseCase = Depends(get_cancel_booking_use_case),
):
    uc.execute(session, booking_id)


@router.get("/guest-ledger", response_model=LedgerSummarySchema)
def guest_ledger(
    session: MemberSession = Depends(get_member_session),
    ledger: GuestLedgerService = Depends(get_ledger_service),
):
    summary = ledger.summary(session)
    return LedgerSummarySchema(
        period=summary.period,
        guest_passes_used=summary.guest_passes_used,
        free_passes_remaining=summary.free_passes_remaining,
        referral_codes=summary.referral_codes,
        guests=[_guest_schema(g) for g in summary.guests],
    )


def _slot_schema(slot: Slot) -> SlotSchema:
    return SlotSchema(day=slot.day, resource_id=slot.resource_id, start=slot.start, bay_name=slot.bay_name)


def _guest_schema(guest: GuestRef) -> GuestSchema:
    return GuestSchema(name=guest.name, email=guest.email, phone=guest.phone, booking_id=guest.booking_id)


def _booking_schema(booking: Booking) -> BookingSchema:
    return BookingSchema(
        id=booking.id,
        day=booking.day,
        start_time=booking.start_time,
        service_name=booking.service_name,
        location_name=booking.location_name,
        bay_name=booking.bay_name,
        guests=[_guest_schema(g) for g in booking.guests],
        guest_pass_usage=GuestPassUsageSchema(
            free=booking.guest_pass_usage.free,
            charged=booking.guest_pass_usage.charged,
        ),
    )
