from __future__ import annotations

import logging

from teeclub.application.ports.reservations import ReservationPort
from teeclub.application.use_cases.guest_ledger import GuestLedgerService
from teeclub.application.utils.guest_ledger_codec import remove_booking
from teeclub.domain.entities.member import MemberSession


class CancelBookingUseCase:
    def __init__(self, reservations: ReservationPort, ledger: GuestLedgerService) -> None:
        self._reservations = reservations
        self._ledger = ledger
        self._logger = logging.getLogger(__name__)

    def execute(self, session: MemberSession, booking_id: int) -> None:
        # the ledger is only touched once the remote cancellation is confirmed
        self._reservations.cancel_reservation(session.token, booking_id)
        self._logger.info("Booking cancelled", extra={"member": session.member_id, "booking_id": booking_id})

        self._ledger.mutate(session, lambda ledger: remove_booking(ledger, booking_id))
