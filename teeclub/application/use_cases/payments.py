from __future__ import annotations

import logging

from teeclub.application.ports.payments import PaymentPort


class GuestPassPaymentUseCase:
    def __init__(self, payments: PaymentPort, guest_pass_charge_cents: int) -> None:
        self._payments = payments
        self._guest_pass_charge_cents = guest_pass_charge_cents
        self._logger = logging.getLogger(__name__)

    def amount_for(self, charged_passes: int) -> int:
        return max(charged_passes, 0) * self._guest_pass_charge_cents

    def pay(self, source_id: str, charged_passes: int) -> tuple[str, int]:
        """Charge the card nonce for the extra guest passes. Returns (payment_id, amount_cents)."""
        if not source_id:
            raise ValueError("Missing card nonce")
        amount = self.amount_for(charged_passes)
        if amount <= 0:
            raise ValueError("Nothing to charge")
        payment_id = self._payments.charge(source_id, amount, note=f"{charged_passes} guest pass(es)")
        self._logger.info("Guest passes paid", extra={"status": payment_id, "reason": f"{amount} cents"})
        return payment_id, amount
