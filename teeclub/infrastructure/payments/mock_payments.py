from __future__ import annotations

import logging

from teeclub.application.ports.payments import PaymentPort


class MockPayments(PaymentPort):
    def __init__(self) -> None:
        self.charges: list[tuple[str, int]] = []
        self._logger = logging.getLogger(__name__)

    def charge(self, source_id: str, amount_cents: int, note: str | None = None) -> str:
        self.charges.append((source_id, amount_cents))
        payment_id = f"mock_payment_{len(self.charges)}"
        self._logger.info("Mock payment completed", extra={"status": payment_id, "reason": note})
        return payment_id
