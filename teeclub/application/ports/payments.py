from __future__ import annotations

from abc import ABC, abstractmethod


class PaymentPort(ABC):
    @abstractmethod
    def charge(self, source_id: str, amount_cents: int, note: str | None = None) -> str:
        """Charge a card nonce. Returns the payment id."""
        raise NotImplementedError
