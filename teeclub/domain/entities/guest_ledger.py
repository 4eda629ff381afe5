from __future__ import annotations

from dataclasses import dataclass

from teeclub.domain.entities.booking import GuestRef


@dataclass(frozen=True)
class GuestLedger:
    guest_passes_used: int = 0
    referral_codes: frozenset[str] = frozenset()
    # guest_booking_ids[i] and guests[i] describe the same invite
    guest_booking_ids: tuple[int, ...] = ()
    guests: tuple[GuestRef, ...] = ()
    period: str | None = None  # "YYYY-MM" the pass counter belongs to
