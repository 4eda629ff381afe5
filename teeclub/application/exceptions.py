from __future__ import annotations

from dataclasses import dataclass, field

from teeclub.domain.entities.booking import Slot


class AuthFailure(RuntimeError):
    """Raised when the member session token is missing, invalid or expired."""
    pass


class NoActiveMembership(RuntimeError):
    """Raised when the requester holds no membership that is active today."""
    pass


class RemoteUnavailable(RuntimeError):
    """Raised when an external service times out, is unreachable or answers 5xx."""
    pass


class RemoteRequestError(RuntimeError):
    """Raised when an external service rejects a request (4xx or an error payload)."""
    pass


class SlotConflict(ValueError):
    """Raised when requested slots overlap each other or an existing session."""

    def __init__(self, message: str, slots: list[Slot] | None = None) -> None:
        super().__init__(message)
        self.slots = list(slots or [])


class InvalidReferralCode(ValueError):
    """Raised when a referral code does not belong to any member."""
    pass


class LedgerDecodeAnomaly(ValueError):
    """Raised inside the ledger codec when a stored field cannot be parsed.

    Never escapes the codec: the field falls back to its zero value.
    """
    pass


@dataclass(frozen=True)
class FailedSlot:
    slot: Slot
    reason: str


@dataclass(frozen=True)
class PartialBookingFailure:
    """Some requested slots were reserved and others were not."""

    booked: list[tuple[Slot, int]] = field(default_factory=list)
    failed: list[FailedSlot] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"{len(self.booked)} slot(s) booked, {len(self.failed)} slot(s) could not be booked"
