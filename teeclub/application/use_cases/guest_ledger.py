from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable
from zoneinfo import ZoneInfo

from teeclub.application.ports.member_store import MemberStorePort
from teeclub.application.utils.guest_ledger_codec import decode, encode, roll_period
from teeclub.application.utils.time_parser import current_period
from teeclub.domain.entities.booking import GuestPassUsage, GuestRef
from teeclub.domain.entities.guest_ledger import GuestLedger
from teeclub.domain.entities.member import MemberSession


@dataclass(frozen=True)
class LedgerSummary:
    period: str | None
    guest_passes_used: int
    free_passes_remaining: int
    referral_codes: list[str]
    guests: list[GuestRef]


class GuestLedgerService:
    """Loads and persists a member's guest ledger.

    Read-modify-write cycles go through ``mutate`` and are serialized per
    member inside this process. Writers outside the process (other servers,
    other clients of the member store) are not covered: the store only offers
    last-write-wins field updates.
    """

    def __init__(
        self,
        store: MemberStorePort,
        timezone: ZoneInfo,
        free_pass_allowance: int = 2,
        period_provider: Callable[[], str] | None = None,
    ) -> None:
        self._store = store
        self._free_pass_allowance = free_pass_allowance
        self._period_provider = period_provider or (lambda: current_period(timezone))
        self._locks: dict[str, threading.Lock] = {}
        self._member_keys: dict[str, str] = {}
        self._lock_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @property
    def free_pass_allowance(self) -> int:
        return self._free_pass_allowance

    def _get_lock(self, key: str) -> threading.Lock:
        """Get or create the writer lock for a member."""
        with self._lock_lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def _writer_key(self, session: MemberSession) -> str:
        """Lock key for the member behind a token, as reported by the store.

        The member id a client sends is not trusted here: two requests for
        the same token must share a lock whatever headers they carry.
        """
        with self._lock_lock:
            key = self._member_keys.get(session.token)
        if key is not None:
            return key
        profile = self._store.get_profile(session.token)
        key = str(profile.get("memberid") or session.token)
        with self._lock_lock:
            return self._member_keys.setdefault(session.token, key)

    def load(self, session: MemberSession) -> GuestLedger:
        profile = self._store.get_profile(session.token)
        return roll_period(decode(profile), self._period_provider())

    def mutate(self, session: MemberSession, change: Callable[[GuestLedger], GuestLedger]) -> GuestLedger:
        with self._get_lock(self._writer_key(session)):
            ledger = self.load(session)
            updated = change(ledger)
            if updated != ledger:
                self._store.update_profile(session.token, encode(updated))
                self._logger.info(
                    "Guest ledger saved",
                    extra={"member": session.member_id, "reason": f"{len(updated.guests)} guests"},
                )
            return updated

    def split_passes(self, ledger: GuestLedger, guest_count: int) -> GuestPassUsage:
        remaining = max(self._free_pass_allowance - ledger.guest_passes_used, 0)
        free = min(guest_count, remaining)
        return GuestPassUsage(free=free, charged=guest_count - free)

    def summary(self, session: MemberSession) -> LedgerSummary:
        ledger = self.load(session)
        return LedgerSummary(
            period=ledger.period,
            guest_passes_used=ledger.guest_passes_used,
            free_passes_remaining=max(self._free_pass_allowance - ledger.guest_passes_used, 0),
            referral_codes=sorted(ledger.referral_codes),
            guests=list(ledger.guests),
        )
