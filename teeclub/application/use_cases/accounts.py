from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from teeclub.application.exceptions import (
    InvalidReferralCode,
    NoActiveMembership,
    RemoteRequestError,
    RemoteUnavailable,
)
from teeclub.application.ports.member_store import MemberStorePort
from teeclub.application.use_cases.referrals import SIGNUP_REFERRAL_FIELD, ReferralService
from teeclub.application.utils.guest_ledger_codec import LEDGER_FIELD, REFERRAL_CODES_FIELD
from teeclub.domain.entities.member import Club, Membership, MembershipType, MemberSession, SignupResult

EDITABLE_PROFILE_FIELDS = (
    "firstname",
    "surname",
    "email",
    "dob",
    "gender",
    "phonecell",
    "phonehome",
    "addressstreet",
    "addresssuburb",
    "addresscity",
    "addresscountry",
    "addressareacode",
    "receivesms",
    "receiveemail",
    "goal",
)

# ledger fields are only written through GuestLedgerService
PROTECTED_PROFILE_FIELDS = (LEDGER_FIELD, REFERRAL_CODES_FIELD, SIGNUP_REFERRAL_FIELD)


class AccountUseCase:
    def __init__(self, store: MemberStorePort, referrals: ReferralService, timezone: ZoneInfo) -> None:
        self._store = store
        self._referrals = referrals
        self._timezone = timezone
        self._logger = logging.getLogger(__name__)

    def login(self, email: str, password: str) -> MemberSession:
        return self._store.login(email.strip(), password)

    def signup(
        self,
        details: dict[str, Any],
        referral_code: str | None = None,
        waiver_signature: str | None = None,
    ) -> SignupResult:
        """Create the member, then attach the waiver signature to the new membership.

        The member exists once the store accepts the signup, so a signature that
        fails to save is reported through ``waiver_saved`` rather than raised.
        The member can sign again through ``sign_waiver``.
        """
        payload = dict(details)
        today = self._today().isoformat()
        payload.setdefault("startdate", today)
        payload.setdefault("firstpaymentdate", today)

        if referral_code and referral_code.strip():
            code = referral_code.strip()
            if not self._referrals.validate(code):
                raise InvalidReferralCode(f"Referral code {code} is not valid")
            payload[SIGNUP_REFERRAL_FIELD] = code

        result = self._store.signup(payload)
        self._logger.info("Member signed up", extra={"member": result.session.member_id})

        if not waiver_signature:
            return result
        if result.membership_id is None:
            self._logger.warning(
                "Signup returned no membership for the waiver", extra={"member": result.session.member_id}
            )
            return result
        try:
            self._store.save_signature(result.session.token, result.membership_id, waiver_signature)
        except (RemoteRequestError, RemoteUnavailable) as e:
            self._logger.warning(
                "Waiver signature not saved", extra={"member": result.session.member_id, "error": str(e)}
            )
            return result
        return replace(result, waiver_saved=True)

    def waiver(self, membership_type_id: int, session: MemberSession | None = None) -> str:
        return self._store.fetch_agreement(membership_type_id, session.token if session else None)

    def sign_waiver(self, session: MemberSession, signature: str, membership_id: int | None = None) -> int:
        """Save a signature against a membership, the active one when none is named."""
        if not signature.strip():
            raise ValueError("Signature is empty")
        if membership_id is None:
            membership_id = self.active_membership(session).id
        self._store.save_signature(session.token, membership_id, signature)
        return membership_id

    def list_clubs(self) -> list[Club]:
        return self._store.list_clubs()

    def list_membership_types(self) -> list[MembershipType]:
        return self._store.list_membership_types()

    def get_profile(self, session: MemberSession) -> dict[str, Any]:
        return self._store.get_profile(session.token)

    def update_profile(self, session: MemberSession, changes: dict[str, Any]) -> None:
        fields = {
            key: str(value)
            for key, value in changes.items()
            if key in EDITABLE_PROFILE_FIELDS and value is not None
        }
        if not fields:
            raise ValueError("No editable profile fields supplied")
        self._store.update_profile(session.token, fields)

    def outstanding_balance(self, session: MemberSession) -> dict[str, Any]:
        return self._store.get_outstanding_balance(session.token)

    def memberships(self, session: MemberSession) -> list[Membership]:
        return self._store.get_memberships(session.token)

    def active_membership(self, session: MemberSession) -> Membership:
        today = self._today()
        for membership in self.memberships(session):
            if membership.is_active(today):
                return membership
        raise NoActiveMembership("No active membership found for this account")

    def _today(self) -> date:
        return datetime.now(self._timezone).date()
