from __future__ import annotations

import logging
import secrets
from urllib.parse import urlencode

from teeclub.application.ports.member_store import MemberStorePort
from teeclub.application.utils.guest_ledger_codec import REFERRAL_CODES_FIELD

SIGNUP_REFERRAL_FIELD = "Referral Code"


class ReferralService:
    def __init__(self, store: MemberStorePort, app_url: str) -> None:
        self._store = store
        self._app_url = app_url.rstrip("/")
        self._logger = logging.getLogger(__name__)

    def generate_code(self) -> str:
        return f"REF-{secrets.token_hex(4).upper()}"

    def referral_link(self, code: str) -> str:
        return f"{self._app_url}/?{urlencode({'referral': code})}"

    def validate(self, code: str) -> bool:
        """True when some member signed up with, or issued, this code."""
        code = (code or "").strip()
        if not code:
            raise ValueError("Referral code is required")

        for profile in self._store.list_all_profiles():
            if str(profile.get(SIGNUP_REFERRAL_FIELD) or "").strip() == code:
                return True
            issued = str(profile.get(REFERRAL_CODES_FIELD) or "").split(",")
            if code in (c.strip() for c in issued):
                return True

        self._logger.info("Referral code not found", extra={"reason": code})
        return False
