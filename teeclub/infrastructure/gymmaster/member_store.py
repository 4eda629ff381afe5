from __future__ import annotations

import logging
import re
from typing import Any

from teeclub.application.exceptions import RemoteRequestError
from teeclub.application.ports.member_store import MemberStorePort
from teeclub.application.utils.time_parser import parse_day
from teeclub.domain.entities.member import Club, Membership, MembershipType, MemberSession, SignupResult
from teeclub.infrastructure.gymmaster.gymmaster_client import GymMasterClient

NO_WAIVER_CONTENT = "No waiver content"

_DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")


class GymMasterMemberStore(MemberStorePort):
    def __init__(self, client: GymMasterClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    def login(self, email: str, password: str) -> MemberSession:
        data = self._client.post_form("/v1/login", {"email": email, "password": password})
        result = data.get("result") or {}
        if not result.get("token"):
            raise RemoteRequestError("Login failed")
        return MemberSession(
            token=str(result["token"]),
            member_id=str(result.get("memberid")) if result.get("memberid") is not None else None,
            expires=_to_int(result.get("expires")),
        )

    def signup(self, details: dict[str, Any]) -> SignupResult:
        data = self._client.post_form("/v1/signup", details)
        if not data.get("token"):
            raise RemoteRequestError("Signup failed")
        session = MemberSession(
            token=str(data["token"]),
            member_id=str(data.get("memberid")) if data.get("memberid") is not None else None,
            expires=_to_int(data.get("expires")),
        )
        return SignupResult(session=session, membership_id=_to_int(data.get("membershipid")))

    def fetch_agreement(self, membership_type_id: int, token: str | None = None) -> str:
        data = self._client.get(f"/v2/membership/{membership_type_id}/agreement", {"token": token})
        result = data.get("result") or []
        body = result[0].get("body") if result and isinstance(result[0], dict) else None
        return str(body) if body else NO_WAIVER_CONTENT

    def save_signature(self, token: str, membership_id: int, signature: str) -> None:
        self._client.post_json(
            "/v2/member/signature",
            {
                "token": token,
                "file": _DATA_URL_PREFIX.sub("", signature),
                "membershipid": membership_id,
                "source": "Signup Form",
            },
        )
        self._logger.info("Waiver signature saved", extra={"reason": f"membership {membership_id}"})

    def list_clubs(self) -> list[Club]:
        data = self._client.get("/v1/companies")
        return [
            Club(id=int(c["id"]), name=str(c.get("name") or ""), billing_provider=c.get("billingprovider"))
            for c in data.get("result") or []
        ]

    def list_membership_types(self) -> list[MembershipType]:
        data = self._client.get("/v1/memberships")
        return [
            MembershipType(
                id=int(m["id"]),
                name=str(m.get("name") or ""),
                description=str(m.get("description") or ""),
                price=str(m.get("price") or ""),
            )
            for m in data.get("result") or []
        ]

    def get_profile(self, token: str) -> dict[str, Any]:
        data = self._client.get("/v1/member/profile", {"token": token})
        return dict(data.get("result") or {})

    def update_profile(self, token: str, fields: dict[str, str]) -> None:
        payload = {"token": token}
        payload.update(fields)
        self._client.post_multipart("/v1/member/profile", payload)
        self._logger.info("Member profile updated", extra={"field": ",".join(sorted(fields))})

    def get_memberships(self, token: str) -> list[Membership]:
        data = self._client.get("/v1/member/memberships", {"token": token})
        return [
            Membership(
                id=int(m["id"]),
                name=str(m.get("name") or ""),
                start_date=parse_day(m.get("startdate")),
                end_date=parse_day(m.get("enddate")),
                visits_used=_to_int(m.get("visitsused")) or 0,
                visit_limit=_to_int(m.get("visitlimit")) or 0,
                company_id=_to_int(m.get("companyid")),
            )
            for m in data.get("result") or []
        ]

    def get_outstanding_balance(self, token: str) -> dict[str, Any]:
        data = self._client.get("/v1/member/outstandingbalance", {"token": token})
        return {
            "owing_amount": str(data.get("owingamount") or "0.00"),
            "charges": list(data.get("result") or []),
        }

    def list_all_profiles(self) -> list[dict[str, Any]]:
        data = self._client.get("/v1/members", staff=True)
        return list(data.get("result") or [])


def _to_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
