from __future__ import annotations

import logging
from typing import Any

import httpx

from teeclub.application.exceptions import AuthFailure, RemoteRequestError, RemoteUnavailable
from teeclub.application.ports.door_access import DoorAccessPort
from teeclub.core.config import settings
from teeclub.domain.entities.member import CheckinResult, Door
from teeclub.infrastructure.gymmaster.gymmaster_client import GymMasterClient


class GatekeeperDoorAccess(DoorAccessPort):
    """Doors come from Gatekeeper; opening one is a GymMaster kiosk check-in."""

    def __init__(
        self,
        gymmaster: GymMasterClient,
        username: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self._gymmaster = gymmaster
        self._username = username or settings.GATEKEEPER_USERNAME
        self._api_key = api_key or settings.GATEKEEPER_API_KEY
        self._base_url = (base_url or settings.GATEKEEPER_BASE_URL).rstrip("/")
        self._client = http or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._username or not self._api_key:
            raise ValueError("GATEKEEPER_USERNAME and GATEKEEPER_API_KEY are required for door access")

    def list_doors(self) -> list[Door]:
        try:
            response = self._client.get(
                f"{self._base_url}/doors",
                auth=(self._username, self._api_key),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            self._logger.error("Gatekeeper request failed", extra={"error": str(e)})
            raise RemoteUnavailable(f"Gatekeeper is unreachable: {e}") from e

        if response.status_code >= 500:
            raise RemoteUnavailable(f"Gatekeeper returned {response.status_code}")
        if response.status_code >= 400:
            self._logger.error("Gatekeeper rejected request", extra={"status": response.status_code})
            raise RemoteRequestError(f"Gatekeeper rejected the request ({response.status_code})")

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteUnavailable("Gatekeeper returned an unreadable response") from e
        if not isinstance(data, dict):
            raise RemoteUnavailable("Gatekeeper returned an unreadable response")
        if data.get("error"):
            raise RemoteRequestError(str(data["error"]))
        return [_to_door(d) for d in data.get("doors") or []]

    def check_in(self, token: str, door_id: int) -> CheckinResult:
        data = self._gymmaster.post_json("/v2/member/kiosk/checkin", {"token": token, "doorid": door_id})
        response = (data.get("result") or {}).get("response") or {}
        denied_reason = response.get("denied_reason")
        try:
            access_state = int(response.get("access_state") or 0)
        except (TypeError, ValueError):
            access_state = 0
        if denied_reason and "token" in str(denied_reason).lower():
            raise AuthFailure(str(denied_reason))
        return CheckinResult(
            access_granted=not denied_reason and access_state > 0,
            message=str(response.get("message") or ("Door opened" if not denied_reason else "Access denied")),
            denied_reason=str(denied_reason) if denied_reason else None,
        )


def _to_door(raw: dict[str, Any]) -> Door:
    return Door(
        id=int(raw["id"]),
        name=str(raw.get("name") or ""),
        company_id=raw.get("companyid"),
        site_id=raw.get("siteid"),
        status=raw.get("status"),
    )
