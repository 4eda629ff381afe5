from __future__ import annotations

import logging
from uuid import uuid4

import httpx

from teeclub.application.exceptions import RemoteRequestError, RemoteUnavailable
from teeclub.application.ports.payments import PaymentPort
from teeclub.core.config import settings

SQUARE_API_VERSION = "2024-01-18"


class SquarePayments(PaymentPort):
    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        location_id: str | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self._access_token = access_token or settings.SQUARE_ACCESS_TOKEN
        self._base_url = (base_url or settings.SQUARE_BASE_URL).rstrip("/")
        self._location_id = location_id or settings.SQUARE_LOCATION_ID
        self._client = http or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._access_token:
            raise ValueError("SQUARE_ACCESS_TOKEN is required for Square payments")

    def charge(self, source_id: str, amount_cents: int, note: str | None = None) -> str:
        payload: dict[str, object] = {
            "source_id": source_id,
            "idempotency_key": str(uuid4()),
            "amount_money": {"amount": amount_cents, "currency": "USD"},
        }
        if self._location_id:
            payload["location_id"] = self._location_id
        if note:
            payload["note"] = note

        headers = {
            "Authorization": f"Bearer {self._access_token}",
            "Square-Version": SQUARE_API_VERSION,
            "Content-Type": "application/json",
        }
        try:
            response = self._client.post(f"{self._base_url}/v2/payments", json=payload, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error("Square request failed", extra={"error": str(e)})
            raise RemoteUnavailable(f"Payment service is unreachable: {e}") from e

        if response.status_code >= 500:
            raise RemoteUnavailable(f"Payment service returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            if response.status_code >= 400:
                self._logger.error("Square rejected payment", extra={"status": response.status_code})
                raise RemoteRequestError(f"Payment failed: status {response.status_code}") from e
            raise RemoteUnavailable("Payment service returned an unreadable response") from e
        if not isinstance(data, dict):
            raise RemoteUnavailable("Payment service returned an unreadable response")

        if response.status_code >= 400 or data.get("errors"):
            errors = data.get("errors") or []
            detail = errors[0].get("detail") if errors else f"status {response.status_code}"
            self._logger.error("Square rejected payment", extra={"status": response.status_code, "error": detail})
            raise RemoteRequestError(f"Payment failed: {detail}")

        payment = data.get("payment") or {}
        if payment.get("status") != "COMPLETED":
            raise RemoteRequestError("Payment not completed")

        self._logger.info("Payment completed", extra={"status": payment.get("id")})
        return str(payment["id"])
