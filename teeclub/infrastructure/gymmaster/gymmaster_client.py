from __future__ import annotations

import logging
from typing import Any

import httpx

from teeclub.application.exceptions import AuthFailure, RemoteRequestError, RemoteUnavailable
from teeclub.core.config import settings

_TOKEN_ERROR_MARKERS = ("token", "not logged in", "session expired")


class GymMasterClient:
    """Thin HTTP client for the GymMaster member portal API.

    GymMaster answers most failures with HTTP 200 and an ``error`` string in
    the body; both transport and payload errors are mapped onto the
    application error taxonomy here.
    """

    def __init__(
        self,
        api_key: str | None = None,
        staff_api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key or settings.GYMMASTER_API_KEY
        self._staff_api_key = staff_api_key or settings.GYMMASTER_STAFF_API_KEY
        self._base_url = (base_url or settings.GYMMASTER_BASE_URL).rstrip("/")
        self._client = http or httpx.Client(timeout=timeout or settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._api_key:
            raise ValueError("GYMMASTER_API_KEY is required for the GymMaster client")

    def get(self, path: str, params: dict[str, Any] | None = None, staff: bool = False) -> dict[str, Any]:
        query = {"api_key": self._key(staff)}
        query.update({k: v for k, v in (params or {}).items() if v is not None})
        return self._send("GET", path, params=query)

    def post_form(self, path: str, data: dict[str, Any], staff: bool = False) -> dict[str, Any]:
        form = {"api_key": self._key(staff)}
        form.update({k: str(v) for k, v in data.items() if v is not None})
        return self._send("POST", path, data=form)

    def post_multipart(self, path: str, data: dict[str, Any]) -> dict[str, Any]:
        files = {"api_key": (None, self._api_key)}
        files.update({k: (None, str(v)) for k, v in data.items() if v is not None})
        return self._send("POST", path, files=files)

    def post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        body = {"api_key": self._api_key}
        body.update(payload)
        return self._send("POST", path, json=body)

    def close(self) -> None:
        self._client.close()

    def _key(self, staff: bool) -> str:
        if not staff:
            return self._api_key
        if not self._staff_api_key:
            raise RemoteRequestError("GYMMASTER_STAFF_API_KEY is required for staff requests")
        return self._staff_api_key

    def _send(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            self._logger.error("GymMaster request timed out", extra={"reason": path, "error": str(e)})
            raise RemoteUnavailable(f"GymMaster timed out on {path}") from e
        except httpx.HTTPError as e:
            self._logger.error("GymMaster request failed", extra={"reason": path, "error": str(e)})
            raise RemoteUnavailable(f"GymMaster is unreachable: {e}") from e

        if response.status_code in {401, 403}:
            raise AuthFailure("Your session has expired, please log in again")
        if response.status_code >= 500:
            self._logger.error("GymMaster server error", extra={"reason": path, "status": response.status_code})
            raise RemoteUnavailable(f"GymMaster returned {response.status_code}")
        if response.status_code >= 400:
            self._logger.error(
                "GymMaster rejected request",
                extra={"reason": path, "status": response.status_code, "error": response.text[:200]},
            )
            raise RemoteRequestError(f"GymMaster rejected the request ({response.status_code})")

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteUnavailable(f"GymMaster returned a non-JSON response for {path}") from e
        if not isinstance(data, dict):
            raise RemoteUnavailable(f"GymMaster returned an unexpected payload for {path}")

        error = data.get("error")
        if error:
            message = str(error)
            if any(marker in message.lower() for marker in _TOKEN_ERROR_MARKERS):
                raise AuthFailure(message)
            raise RemoteRequestError(message)
        return data
