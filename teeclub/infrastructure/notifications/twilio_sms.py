from __future__ import annotations

import logging

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from teeclub.application.exceptions import RemoteRequestError, RemoteUnavailable
from teeclub.core.config import settings

MAX_SMS_LENGTH = 1600


class TwilioSmsSender:
    def __init__(
        self,
        account_sid: str | None = None,
        auth_token: str | None = None,
        from_number: str | None = None,
        client: Client | None = None,
    ) -> None:
        account_sid = account_sid or settings.TWILIO_ACCOUNT_SID
        auth_token = auth_token or settings.TWILIO_AUTH_TOKEN
        self._from_number = from_number or settings.TWILIO_PHONE_NUMBER
        if not client and not (account_sid and auth_token):
            raise ValueError("TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN are required to send SMS")
        if not self._from_number:
            raise ValueError("TWILIO_PHONE_NUMBER is required to send SMS")
        self._client = client or Client(account_sid, auth_token)
        self._logger = logging.getLogger(__name__)

    def send(self, to_number: str, body: str) -> str:
        if not to_number.startswith("+"):
            raise RemoteRequestError(f"Phone number must be in E.164 format: {to_number}")
        if len(body) > MAX_SMS_LENGTH:
            body = body[: MAX_SMS_LENGTH - 3] + "..."

        try:
            message = self._client.messages.create(body=body, from_=self._from_number, to=to_number)
        except TwilioRestException as e:
            self._logger.error("Twilio rejected SMS", extra={"status": e.status, "error": str(e)})
            raise RemoteRequestError(f"SMS could not be sent: {e.msg}") from e

        self._logger.info("SMS sent", extra={"status": message.sid, "reason": to_number[-4:]})
        return str(message.sid)
