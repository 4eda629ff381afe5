from __future__ import annotations

import logging
from typing import Any

import resend

from teeclub.application.exceptions import RemoteUnavailable
from teeclub.core.config import settings


class ResendEmailSender:
    def __init__(self, api_key: str | None = None, from_email: str | None = None) -> None:
        api_key = api_key or settings.RESEND_API_KEY
        if not api_key:
            raise ValueError("RESEND_API_KEY is required to send email")
        resend.api_key = api_key
        self._from_email = from_email or settings.EMAIL_FROM
        self._logger = logging.getLogger(__name__)

    def send(self, to_email: str, subject: str, html_content: str, text_content: str) -> dict[str, Any]:
        email_data = {
            "from": self._from_email,
            "to": to_email,
            "subject": subject,
            "html": html_content,
            "text": text_content,
        }
        try:
            response = resend.Emails.send(email_data)
        except Exception as e:
            self._logger.error("Email send failed", extra={"reason": subject, "error": str(e)})
            raise RemoteUnavailable(f"Email sending failed: {e}") from e

        self._logger.info("Email sent", extra={"reason": subject})
        return dict(response or {})
