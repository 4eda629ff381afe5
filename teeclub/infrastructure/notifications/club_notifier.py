from __future__ import annotations

import html
import logging
from typing import Protocol

from teeclub.application.ports.notifications import NotificationPort
from teeclub.application.utils.time_parser import format_clock_time
from teeclub.domain.entities.booking import Booking, GuestRef


class EmailSender(Protocol):
    def send(self, to_email: str, subject: str, html_content: str, text_content: str) -> object: ...


class SmsSender(Protocol):
    def send(self, to_number: str, body: str) -> object: ...


class ClubNotifier(NotificationPort):
    """Email through Resend and SMS through Twilio; either channel may be absent."""

    def __init__(self, club_name: str, email: EmailSender | None = None, sms: SmsSender | None = None) -> None:
        self._club_name = club_name
        self._email = email
        self._sms = sms
        self._logger = logging.getLogger(__name__)

    def send_invite(self, guest: GuestRef, referral_code: str, link: str) -> None:
        sent = False
        if guest.email and self._email:
            self._email.send(
                to_email=guest.email,
                subject=f"You're Invited to Join {self._club_name}!",
                html_content=self._invite_html(guest.name, referral_code, link),
                text_content=(
                    f"Hello, {guest.name}! You've been invited to join {self._club_name} by a friend. "
                    f"Use your referral code {referral_code} and sign up here: {link}"
                ),
            )
            sent = True
        if guest.phone and self._sms:
            self._sms.send(guest.phone, f"Welcome! Sign up and sign your waiver here: {link}")
            sent = True
        if not sent:
            self._logger.warning("No channel to reach guest", extra={"reason": guest.name})

    def send_booking_confirmation(
        self,
        recipient_email: str | None,
        recipient_phone: str | None,
        recipient_name: str,
        bookings: list[Booking],
    ) -> None:
        lines = [self._booking_line(b) for b in bookings]
        if recipient_email and self._email:
            items = "".join(f"<li>{html.escape(line)}</li>" for line in lines)
            self._email.send(
                to_email=recipient_email,
                subject=f"Your tee time at {self._club_name} is booked",
                html_content=(
                    f"<p>Hi {html.escape(recipient_name)},</p>"
                    f"<p>Your booking is confirmed:</p><ul>{items}</ul>"
                    f"<p>See you at the club!</p>"
                ),
                text_content=f"Hi {recipient_name}, your booking is confirmed:\n" + "\n".join(lines),
            )
        elif recipient_phone and self._sms:
            self._sms.send(recipient_phone, "Tee time booked: " + "; ".join(lines))
        else:
            self._logger.warning("No channel to confirm booking", extra={"booking_id": bookings[0].id if bookings else None})

    def _booking_line(self, booking: Booking) -> str:
        line = f"{booking.day.strftime('%a %b %d')} at {format_clock_time(booking.start_time)}"
        if booking.bay_name:
            line += f", {booking.bay_name}"
        if booking.location_name:
            line += f" ({booking.location_name})"
        if booking.guests:
            line += f" with {', '.join(g.name for g in booking.guests)}"
        return line

    def _invite_html(self, name: str, referral_code: str, link: str) -> str:
        name, code, href = html.escape(name), html.escape(referral_code), html.escape(link, quote=True)
        return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1 style="color: #333;">Hello, {name}!</h1>
  <p style="font-size: 16px; color: #555;">
    You've been invited to join <strong>{html.escape(self._club_name)}</strong> by a friend!
  </p>
  <p style="font-size: 16px; color: #555;">
    Use your unique referral code: <strong style="color: #007bff;">{code}</strong>
  </p>
  <a href="{href}" style="display: inline-block; padding: 12px 24px; background-color: #007bff; color: white; text-decoration: none; border-radius: 5px;">Join Now</a>
  <p style="font-size: 14px; color: #777;">
    If the button doesn't work, copy and paste this link into your browser:<br />
    <a href="{href}" style="color: #007bff;">{href}</a>
  </p>
</div>
"""
