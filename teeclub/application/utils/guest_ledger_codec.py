"""
Guest ledger <-> member profile fields.

The ledger lives in free-text fields of the member profile. It is written as a
single versioned JSON envelope so the parallel guest arrays are always stored
together, and the referral codes are mirrored into the comma separated
``Referral Code Generated`` field that referral validation reads.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any, Callable, Iterable, Mapping, TypeVar

from teeclub.application.exceptions import LedgerDecodeAnomaly
from teeclub.domain.entities.booking import GuestRef
from teeclub.domain.entities.guest_ledger import GuestLedger

LEDGER_FIELD = "customtext1"
REFERRAL_CODES_FIELD = "Referral Code Generated"
ENVELOPE_VERSION = 2

logger = logging.getLogger(__name__)

T = TypeVar("T")


def decode(profile: Mapping[str, Any]) -> GuestLedger:
    """Rebuild the ledger from a profile field map.

    Every field is decoded on its own: a field that cannot be parsed falls
    back to its zero value and the others are still read.
    """
    envelope = _load_envelope(profile.get(LEDGER_FIELD))

    passes_used = _decode_field(envelope, "guestPassesUsed", _parse_count, 0)
    envelope_codes = _decode_field(envelope, "referralCodes", _parse_codes, frozenset())
    booking_ids = _decode_field(envelope, "guestBookingIds", _parse_booking_ids, ())
    guests = _decode_field(envelope, "guests", _parse_guests, ())
    period = _decode_field(envelope, "period", _parse_period, None)

    try:
        mirrored_codes = _parse_code_list(profile.get(REFERRAL_CODES_FIELD))
    except LedgerDecodeAnomaly as e:
        _log_anomaly(REFERRAL_CODES_FIELD, e)
        mirrored_codes = frozenset()

    if len(booking_ids) != len(guests):
        _log_anomaly(
            "guests",
            LedgerDecodeAnomaly(f"misaligned guests ({len(guests)}) and booking ids ({len(booking_ids)})"),
        )
        keep = min(len(booking_ids), len(guests))
        booking_ids = booking_ids[:keep]
        guests = guests[:keep]

    # an unreadable entry on either side drops the whole invite at that index
    pairs = [(bid, guest) for bid, guest in zip(booking_ids, guests) if bid is not None and guest is not None]

    return GuestLedger(
        guest_passes_used=passes_used,
        referral_codes=envelope_codes | mirrored_codes,
        guest_booking_ids=tuple(bid for bid, _ in pairs),
        guests=tuple(guest for _, guest in pairs),
        period=period,
    )


def encode(ledger: GuestLedger) -> dict[str, str]:
    """Profile field writes for the ledger. Each value is written as one unit."""
    codes = sorted(ledger.referral_codes)
    envelope: dict[str, Any] = {
        "version": ENVELOPE_VERSION,
        "guestPassesUsed": ledger.guest_passes_used,
        "referralCodes": codes,
        "guestBookingIds": list(ledger.guest_booking_ids),
        "guests": [_guest_to_json(g) for g in ledger.guests],
    }
    if ledger.period is not None:
        envelope["period"] = ledger.period
    return {
        LEDGER_FIELD: json.dumps(envelope, separators=(",", ":"), ensure_ascii=False),
        REFERRAL_CODES_FIELD: ",".join(codes),
    }


def record_guest_invites(ledger: GuestLedger, new_guests: Iterable[GuestRef], booking_id: int) -> GuestLedger:
    added = tuple(replace(g, booking_id=booking_id) for g in new_guests)
    if not added:
        return ledger
    return replace(
        ledger,
        guest_passes_used=ledger.guest_passes_used + len(added),
        guest_booking_ids=ledger.guest_booking_ids + (booking_id,) * len(added),
        guests=ledger.guests + added,
    )


def remove_booking(ledger: GuestLedger, booking_id: int) -> GuestLedger:
    kept = [
        (bid, guest)
        for bid, guest in zip(ledger.guest_booking_ids, ledger.guests)
        if bid != booking_id
    ]
    removed = len(ledger.guest_booking_ids) - len(kept)
    if removed == 0:
        return ledger
    return replace(
        ledger,
        guest_passes_used=max(ledger.guest_passes_used - removed, 0),
        guest_booking_ids=tuple(bid for bid, _ in kept),
        guests=tuple(guest for _, guest in kept),
    )


def add_referral_code(ledger: GuestLedger, code: str) -> GuestLedger:
    code = code.strip()
    if "," in code:
        raise ValueError(f"Referral code {code!r} contains a comma")
    if not code or code in ledger.referral_codes:
        return ledger
    return replace(ledger, referral_codes=ledger.referral_codes | {code})


def roll_period(ledger: GuestLedger, period: str) -> GuestLedger:
    """Reset the pass counter when the ledger belongs to an earlier period.

    A ledger without a period (written before periods were tracked) adopts the
    current one and keeps its count.
    """
    if ledger.period == period:
        return ledger
    if ledger.period is None:
        return replace(ledger, period=period)
    return replace(ledger, guest_passes_used=0, period=period)


def guests_for_booking(ledger: GuestLedger, booking_id: int) -> list[GuestRef]:
    return [g for bid, g in zip(ledger.guest_booking_ids, ledger.guests) if bid == booking_id]


def _load_envelope(raw: Any) -> dict[str, Any]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        _log_anomaly(LEDGER_FIELD, LedgerDecodeAnomaly(f"not JSON: {e}"))
        return {}
    if not isinstance(data, dict):
        _log_anomaly(LEDGER_FIELD, LedgerDecodeAnomaly("envelope is not an object"))
        return {}
    version = data.get("version")
    if version is not None and version != ENVELOPE_VERSION:
        logger.info("Reading guest ledger envelope", extra={"field": LEDGER_FIELD, "reason": f"version {version}"})
    return data


def _decode_field(envelope: Mapping[str, Any], name: str, parse: Callable[[Any], T], zero: T) -> T:
    if name not in envelope or envelope[name] is None:
        return zero
    value = envelope[name]
    try:
        if isinstance(value, str) and name != "period":
            # values written by older clients were sometimes JSON strings
            value = json.loads(value) if value.strip() else None
            if value is None:
                return zero
        return parse(value)
    except (LedgerDecodeAnomaly, TypeError, ValueError) as e:
        _log_anomaly(name, e)
        return zero


def _parse_count(value: Any) -> int:
    if isinstance(value, bool):
        raise LedgerDecodeAnomaly("boolean is not a count")
    count = int(value)
    if count < 0:
        raise LedgerDecodeAnomaly("negative count")
    return count


def _parse_codes(value: Any) -> frozenset[str]:
    if not isinstance(value, list):
        raise LedgerDecodeAnomaly("referral codes are not a list")
    # the mirrored field is comma separated, so a code can never contain one
    return frozenset(part.strip() for code in value for part in str(code).split(",") if part.strip())


def _parse_code_list(raw: Any) -> frozenset[str]:
    if raw is None:
        return frozenset()
    if not isinstance(raw, str):
        raise LedgerDecodeAnomaly("referral code list is not text")
    return frozenset(code.strip() for code in raw.split(",") if code.strip())


def _parse_booking_ids(value: Any) -> tuple[int | None, ...]:
    """Booking ids by index. An unreadable entry becomes None so the guests stay aligned."""
    if not isinstance(value, list):
        raise LedgerDecodeAnomaly("guest booking ids are not a list")
    ids: list[int | None] = []
    for index, item in enumerate(value):
        try:
            ids.append(_parse_booking_id(item))
        except (LedgerDecodeAnomaly, TypeError, ValueError) as e:
            _log_anomaly(f"guestBookingIds[{index}]", e)
            ids.append(None)
    return tuple(ids)


def _parse_booking_id(item: Any) -> int:
    if isinstance(item, bool) or item is None:
        raise LedgerDecodeAnomaly(f"{item!r} is not a booking id")
    return int(item)


def _parse_guests(value: Any) -> tuple[GuestRef | None, ...]:
    """Guests by index. An unreadable entry becomes None so the booking ids stay aligned."""
    if not isinstance(value, list):
        raise LedgerDecodeAnomaly("guests are not a list")
    guests: list[GuestRef | None] = []
    for index, item in enumerate(value):
        try:
            guests.append(_parse_guest(item))
        except (LedgerDecodeAnomaly, TypeError, ValueError) as e:
            _log_anomaly(f"guests[{index}]", e)
            guests.append(None)
    return tuple(guests)


def _parse_guest(item: Any) -> GuestRef:
    if not isinstance(item, dict) or not item.get("name"):
        raise LedgerDecodeAnomaly("guest entry without a name")
    booking_id = item.get("bookingId")
    return GuestRef(
        name=str(item["name"]),
        email=str(item.get("email") or ""),
        phone=str(item["phone"]) if item.get("phone") else None,
        booking_id=_parse_booking_id(booking_id) if booking_id is not None else None,
    )


def _parse_period(value: Any) -> str:
    text = str(value).strip()
    if len(text) != 7 or text[4] != "-" or not (text[:4] + text[5:]).isdigit():
        raise LedgerDecodeAnomaly(f"bad period {text!r}")
    return text


def _guest_to_json(guest: GuestRef) -> dict[str, Any]:
    data: dict[str, Any] = {"name": guest.name, "email": guest.email}
    if guest.phone:
        data["phone"] = guest.phone
    if guest.booking_id is not None:
        data["bookingId"] = guest.booking_id
    return data


def _log_anomaly(field: str, error: Exception) -> None:
    logger.warning("Guest ledger field could not be decoded", extra={"field": field, "reason": str(error)})
