"""
Tests for reading and writing the guest ledger in member profile fields.
"""

from __future__ import annotations

import json

import pytest

from teeclub.application.utils.guest_ledger_codec import (
    LEDGER_FIELD,
    REFERRAL_CODES_FIELD,
    add_referral_code,
    decode,
    encode,
    guests_for_booking,
    record_guest_invites,
    remove_booking,
    roll_period,
)
from teeclub.domain.entities.booking import GuestRef
from teeclub.domain.entities.guest_ledger import GuestLedger


def _ledger_with_two_bookings() -> GuestLedger:
    ledger = GuestLedger(period="2026-10")
    ledger = record_guest_invites(ledger, [GuestRef(name="Ann", email="ann@example.com")], 1001)
    return record_guest_invites(
        ledger,
        [GuestRef(name="Bob", phone="+17055550101"), GuestRef(name="Cy", email="cy@example.com")],
        1002,
    )


def test_empty_profile_decodes_to_empty_ledger():
    """A member who never invited anyone has a zero ledger."""
    ledger = decode({"firstname": "Demo"})

    assert ledger == GuestLedger()


def test_encode_then_decode_keeps_guests_aligned():
    """Guests and booking ids are written together and come back paired."""
    ledger = add_referral_code(_ledger_with_two_bookings(), "REF-AAAA1111")

    restored = decode(encode(ledger))

    assert restored == ledger
    assert len(restored.guests) == len(restored.guest_booking_ids) == 3
    assert [g.name for g in guests_for_booking(restored, 1002)] == ["Bob", "Cy"]


def test_encode_mirrors_referral_codes_field():
    """Referral codes are also written as a comma separated list for validation lookups."""
    ledger = add_referral_code(add_referral_code(GuestLedger(), "REF-B"), "REF-A")

    fields = encode(ledger)

    assert fields[REFERRAL_CODES_FIELD] == "REF-A,REF-B"
    assert json.loads(fields[LEDGER_FIELD])["referralCodes"] == ["REF-A", "REF-B"]


def test_malformed_field_does_not_poison_the_others():
    """One unreadable value falls back to zero while the rest still decode."""
    profile = {
        LEDGER_FIELD: json.dumps(
            {
                "version": 2,
                "guestPassesUsed": "lots",
                "referralCodes": ["REF-1"],
                "guestBookingIds": [1001],
                "guests": [{"name": "Ann", "email": "ann@example.com", "bookingId": 1001}],
                "period": "2026-10",
            }
        )
    }

    ledger = decode(profile)

    assert ledger.guest_passes_used == 0
    assert ledger.referral_codes == frozenset({"REF-1"})
    assert ledger.guest_booking_ids == (1001,)
    assert ledger.guests[0].name == "Ann"
    assert ledger.period == "2026-10"


def test_unparseable_envelope_still_reads_mirrored_codes():
    """A corrupt envelope yields an empty ledger plus the codes from the mirror field."""
    ledger = decode({LEDGER_FIELD: "{not json", REFERRAL_CODES_FIELD: "REF-1, REF-2,"})

    assert ledger.guest_passes_used == 0
    assert ledger.guests == ()
    assert ledger.referral_codes == frozenset({"REF-1", "REF-2"})


def test_values_stored_as_json_strings_are_accepted():
    """Older writers stored each array as a JSON string inside the envelope."""
    profile = {
        LEDGER_FIELD: json.dumps(
            {
                "guestPassesUsed": "1",
                "guestBookingIds": "[1001]",
                "guests": json.dumps([{"name": "Ann"}]),
            }
        )
    }

    ledger = decode(profile)

    assert ledger.guest_passes_used == 1
    assert ledger.guest_booking_ids == (1001,)
    assert ledger.guests == (GuestRef(name="Ann"),)


def test_misaligned_arrays_are_truncated_to_the_shorter():
    """Guests without a matching booking id are dropped on read."""
    profile = {
        LEDGER_FIELD: json.dumps(
            {
                "guestPassesUsed": 2,
                "guestBookingIds": [1001],
                "guests": [{"name": "Ann"}, {"name": "Bob"}],
            }
        )
    }

    ledger = decode(profile)

    assert ledger.guest_booking_ids == (1001,)
    assert [g.name for g in ledger.guests] == ["Ann"]


def test_record_guest_invites_counts_passes():
    ledger = _ledger_with_two_bookings()

    assert ledger.guest_passes_used == 3
    assert ledger.guest_booking_ids == (1001, 1002, 1002)
    assert all(g.booking_id == bid for g, bid in zip(ledger.guests, ledger.guest_booking_ids))


def test_remove_booking_drops_its_guests_and_passes():
    """Cancelling a booking releases the passes its guests used."""
    ledger = remove_booking(_ledger_with_two_bookings(), 1002)

    assert ledger.guest_passes_used == 1
    assert ledger.guest_booking_ids == (1001,)
    assert [g.name for g in ledger.guests] == ["Ann"]


def test_remove_unknown_booking_leaves_ledger_unchanged():
    ledger = _ledger_with_two_bookings()

    assert remove_booking(ledger, 9999) is ledger


def test_remove_booking_never_goes_negative():
    """A counter that was reset by a new period stays at zero."""
    ledger = GuestLedger(guest_passes_used=0, guest_booking_ids=(1001,), guests=(GuestRef(name="Ann"),))

    assert remove_booking(ledger, 1001).guest_passes_used == 0


def test_add_referral_code_ignores_duplicates_and_blanks():
    ledger = add_referral_code(GuestLedger(), "REF-1")

    assert add_referral_code(ledger, "REF-1") is ledger
    assert add_referral_code(ledger, "  ") is ledger
    assert add_referral_code(ledger, "REF-2").referral_codes == frozenset({"REF-1", "REF-2"})


def test_roll_period_resets_counter_in_new_month():
    ledger = GuestLedger(guest_passes_used=2, period="2026-09")

    rolled = roll_period(ledger, "2026-10")

    assert rolled.guest_passes_used == 0
    assert rolled.period == "2026-10"


def test_roll_period_adopts_period_for_legacy_ledger():
    """A ledger written before periods existed keeps its count."""
    rolled = roll_period(GuestLedger(guest_passes_used=1), "2026-10")

    assert rolled.guest_passes_used == 1
    assert rolled.period == "2026-10"


def test_bad_period_is_ignored():
    ledger = decode({LEDGER_FIELD: json.dumps({"guestPassesUsed": 1, "period": "October"})})

    assert ledger.period is None
    assert ledger.guest_passes_used == 1


def test_one_bad_guest_entry_drops_only_that_invite():
    """A guest without a name loses its own invite; the rest of the arrays survive."""
    profile = {
        LEDGER_FIELD: json.dumps(
            {
                "guestPassesUsed": 2,
                "guestBookingIds": [1001, 1002],
                "guests": [{"name": "Ann", "bookingId": 1001}, {"email": "no-name@example.com"}],
            }
        )
    }

    ledger = decode(profile)

    assert ledger.guest_passes_used == 2
    assert ledger.guest_booking_ids == (1001,)
    assert [g.name for g in ledger.guests] == ["Ann"]


def test_one_bad_booking_id_drops_only_that_invite():
    profile = {
        LEDGER_FIELD: json.dumps(
            {
                "guestPassesUsed": 2,
                "guestBookingIds": [True, 1002],
                "guests": [{"name": "Ann"}, {"name": "Bob"}],
            }
        )
    }

    ledger = decode(profile)

    assert ledger.guest_booking_ids == (1002,)
    assert [g.name for g in ledger.guests] == ["Bob"]


def test_add_referral_code_rejects_commas():
    """Codes are mirrored comma separated, so a comma would split one code into two."""
    with pytest.raises(ValueError):
        add_referral_code(GuestLedger(), "A,B")


def test_envelope_code_with_comma_reads_back_split():
    profile = {LEDGER_FIELD: json.dumps({"referralCodes": ["A,B"]})}

    ledger = decode(profile)

    assert ledger.referral_codes == frozenset({"A", "B"})
    assert decode(encode(ledger)).referral_codes == ledger.referral_codes
