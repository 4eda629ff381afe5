"""
Tests for slot availability against remote sessions and locally held slots.
"""

from __future__ import annotations

from datetime import date, time

from teeclub.application.use_cases.availability import SlotAvailabilityChecker
from teeclub.application.utils.durations import duration_from_service_name
from teeclub.domain.entities.booking import ExistingSession, Slot
from teeclub.domain.entities.member import Resource
from teeclub.infrastructure.catalog.service_catalog_store import ServiceCatalogStore

DAY = date(2026, 10, 20)


def _checker() -> SlotAvailabilityChecker:
    return SlotAvailabilityChecker(duration_resolver=ServiceCatalogStore().get_duration_minutes)


def test_slot_is_available_when_nothing_booked():
    slot = Slot(day=DAY, resource_id=1, start=time(10, 0))

    assert _checker().is_available(slot, [])


def test_exact_start_on_same_bay_is_taken():
    slot = Slot(day=DAY, resource_id=1, start=time(10, 0))
    sessions = [ExistingSession(day=DAY, resource_id=1, start=time(10, 0), end=time(11, 0))]

    assert not _checker().is_available(slot, sessions)


def test_other_bay_or_day_does_not_block():
    slot = Slot(day=DAY, resource_id=1, start=time(10, 0))
    sessions = [
        ExistingSession(day=DAY, resource_id=2, start=time(10, 0)),
        ExistingSession(day=date(2026, 10, 21), resource_id=1, start=time(10, 0)),
    ]

    assert _checker().is_available(slot, sessions)


def test_remote_check_compares_start_only():
    """A remote session starting earlier is not treated as overlapping."""
    slot = Slot(day=DAY, resource_id=1, start=time(10, 30))
    sessions = [ExistingSession(day=DAY, resource_id=1, start=time(10, 0), end=time(11, 0))]

    assert _checker().is_available(slot, sessions)


def test_held_one_hour_slot_blocks_successor_cell():
    """Holding 10:00 for an hour also blocks the 10:30 cell on that bay."""
    held = Slot(day=DAY, resource_id=1, start=time(10, 0), service_name="Simulator Bay 1 hr")
    proposed = Slot(day=DAY, resource_id=1, start=time(10, 30), service_name="Simulator Bay 30 min")

    checker = _checker()
    assert checker.has_local_conflict(proposed, [held])
    assert checker.find_local_conflict(proposed, [held]) == held


def test_back_to_back_held_slots_do_not_conflict():
    held = Slot(day=DAY, resource_id=1, start=time(10, 0), service_name="Simulator Bay 30 min")
    proposed = Slot(day=DAY, resource_id=1, start=time(10, 30), service_name="Simulator Bay 30 min")

    assert not _checker().has_local_conflict(proposed, [held])


def test_conflicting_slots_reports_later_duplicates():
    first = Slot(day=DAY, resource_id=2, start=time(9, 0), service_name="Simulator Bay 1 hr")
    second = Slot(day=DAY, resource_id=2, start=time(9, 30), service_name="Simulator Bay 1 hr")
    elsewhere = Slot(day=DAY, resource_id=3, start=time(9, 30), service_name="Simulator Bay 1 hr")

    assert _checker().conflicting_slots([first, second, elsewhere]) == [second]


def test_grid_covers_business_hours_in_half_hours():
    times = _checker().grid_times()

    assert times[0] == time(9, 0)
    assert times[-1] == time(16, 30)
    assert len(times) == 16


def test_open_slots_marks_taken_cells():
    resources = [Resource(id=1, name="Bay 1"), Resource(id=2, name="Bay 2")]
    sessions = [ExistingSession(day=DAY, resource_id=2, start=time(9, 0))]

    cells = _checker().open_slots(DAY, resources, sessions, "Simulator Bay 1 hr")

    assert len(cells) == 32
    taken = [c for c in cells if not c.available]
    assert len(taken) == 1
    assert taken[0].slot.bay_name == "Bay 2"
    assert taken[0].slot.start == time(9, 0)


def test_duration_falls_back_to_service_name():
    """Services missing from the catalog take their length from the name."""
    catalog = ServiceCatalogStore()

    assert catalog.get_service("Bay Rental 90 min") is None
    assert catalog.get_duration_minutes("Bay Rental 90 min") == 90
    assert duration_from_service_name("Bay Rental 1.5 hours") == 90
    assert duration_from_service_name("Mystery") == 30


def test_catalog_matches_display_names_loosely():
    catalog = ServiceCatalogStore()

    assert catalog.get_service("Simulator Bay (1 hr)").duration_minutes == 60
    assert catalog.get_service("Simulator Bay (1 hr)") is catalog.get_service("simulator bay 1 hr")
    assert catalog.get_service("  SIMULATOR BAY - 1 HR ") is not None


def test_catalog_duration_wins_over_the_name():
    """A full round is booked for four hours even though the name gives no length."""
    catalog = ServiceCatalogStore()

    assert duration_from_service_name("Simulator Bay (18 Holes)") == 30
    assert catalog.get_duration_minutes("Simulator Bay (18 Holes)") == 240


def test_catalog_length_blocks_following_held_slots():
    checker = _checker()
    held = [Slot(day=DAY, resource_id=1, start=time(10, 0), service_name="Simulator Bay (18 Holes)")]

    assert checker.has_local_conflict(Slot(day=DAY, resource_id=1, start=time(13, 30)), held)
    assert not checker.has_local_conflict(Slot(day=DAY, resource_id=1, start=time(14, 0)), held)
