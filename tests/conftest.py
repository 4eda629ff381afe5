from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest

from teeclub.application.use_cases.availability import SlotAvailabilityChecker
from teeclub.application.use_cases.booking import BookingOrchestrator
from teeclub.application.use_cases.guest_ledger import GuestLedgerService
from teeclub.application.use_cases.referrals import ReferralService
from teeclub.domain.entities.member import MemberSession
from teeclub.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from teeclub.infrastructure.mock.mock_gymmaster import DEMO_TOKEN, MockGymMaster
from teeclub.infrastructure.notifications.mock_notifier import MockNotifier

TZ = ZoneInfo("America/Toronto")
PERIOD = "2026-10"


@pytest.fixture
def gymmaster() -> MockGymMaster:
    return MockGymMaster()


@pytest.fixture
def notifier() -> MockNotifier:
    return MockNotifier()


@pytest.fixture
def session() -> MemberSession:
    return MemberSession(token=DEMO_TOKEN, member_id="1")


@pytest.fixture
def ledger_service(gymmaster: MockGymMaster) -> GuestLedgerService:
    return GuestLedgerService(store=gymmaster, timezone=TZ, free_pass_allowance=2, period_provider=lambda: PERIOD)


@pytest.fixture
def referrals(gymmaster: MockGymMaster) -> ReferralService:
    return ReferralService(store=gymmaster, app_url="https://club.example.com")


@pytest.fixture
def orchestrator(gymmaster, ledger_service, referrals, notifier) -> BookingOrchestrator:
    return BookingOrchestrator(
        members=gymmaster,
        reservations=gymmaster,
        ledger=ledger_service,
        referrals=referrals,
        notifications=notifier,
        checker=SlotAvailabilityChecker(duration_resolver=ServiceCatalogStore().get_duration_minutes),
        timezone=TZ,
        guest_pass_charge_cents=1000,
    )
