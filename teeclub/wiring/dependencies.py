from functools import lru_cache
import logging

from teeclub.core.config import settings
from teeclub.application.ports.door_access import DoorAccessPort
from teeclub.application.ports.member_store import MemberStorePort
from teeclub.application.ports.notifications import NotificationPort
from teeclub.application.ports.payments import PaymentPort
from teeclub.application.ports.reservations import ReservationPort
from teeclub.application.ports.service_catalog import ServiceCatalogPort
from teeclub.application.use_cases.accounts import AccountUseCase
from teeclub.application.use_cases.availability import SlotAvailabilityChecker
from teeclub.application.use_cases.booking import BookingOrchestrator
from teeclub.application.use_cases.cancellation import CancelBookingUseCase
from teeclub.application.use_cases.door_access import DoorAccessUseCase
from teeclub.application.use_cases.guest_ledger import GuestLedgerService
from teeclub.application.use_cases.member_bookings import MemberBookingsUseCase
from teeclub.application.use_cases.payments import GuestPassPaymentUseCase
from teeclub.application.use_cases.referrals import ReferralService
from teeclub.application.utils.time_parser import safe_timezone
from teeclub.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from teeclub.infrastructure.gatekeeper.door_access import GatekeeperDoorAccess
from teeclub.infrastructure.gymmaster.gymmaster_client import GymMasterClient
from teeclub.infrastructure.gymmaster.member_store import GymMasterMemberStore
from teeclub.infrastructure.gymmaster.reservations import GymMasterReservations
from teeclub.infrastructure.mock.mock_gymmaster import MockDoorAccess, MockGymMaster
from teeclub.infrastructure.notifications.club_notifier import ClubNotifier
from teeclub.infrastructure.notifications.mock_notifier import MockNotifier
from teeclub.infrastructure.notifications.resend_email import ResendEmailSender
from teeclub.infrastructure.notifications.twilio_sms import TwilioSmsSender
from teeclub.infrastructure.payments.mock_payments import MockPayments
from teeclub.infrastructure.payments.square_payments import SquarePayments

logger = logging.getLogger(__name__)


def _is_dev() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_mock_gymmaster() -> MockGymMaster:
    return MockGymMaster()


@lru_cache
def get_gymmaster_client() -> GymMasterClient | None:
    if not settings.GYMMASTER_API_KEY:
        if _is_dev():
            logger.info("Using MockGymMaster (GYMMASTER_API_KEY missing, ENV=dev/local)")
            return None
        raise ValueError("GYMMASTER_API_KEY is required outside dev")
    return GymMasterClient()


def get_member_store() -> MemberStorePort:
    client = get_gymmaster_client()
    if client is None:
        return get_mock_gymmaster()
    return GymMasterMemberStore(client)


def get_reservations() -> ReservationPort:
    client = get_gymmaster_client()
    if client is None:
        return get_mock_gymmaster()
    return GymMasterReservations(client)


@lru_cache
def get_door_access() -> DoorAccessPort:
    client = get_gymmaster_client()
    if client is None or not (settings.GATEKEEPER_USERNAME and settings.GATEKEEPER_API_KEY):
        if _is_dev():
            return MockDoorAccess(get_mock_gymmaster())
        raise ValueError("GymMaster and Gatekeeper credentials are required for door access")
    return GatekeeperDoorAccess(gymmaster=client)


@lru_cache
def get_notifier() -> NotificationPort:
    email = ResendEmailSender() if settings.RESEND_API_KEY else None
    sms = (
        TwilioSmsSender()
        if settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN and settings.TWILIO_PHONE_NUMBER
        else None
    )
    if email is None and sms is None:
        logger.info("Using MockNotifier (no Resend or Twilio credentials)")
        return MockNotifier()
    return ClubNotifier(club_name=settings.CLUB_NAME, email=email, sms=sms)


@lru_cache
def get_payments() -> PaymentPort:
    if not settings.SQUARE_ACCESS_TOKEN:
        if _is_dev():
            return MockPayments()
        raise ValueError("SQUARE_ACCESS_TOKEN is required outside dev")
    return SquarePayments()


def get_service_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore()


def get_availability_checker() -> SlotAvailabilityChecker:
    return SlotAvailabilityChecker(
        duration_resolver=get_service_catalog().get_duration_minutes,
        grid_start_hour=settings.SLOT_GRID_START_HOUR,
        grid_end_hour=settings.SLOT_GRID_END_HOUR,
        step_minutes=settings.SLOT_GRID_STEP_MINUTES,
    )


@lru_cache
def get_ledger_service() -> GuestLedgerService:
    # one instance per process so the per-member writer locks are shared
    return GuestLedgerService(
        store=get_member_store(),
        timezone=safe_timezone(settings.CLUB_TIMEZONE),
        free_pass_allowance=settings.FREE_GUEST_PASSES_PER_PERIOD,
    )


def get_referral_service() -> ReferralService:
    return ReferralService(store=get_member_store(), app_url=settings.APP_URL)


def get_account_use_case() -> AccountUseCase:
    return AccountUseCase(
        store=get_member_store(),
        referrals=get_referral_service(),
        timezone=safe_timezone(settings.CLUB_TIMEZONE),
    )


def get_booking_orchestrator() -> BookingOrchestrator:
    return BookingOrchestrator(
        members=get_member_store(),
        reservations=get_reservations(),
        ledger=get_ledger_service(),
        referrals=get_referral_service(),
        notifications=get_notifier(),
        checker=get_availability_checker(),
        timezone=safe_timezone(settings.CLUB_TIMEZONE),
        guest_pass_charge_cents=settings.GUEST_PASS_CHARGE_CENTS,
    )


def get_cancel_booking_use_case() -> CancelBookingUseCase:
    return CancelBookingUseCase(reservations=get_reservations(), ledger=get_ledger_service())


def get_member_bookings_use_case() -> MemberBookingsUseCase:
    return MemberBookingsUseCase(
        reservations=get_reservations(),
        ledger=get_ledger_service(),
        default_location=settings.CLUB_NAME,
    )


def get_door_access_use_case() -> DoorAccessUseCase:
    return DoorAccessUseCase(doors=get_door_access(), accounts=get_account_use_case())


def get_payment_use_case() -> GuestPassPaymentUseCase:
    return GuestPassPaymentUseCase(payments=get_payments(), guest_pass_charge_cents=settings.GUEST_PASS_CHARGE_CENTS)
