from datetime import date, time
from typing import Any

from pydantic import BaseModel, Field


class SessionSchema(BaseModel):
    token: str
    member_id: str | None = None
    expires: int | None = None


class LoginRequestSchema(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class SignupRequestSchema(BaseModel):
    firstname: str = Field(min_length=1)
    surname: str = Field(min_length=1)
    dob: str
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    phonecell: str = Field(min_length=10)
    membershiptypeid: str
    companyid: str
    phonehome: str | None = None
    gender: str | None = None
    addressstreet: str | None = None
    addresssuburb: str | None = None
    addresscity: str | None = None
    addresscountry: str | None = None
    addressareacode: str | None = None
    referral_code: str | None = None
    waiver_signature: str = Field(min_length=1)


class SignupResponseSchema(SessionSchema):
    membership_id: int | None = None
    waiver_saved: bool = False


class WaiverSchema(BaseModel):
    membership_type_id: int
    body: str


class WaiverSignatureSchema(BaseModel):
    signature: str = Field(min_length=1)
    membership_id: int | None = None


class ProfileUpdateSchema(BaseModel):
    firstname: str | None = None
    surname: str | None = None
    email: str | None = None
    dob: str | None = None
    gender: str | None = None
    phonecell: str | None = None
    phonehome: str | None = None
    addressstreet: str | None = None
    addresssuburb: str | None = None
    addresscity: str | None = None
    addresscountry: str | None = None
    addressareacode: str | None = None
    receivesms: str | None = None
    receiveemail: str | None = None
    goal: str | None = None


class ClubSchema(BaseModel):
    id: int
    name: str


class MembershipTypeSchema(BaseModel):
    id: int
    name: str
    description: str = ""
    price: str = ""


class MembershipSchema(BaseModel):
    id: int
    name: str
    start_date: date | None = None
    end_date: date | None = None
    active: bool


class BalanceSchema(BaseModel):
    owing_amount: str
    charges: list[dict[str, Any]] = Field(default_factory=list)


class ServiceSchema(BaseModel):
    service_id: int
    name: str
    duration_minutes: int


class SlotSchema(BaseModel):
    day: date
    resource_id: int
    start: time
    bay_name: str = ""


class GuestSchema(BaseModel):
    name: str = Field(min_length=1)
    email: str = ""
    phone: str | None = None
    booking_id: int | None = None


class BookingRequestSchema(BaseModel):
    service_id: int
    service_name: str
    company_id: int
    location_name: str = ""
    slots: list[SlotSchema] = Field(min_length=1)
    guests: list[GuestSchema] = Field(default_factory=list)


class GuestPassUsageSchema(BaseModel):
    free: int = 0
    charged: int = 0


class BookingSchema(BaseModel):
    id: int
    day: date
    start_time: time
    service_name: str
    location_name: str = ""
    bay_name: str = ""
    guests: list[GuestSchema] = Field(default_factory=list)
    guest_pass_usage: GuestPassUsageSchema = GuestPassUsageSchema()


class FailedSlotSchema(BaseModel):
    slot: SlotSchema
    reason: str


class LedgerDeltaSchema(BaseModel):
    free: int
    charged: int
    referral_codes: list[str]
    guest_passes_used: int


class BookingResponseSchema(BaseModel):
    message: str
    booking_ids: list[int]
    bookings: list[BookingSchema]
    ledger_delta: LedgerDeltaSchema | None = None
    amount_due_cents: int = 0
    failed: list[FailedSlotSchema] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class GridCellSchema(BaseModel):
    resource_id: int
    bay_name: str
    start: time
    available: bool


class AvailabilityResponseSchema(BaseModel):
    day: date
    service_id: int
    duration_minutes: int
    cells: list[GridCellSchema]


class LedgerSummarySchema(BaseModel):
    period: str | None = None
    guest_passes_used: int
    free_passes_remaining: int
    referral_codes: list[str]
    guests: list[GuestSchema]


class ReferralValidateRequestSchema(BaseModel):
    referral_code: str


class ReferralValidateResponseSchema(BaseModel):
    valid: bool


class DoorSchema(BaseModel):
    id: int
    name: str
    company_id: int | None = None
    status: int | None = None


class CheckinResponseSchema(BaseModel):
    access_granted: bool
    message: str
    denied_reason: str | None = None


class PaymentRequestSchema(BaseModel):
    nonce: str = Field(min_length=1)
    charged_passes: int = Field(ge=1)


class PaymentResponseSchema(BaseModel):
    success: bool
    payment_id: str
    amount_cents: int
