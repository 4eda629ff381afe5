from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class MemberSession:
    token: str
    member_id: str | None = None
    expires: int | None = None


@dataclass(frozen=True)
class SignupResult:
    session: MemberSession
    membership_id: int | None = None
    waiver_saved: bool = False


@dataclass(frozen=True)
class Club:
    id: int
    name: str
    billing_provider: str | None = None


@dataclass(frozen=True)
class MembershipType:
    id: int
    name: str
    description: str = ""
    price: str = ""


@dataclass(frozen=True)
class Membership:
    id: int
    name: str
    start_date: date | None = None
    end_date: date | None = None
    visits_used: int = 0
    visit_limit: int = 0
    company_id: int | None = None

    def is_active(self, on: date) -> bool:
        if self.start_date and self.start_date > on:
            return False
        if self.end_date and self.end_date < on:
            return False
        return True


@dataclass(frozen=True)
class Door:
    id: int
    name: str
    company_id: int | None = None
    site_id: int | None = None
    status: int | None = None


@dataclass(frozen=True)
class CheckinResult:
    access_granted: bool
    message: str
    denied_reason: str | None = None


@dataclass(frozen=True)
class Resource:
    id: int
    name: str
    company_id: int | None = None


@dataclass(frozen=True)
class TeeService:
    service_id: int
    name: str
    membership_id: int | None = None
    benefit_id: int | None = None
