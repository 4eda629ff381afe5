from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from teeclub.domain.entities.member import Club, Membership, MembershipType, MemberSession, SignupResult


class MemberStorePort(ABC):
    @abstractmethod
    def login(self, email: str, password: str) -> MemberSession:
        raise NotImplementedError

    @abstractmethod
    def signup(self, details: dict[str, Any]) -> SignupResult:
        """Create a member with an initial membership. Returns the new session and membership id."""
        raise NotImplementedError

    @abstractmethod
    def fetch_agreement(self, membership_type_id: int, token: str | None = None) -> str:
        """Waiver text a member agrees to when taking this membership type."""
        raise NotImplementedError

    @abstractmethod
    def save_signature(self, token: str, membership_id: int, signature: str) -> None:
        """Attach a waiver signature (base64 PNG, data URL prefix allowed) to a membership."""
        raise NotImplementedError

    @abstractmethod
    def list_clubs(self) -> list[Club]:
        raise NotImplementedError

    @abstractmethod
    def list_membership_types(self) -> list[MembershipType]:
        raise NotImplementedError

    @abstractmethod
    def get_profile(self, token: str) -> dict[str, Any]:
        """Read the member profile as a field map."""
        raise NotImplementedError

    @abstractmethod
    def update_profile(self, token: str, fields: dict[str, str]) -> None:
        """Write profile fields. Each field is updated independently, last write wins."""
        raise NotImplementedError

    @abstractmethod
    def get_memberships(self, token: str) -> list[Membership]:
        raise NotImplementedError

    @abstractmethod
    def get_outstanding_balance(self, token: str) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def list_all_profiles(self) -> list[dict[str, Any]]:
        """List every member profile (staff credentials)."""
        raise NotImplementedError
