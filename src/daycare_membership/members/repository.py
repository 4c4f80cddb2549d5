from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Account, Member


class MemberRepository(Protocol):
    """Repository interface for members (and the admin accounts sharing their table).

    Note: services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, member_id: int) -> Optional[Member]:
        raise NotImplementedError

    def get_by_rfid(self, rfid_number: str) -> Optional[Member]:
        raise NotImplementedError

    def list_members(self) -> Sequence[Member]:
        raise NotImplementedError

    def get_account(self, user_id: int) -> Optional[Account]:
        """Any account, member or admin."""

        raise NotImplementedError

    def list_accounts(self) -> Sequence[Account]:
        raise NotImplementedError

    def create_member(
        self,
        *,
        name: str,
        email: str,
        rfid_number: str,
        membership_hours: float,
        is_active: bool,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_profile(self, member_id: int, *, fields: dict) -> bool:
        """Update profile columns (name, email, phone, address, rfid_number, is_active)."""

        raise NotImplementedError

    def update_contact(self, user_id: int, *, fields: dict) -> bool:
        """Update name, phone or address on any account; False when it does not exist."""

        raise NotImplementedError

    def add_membership_hours(self, member_id: int, hours: float) -> bool:
        """Atomic increment; False when the member does not exist."""

        raise NotImplementedError

    def add_hours_used(self, member_id: int, hours: float) -> bool:
        """Atomic increment; False when the member does not exist."""

        raise NotImplementedError
