from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Mapping, Optional, Union

from ..attendance.billing import round_hours
from ..core.enums import Role


@dataclass(frozen=True)
class Member:
    """Domain entity: a member holding prepaid hours.

    remaining_hours is derived, never stored. Over-draw is allowed, so the
    stored counters may put total_hours_used above membership_hours.
    """

    role: ClassVar[Role] = Role.MEMBER

    member_id: int
    name: str
    email: str
    rfid_number: str
    membership_hours: float = 0.0
    total_hours_used: float = 0.0
    is_active: bool = True
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def balance(self) -> float:
        """Unclamped membership_hours - total_hours_used; negative after over-draw."""
        return round_hours(self.membership_hours - self.total_hours_used)

    @property
    def display_remaining_hours(self) -> float:
        return max(0.0, self.balance)

    def snapshot(self) -> "BalanceSnapshot":
        return BalanceSnapshot(
            member_id=self.member_id,
            name=self.name,
            membership_hours=self.membership_hours,
            total_hours_used=self.total_hours_used,
        )


@dataclass(frozen=True)
class Admin:
    role: ClassVar[Role] = Role.ADMIN

    admin_id: int
    name: str
    email: str
    position: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None


Account = Union[Member, Admin]


@dataclass(frozen=True)
class BalanceSnapshot:
    """Member hour totals as reported after check-in/check-out/approval."""

    member_id: int
    name: str
    membership_hours: float
    total_hours_used: float
    remaining_hours: float = field(init=False)
    display_remaining_hours: float = field(init=False)

    def __post_init__(self):
        remaining = round_hours(self.membership_hours - self.total_hours_used)
        object.__setattr__(self, "membership_hours", round_hours(self.membership_hours))
        object.__setattr__(self, "total_hours_used", round_hours(self.total_hours_used))
        object.__setattr__(self, "remaining_hours", remaining)
        object.__setattr__(self, "display_remaining_hours", max(0.0, remaining))

    def to_dict(self) -> dict:
        return {
            "id": self.member_id,
            "name": self.name,
            "membershipHours": self.membership_hours,
            "totalHoursUsed": self.total_hours_used,
            "remainingHours": self.remaining_hours,
            "displayRemainingHours": self.display_remaining_hours,
        }


def account_from_row(row: Mapping[str, Any]) -> Account:
    """Decode a users row into the variant named by its role column."""

    role = Role(row["role"])
    if role is Role.MEMBER:
        return Member(
            member_id=int(row["user_id"]),
            name=row["name"],
            email=row["email"],
            rfid_number=row["rfid_number"],
            membership_hours=float(row.get("membership_hours") or 0),
            total_hours_used=float(row.get("total_hours_used") or 0),
            is_active=bool(row.get("is_active", True)),
            phone=row.get("phone"),
            address=row.get("address"),
            created_at=row.get("created_at"),
        )
    return Admin(
        admin_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        position=row.get("position"),
        phone=row.get("phone"),
        address=row.get("address"),
        created_at=row.get("created_at"),
    )


def account_to_dict(account: Account) -> dict:
    if isinstance(account, Member):
        return {
            "id": account.member_id,
            "role": account.role.value,
            "name": account.name,
            "email": account.email,
            "phone": account.phone,
            "address": account.address,
            "rfidNumber": account.rfid_number,
            "membershipHours": round_hours(account.membership_hours),
            "totalHoursUsed": round_hours(account.total_hours_used),
            "remainingHours": account.balance,
            "displayRemainingHours": account.display_remaining_hours,
            "isActive": account.is_active,
            "createdAt": account.created_at.isoformat() if account.created_at else None,
        }
    return {
        "id": account.admin_id,
        "role": account.role.value,
        "name": account.name,
        "email": account.email,
        "phone": account.phone,
        "address": account.address,
        "position": account.position,
        "createdAt": account.created_at.isoformat() if account.created_at else None,
    }
