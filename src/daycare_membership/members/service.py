from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import (
    require_email,
    require_non_empty,
    require_non_negative,
    require_positive,
    require_rfid,
)
from ..core.exceptions import ConstraintViolation, NotFoundError, ValidationError
from .model import Account, BalanceSnapshot, Member
from .repository import MemberRepository

logger = logging.getLogger(__name__)


class MemberLedger:
    """Use cases around members and their two hour counters.

    membership_hours only grows through grant_hours() and total_hours_used only
    through consume_hours(). Neither counter is capped; remaining hours may go
    negative and is left for an admin to follow up.
    """

    def __init__(self, members: MemberRepository):
        self._members = members

    # -------- Lookups --------
    def get_member(self, member_id: int) -> Member:
        member = self._members.get_by_id(int(member_id))
        if not member:
            raise NotFoundError("Member not found")
        return member

    def get_by_rfid(self, rfid_number: str) -> Member:
        member = self._members.get_by_rfid((rfid_number or "").strip())
        if not member:
            raise NotFoundError("Member not found with this RFID")
        return member

    def balance(self, member_id: int) -> BalanceSnapshot:
        return self.get_member(member_id).snapshot()

    def list_members(self) -> Sequence[Member]:
        return self._members.list_members()

    def list_accounts(self) -> Sequence[Account]:
        return self._members.list_accounts()

    # -------- Admin maintenance --------
    def create_member(
        self,
        *,
        name: str,
        email: str,
        rfid_number: str,
        membership_hours=0,
        is_active: bool = True,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Member:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        rfid_number = require_rfid(rfid_number)
        hours = require_non_negative(membership_hours if membership_hours is not None else 0, "Membership hours")

        try:
            member_id = self._members.create_member(
                name=name,
                email=email,
                rfid_number=rfid_number,
                membership_hours=hours,
                is_active=bool(is_active),
                phone=(phone or "").strip() or None,
                address=(address or "").strip() or None,
            )
        except ConstraintViolation:
            raise ValidationError("A member with this email or RFID number already exists")

        logger.info("Created member %s (%s) with %.2f hours", member_id, rfid_number, hours)
        return self.get_member(member_id)

    def update_member(
        self,
        member_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        rfid_number: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Member:
        fields: dict = {}
        if name:
            fields["name"] = require_non_empty(name, "Name")
        if email:
            fields["email"] = require_email(email)
        if phone:
            fields["phone"] = phone.strip()
        if address:
            fields["address"] = address.strip()
        if rfid_number:
            fields["rfid_number"] = require_rfid(rfid_number)
        if is_active is not None:
            fields["is_active"] = bool(is_active)

        try:
            found = self._members.update_profile(int(member_id), fields=fields)
        except ConstraintViolation:
            raise ValidationError("A member with this email or RFID number already exists")
        if not found:
            raise NotFoundError("Member not found")
        return self.get_member(member_id)

    def set_active(self, member_id: int, *, is_active: bool) -> Member:
        return self.update_member(member_id, is_active=is_active)

    def update_own_profile(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Account:
        """Self-service edit; email, RFID and hour counters stay admin-only."""

        fields: dict = {}
        if name:
            fields["name"] = require_non_empty(name, "Name")
        if phone:
            fields["phone"] = phone.strip()
        if address:
            fields["address"] = address.strip()

        if not self._members.update_contact(int(user_id), fields=fields):
            raise NotFoundError("User not found")
        logger.info("User %s updated %s", user_id, ", ".join(sorted(fields)) or "nothing")
        return self._members.get_account(int(user_id))

    # -------- Counter mutations --------
    def grant_hours(self, member_id: int, hours) -> BalanceSnapshot:
        hours = require_positive(hours, "Hours to add")
        if not self._members.add_membership_hours(int(member_id), hours):
            raise NotFoundError("Member not found")
        logger.info("Granted %.2f hours to member %s", hours, member_id)
        return self.balance(member_id)

    def consume_hours(self, member_id: int, hours) -> BalanceSnapshot:
        hours = require_non_negative(hours, "Hours used")
        if hours and not self._members.add_hours_used(int(member_id), hours):
            raise NotFoundError("Member not found")
        snapshot = self.balance(member_id)
        if snapshot.remaining_hours < 0:
            logger.warning(
                "Member %s is over-drawn by %.2f hours", member_id, -snapshot.remaining_hours
            )
        return snapshot
