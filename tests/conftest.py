from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

import pytest

from daycare_membership.attendance.model import AttendanceRecord
from daycare_membership.attendance.service import AttendanceService
from daycare_membership.core.enums import PaymentStatus
from daycare_membership.core.exceptions import AlreadyCheckedIn, ConstraintViolation
from daycare_membership.members.model import Admin, Member
from daycare_membership.members.service import MemberLedger
from daycare_membership.payments.model import PaymentRequest
from daycare_membership.payments.service import PaymentService


class InMemoryMembers:
    def __init__(self):
        self.by_id: dict[int, Member] = {}
        self.admins: list[Admin] = []
        self._id = 0

    def add(self, **kwargs) -> Member:
        self._id += 1
        member = Member(member_id=self._id, **kwargs)
        self.by_id[member.member_id] = member
        return member

    def get_by_id(self, member_id: int) -> Optional[Member]:
        return self.by_id.get(int(member_id))

    def get_by_rfid(self, rfid_number: str) -> Optional[Member]:
        return next((m for m in self.by_id.values() if m.rfid_number == rfid_number), None)

    def list_members(self):
        return sorted(self.by_id.values(), key=lambda m: m.name)

    def get_account(self, user_id: int):
        user_id = int(user_id)
        return self.by_id.get(user_id) or next((a for a in self.admins if a.admin_id == user_id), None)

    def list_accounts(self):
        return [*self.admins, *self.by_id.values()]

    def create_member(self, *, name, email, rfid_number, membership_hours, is_active, phone=None, address=None) -> int:
        if any(m.email == email or m.rfid_number == rfid_number for m in self.by_id.values()):
            raise ConstraintViolation("Duplicate entry")
        return self.add(
            name=name,
            email=email,
            rfid_number=rfid_number,
            membership_hours=membership_hours,
            is_active=is_active,
            phone=phone,
            address=address,
        ).member_id

    def update_profile(self, member_id: int, *, fields: dict) -> bool:
        member = self.by_id.get(int(member_id))
        if not member:
            return False
        self.by_id[member.member_id] = replace(member, **fields)
        return True

    def update_contact(self, user_id: int, *, fields: dict) -> bool:
        account = self.get_account(user_id)
        if account is None:
            return False
        if isinstance(account, Admin):
            self.admins = [replace(a, **fields) if a.admin_id == account.admin_id else a for a in self.admins]
        else:
            self.by_id[account.member_id] = replace(account, **fields)
        return True

    def add_membership_hours(self, member_id: int, hours: float) -> bool:
        member = self.by_id.get(int(member_id))
        if not member:
            return False
        self.by_id[member.member_id] = replace(member, membership_hours=member.membership_hours + hours)
        return True

    def add_hours_used(self, member_id: int, hours: float) -> bool:
        member = self.by_id.get(int(member_id))
        if not member:
            return False
        self.by_id[member.member_id] = replace(member, total_hours_used=member.total_hours_used + hours)
        return True


class InMemoryAttendance:
    """Enforces the one-open-session-per-member rule like the unique index does."""

    def __init__(self):
        self.records: dict[int, AttendanceRecord] = {}
        self._id = 0

    def get_active_for_member(self, member_id: int) -> Optional[AttendanceRecord]:
        return next((r for r in self.records.values() if r.member_id == member_id and r.is_active), None)

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(int(attendance_id))

    def create_checkin(self, *, member_id, member_name, rfid_number, check_in_time) -> int:
        if self.get_active_for_member(member_id):
            raise AlreadyCheckedIn("Member already checked in")
        self._id += 1
        self.records[self._id] = AttendanceRecord(
            attendance_id=self._id,
            member_id=member_id,
            member_name=member_name,
            rfid_number=rfid_number,
            check_in_time=check_in_time,
        )
        return self._id

    def close_session(self, *, attendance_id, check_out_time, hours_spent) -> bool:
        rec = self.records.get(int(attendance_id))
        if not rec or not rec.is_active:
            return False
        self.records[rec.attendance_id] = replace(rec, check_out_time=check_out_time, hours_spent=hours_spent)
        return True

    def _sorted(self, records):
        return sorted(records, key=lambda r: (r.check_in_time, r.attendance_id), reverse=True)

    def list_active(self):
        return self._sorted(r for r in self.records.values() if r.is_active)

    def list_checked_in_between(self, start, end):
        return self._sorted(r for r in self.records.values() if start <= r.check_in_time <= end)

    def get_latest(self):
        items = self._sorted(self.records.values())
        return items[0] if items else None

    def list_all(self, *, limit):
        return self._sorted(self.records.values())[:limit]

    def list_for_member(self, member_id, *, limit):
        return self._sorted(r for r in self.records.values() if r.member_id == member_id)[:limit]


class InMemoryPayments:
    def __init__(self):
        self.requests: dict[int, PaymentRequest] = {}
        self._id = 0

    def create(self, *, member_id, member_name, amount, hours_requested, request_date, payment_proof_image) -> int:
        self._id += 1
        self.requests[self._id] = PaymentRequest(
            request_id=self._id,
            member_id=member_id,
            member_name=member_name,
            amount=amount,
            hours_requested=hours_requested,
            request_date=request_date,
            payment_proof_image=payment_proof_image,
        )
        return self._id

    def get_by_id(self, request_id):
        return self.requests.get(int(request_id))

    def decide(self, *, request_id, status, decided_by, decided_at) -> bool:
        req = self.requests.get(int(request_id))
        if not req or req.status != PaymentStatus.PENDING:
            return False
        self.requests[req.request_id] = replace(req, status=status, approved_by=decided_by, approval_date=decided_at)
        return True

    def list_all(self, *, status=None, limit=500):
        items = [r for r in self.requests.values() if status is None or r.status == status]
        return sorted(items, key=lambda r: (r.request_date, r.request_id), reverse=True)[:limit]

    def list_for_member(self, member_id, *, limit=500):
        items = [r for r in self.requests.values() if r.member_id == member_id]
        return sorted(items, key=lambda r: (r.request_date, r.request_id), reverse=True)[:limit]


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 2, 9, 0, 0))


@pytest.fixture
def members_repo():
    return InMemoryMembers()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def payments_repo():
    return InMemoryPayments()


@pytest.fixture
def ledger(members_repo):
    return MemberLedger(members_repo)


@pytest.fixture
def attendance_service(attendance_repo, ledger, clock):
    return AttendanceService(attendance_repo, ledger, clock=clock)


@pytest.fixture
def payment_service(payments_repo, ledger, clock):
    return PaymentService(payments_repo, ledger, clock=clock)


@pytest.fixture
def jane(members_repo):
    return members_repo.add(
        name="Jane Smith",
        email="jane@example.com",
        rfid_number="RF123456",
        membership_hours=10.0,
    )
