from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import replace
from datetime import datetime
from typing import Callable, ContextManager, Optional, Sequence

from ..common.datetime_utils import day_bounds, now_local
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.exceptions import AlreadyCheckedIn, InactiveMember, InsufficientHours, NoActiveSession
from ..members.service import MemberLedger
from .billing import billable_hours, elapsed_hours, round_hours
from .model import AttendanceRecord, AttendanceStats, CheckInResult, CheckOutResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """RFID check-in/check-out and the hour accounting that goes with it.

    A member has at most one open session. Checkout bills at least
    MIN_BILLABLE_HOURS and is never refused for lack of hours.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        ledger: MemberLedger,
        *,
        transaction: Optional[Callable[[], ContextManager]] = None,
        clock: Callable[[], datetime] = now_local,
        block_checkin_without_hours: bool = False,
    ):
        self._attendance = attendance
        self._ledger = ledger
        self._transaction = transaction or nullcontext
        self._clock = clock
        self._block_without_hours = bool(block_checkin_without_hours)

    def check_in(self, rfid_number: str, *, now: datetime | None = None) -> CheckInResult:
        now = now or self._clock()

        member = self._ledger.get_by_rfid(rfid_number)
        if not member.is_active:
            raise InactiveMember("Member account is inactive")
        if self._block_without_hours and member.total_hours_used >= member.membership_hours:
            raise InsufficientHours("Insufficient hours available")

        if self._attendance.get_active_for_member(member.member_id):
            raise AlreadyCheckedIn("Member already checked in")

        # The storage layer re-checks this atomically and raises AlreadyCheckedIn on a race.
        attendance_id = self._attendance.create_checkin(
            member_id=member.member_id,
            member_name=member.name,
            rfid_number=member.rfid_number,
            check_in_time=now,
        )
        record = AttendanceRecord(
            attendance_id=attendance_id,
            member_id=member.member_id,
            member_name=member.name,
            rfid_number=member.rfid_number,
            check_in_time=now,
        )
        logger.info("Member %s (%s) checked in at %s", member.member_id, member.rfid_number, now.isoformat())
        return CheckInResult(attendance=record, member=member.snapshot())

    def check_out(self, rfid_number: str, *, now: datetime | None = None) -> CheckOutResult:
        now = now or self._clock()

        member = self._ledger.get_by_rfid(rfid_number)
        active = self._attendance.get_active_for_member(member.member_id)
        if not active:
            raise NoActiveSession("No active session found for this member")

        hours = billable_hours(active.check_in_time, now)

        with self._transaction():
            closed = self._attendance.close_session(
                attendance_id=active.attendance_id,
                check_out_time=now,
                hours_spent=hours,
            )
            if not closed:
                raise NoActiveSession("No active session found for this member")
            snapshot = self._ledger.consume_hours(member.member_id, hours)

        logger.info(
            "Member %s (%s) checked out after %.2f hours, remaining %.2f",
            member.member_id,
            member.rfid_number,
            hours,
            snapshot.remaining_hours,
        )
        record = replace(active, check_out_time=now, hours_spent=hours)
        return CheckOutResult(attendance=record, member=snapshot)

    def list_current_check_ins(self) -> Sequence[AttendanceRecord]:
        return self._attendance.list_active()

    def get_stats(self, *, now: datetime | None = None) -> AttendanceStats:
        now = now or self._clock()
        start, end = day_bounds(now.date())

        active = self._attendance.list_active()
        # Open sessions count even when they started before midnight.
        today = {r.attendance_id: r for r in self._attendance.list_checked_in_between(start, end)}
        today.update((r.attendance_id, r) for r in active)

        total = 0.0
        for record in today.values():
            if record.is_active:
                total += elapsed_hours(record.check_in_time, now)
            else:
                total += record.hours_spent or 0.0

        return AttendanceStats(
            present_count=len(active),
            total_hours_today=round_hours(total),
            last_check_in=self._attendance.get_latest(),
        )

    def list_attendance(self, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.list_all(limit=limit)

    def list_member_attendance(self, member_id: int, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[AttendanceRecord]:
        member = self._ledger.get_member(member_id)
        return self._attendance.list_for_member(member.member_id, limit=limit)
