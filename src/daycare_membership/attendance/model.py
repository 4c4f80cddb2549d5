from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..members.model import BalanceSnapshot


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one visit. check_out_time is None while the session is open."""

    attendance_id: int
    member_id: int
    member_name: str
    rfid_number: str
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    hours_spent: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return self.check_out_time is None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "memberId": self.member_id,
            "memberName": self.member_name,
            "rfidNumber": self.rfid_number,
            "checkInTime": to_iso(self.check_in_time),
            "checkOutTime": to_iso(self.check_out_time),
            "hoursSpent": self.hours_spent,
            "active": self.is_active,
        }


@dataclass(frozen=True)
class CheckInResult:
    attendance: AttendanceRecord
    member: BalanceSnapshot

    def to_dict(self) -> dict:
        return {"attendance": self.attendance.to_dict(), "member": self.member.to_dict()}


@dataclass(frozen=True)
class CheckOutResult:
    attendance: AttendanceRecord
    member: BalanceSnapshot

    def to_dict(self) -> dict:
        return {"attendance": self.attendance.to_dict(), "member": self.member.to_dict()}


@dataclass(frozen=True)
class AttendanceStats:
    """Read-model for the front-desk dashboard."""

    present_count: int
    total_hours_today: float
    last_check_in: Optional[AttendanceRecord]

    def to_dict(self) -> dict:
        return {
            "presentCount": self.present_count,
            "totalHoursToday": self.total_hours_today,
            "lastCheckIn": self.last_check_in.to_dict() if self.last_check_in else None,
        }
