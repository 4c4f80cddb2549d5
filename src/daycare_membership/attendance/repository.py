from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_active_for_member(self, member_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        member_id: int,
        member_name: str,
        rfid_number: str,
        check_in_time: datetime,
    ) -> int:
        """Insert an open session.

        Must raise AlreadyCheckedIn when the member already has one open,
        even if the caller's earlier lookup missed it.
        """

        raise NotImplementedError

    def close_session(self, *, attendance_id: int, check_out_time: datetime, hours_spent: float) -> bool:
        """Set check-out fields on a still-open record; False when already closed or absent."""

        raise NotImplementedError

    def list_active(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_checked_in_between(self, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_latest(self) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_all(self, *, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_member(self, member_id: int, *, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
