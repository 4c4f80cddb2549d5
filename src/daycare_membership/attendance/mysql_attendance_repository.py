from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.exceptions import AlreadyCheckedIn, ConstraintViolation
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_hours, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT attendance_id, member_id, member_name, rfid_number, check_in_time, check_out_time, hours_spent
    FROM attendance_records
"""

_OPEN_SESSION_KEY = "uq_attendance_open_session"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        member_id=int(r["member_id"]),
        member_name=r["member_name"],
        rfid_number=r["rfid_number"],
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        hours_spent=as_hours(r["hours_spent"]) if r.get("hours_spent") is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _one(self, sql: str, params: tuple = ()) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            r = fetchone(cur)
            return _to_record(r) if r else None

    def _many(self, sql: str, params: tuple = ()) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_record(r) for r in fetchall(cur)]

    def get_active_for_member(self, member_id: int) -> Optional[AttendanceRecord]:
        return self._one(
            _SELECT + " WHERE member_id=%s AND check_out_time IS NULL",
            (int(member_id),),
        )

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._one(_SELECT + " WHERE attendance_id=%s", (int(attendance_id),))

    def create_checkin(
        self,
        *,
        member_id: int,
        member_name: str,
        rfid_number: str,
        check_in_time: datetime,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(member_id, member_name, rfid_number, check_in_time)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(member_id), member_name, rfid_number, check_in_time),
                )
                return int(cur.lastrowid)
        except ConstraintViolation as exc:
            if _OPEN_SESSION_KEY in str(exc):
                raise AlreadyCheckedIn("Member already checked in") from exc
            raise

    def close_session(self, *, attendance_id: int, check_out_time: datetime, hours_spent: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, hours_spent=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, float(hours_spent), int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_active(self) -> Sequence[AttendanceRecord]:
        return self._many(_SELECT + " WHERE check_out_time IS NULL ORDER BY check_in_time DESC")

    def list_checked_in_between(self, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        return self._many(
            _SELECT + " WHERE check_in_time BETWEEN %s AND %s ORDER BY check_in_time DESC",
            (start, end),
        )

    def get_latest(self) -> Optional[AttendanceRecord]:
        return self._one(_SELECT + " ORDER BY check_in_time DESC, attendance_id DESC LIMIT 1")

    def list_all(self, *, limit: int) -> Sequence[AttendanceRecord]:
        return self._many(_SELECT + " ORDER BY check_in_time DESC LIMIT %s", (int(limit),))

    def list_for_member(self, member_id: int, *, limit: int) -> Sequence[AttendanceRecord]:
        return self._many(
            _SELECT + " WHERE member_id=%s ORDER BY check_in_time DESC LIMIT %s",
            (int(member_id), int(limit)),
        )
