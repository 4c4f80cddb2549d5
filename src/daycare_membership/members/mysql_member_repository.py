from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Account, Member, account_from_row
from .repository import MemberRepository

_COLUMNS = """
    user_id, role, name, email, phone, address, position, rfid_number,
    membership_hours, total_hours_used, is_active, created_at
"""

_PROFILE_COLUMNS = frozenset({"name", "email", "phone", "address", "rfid_number", "is_active"})
_CONTACT_COLUMNS = frozenset({"name", "phone", "address"})


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE role=%s AND {where}",
                (Role.MEMBER.value, *params),
            )
            row = fetchone(cur)
            return account_from_row(row) if row else None

    def get_by_id(self, member_id: int) -> Optional[Member]:
        return self._get_one("user_id=%s", (int(member_id),))

    def get_by_rfid(self, rfid_number: str) -> Optional[Member]:
        return self._get_one("rfid_number=%s", (rfid_number,))

    def list_members(self) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY name ASC",
                (Role.MEMBER.value,),
            )
            return [account_from_row(r) for r in fetchall(cur)]

    def get_account(self, user_id: int) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return account_from_row(row) if row else None

    def list_accounts(self) -> Sequence[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY user_id DESC")
            return [account_from_row(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(role, name, email, rfid_number, membership_hours, total_hours_used, is_active, phone, address)
                VALUES(%s,%s,%s,%s,%s,0,%s,%s,%s)
                """,
                (Role.MEMBER.value, name, email, rfid_number, float(membership_hours), int(is_active), phone, address),
            )
            return int(cur.lastrowid)

    def update_profile(self, member_id: int, *, fields: dict) -> bool:
        unknown = set(fields) - _PROFILE_COLUMNS
        if unknown:
            raise ValueError(f"Not a profile column: {sorted(unknown)}")
        if not fields:
            return self.get_by_id(member_id) is not None

        assignments = ", ".join(f"{col}=%s" for col in fields)
        values = [int(v) if col == "is_active" else v for col, v in fields.items()]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {assignments} WHERE user_id=%s AND role=%s",
                (*values, int(member_id), Role.MEMBER.value),
            )
            # rowcount is 0 when the values did not change, so check existence.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS ok FROM users WHERE user_id=%s AND role=%s", (int(member_id), Role.MEMBER.value))
            return fetchone(cur) is not None

    def update_contact(self, user_id: int, *, fields: dict) -> bool:
        unknown = set(fields) - _CONTACT_COLUMNS
        if unknown:
            raise ValueError(f"Not a contact column: {sorted(unknown)}")
        if not fields:
            return self.get_account(user_id) is not None

        assignments = ", ".join(f"{col}=%s" for col in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {assignments} WHERE user_id=%s", (*fields.values(), int(user_id)))
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS ok FROM users WHERE user_id=%s", (int(user_id),))
            return fetchone(cur) is not None

    def add_membership_hours(self, member_id: int, hours: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET membership_hours = membership_hours + %s WHERE user_id=%s AND role=%s",
                (float(hours), int(member_id), Role.MEMBER.value),
            )
            return cur.rowcount > 0

    def add_hours_used(self, member_id: int, hours: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET total_hours_used = total_hours_used + %s WHERE user_id=%s AND role=%s",
                (float(hours), int(member_id), Role.MEMBER.value),
            )
            return cur.rowcount > 0
