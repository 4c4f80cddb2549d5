from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_hours, db_cursor, fetchall, fetchone
from .model import PaymentRequest
from .repository import PaymentRepository

_SELECT = """
    SELECT request_id, member_id, member_name, amount, hours_requested, request_date,
           payment_proof_image, status, approved_by, approval_date
    FROM payment_requests
"""


def _to_request(r: dict) -> PaymentRequest:
    return PaymentRequest(
        request_id=int(r["request_id"]),
        member_id=int(r["member_id"]),
        member_name=r["member_name"],
        amount=float(r["amount"]),
        hours_requested=as_hours(r["hours_requested"]),
        request_date=r["request_date"],
        payment_proof_image=r["payment_proof_image"],
        status=PaymentStatus(r["status"]),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        approval_date=r.get("approval_date"),
    )


class MySQLPaymentRepository(PaymentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        member_id: int,
        member_name: str,
        amount: float,
        hours_requested: float,
        request_date: datetime,
        payment_proof_image: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payment_requests(
                    member_id, member_name, amount, hours_requested, request_date, payment_proof_image, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(member_id),
                    member_name,
                    float(amount),
                    float(hours_requested),
                    request_date,
                    payment_proof_image,
                    PaymentStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[PaymentRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def decide(
        self,
        *,
        request_id: int,
        status: PaymentStatus,
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payment_requests
                SET status=%s, approved_by=%s, approval_date=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(decided_by), decided_at, int(request_id), PaymentStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list_all(self, *, status: Optional[PaymentStatus] = None, limit: int = 500) -> Sequence[PaymentRequest]:
        clauses: list[str] = []
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + where + " ORDER BY request_date DESC, request_id DESC LIMIT %s",
                (*params, int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_for_member(self, member_id: int, *, limit: int = 500) -> Sequence[PaymentRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE member_id=%s ORDER BY request_date DESC, request_id DESC LIMIT %s",
                (int(member_id), int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]
