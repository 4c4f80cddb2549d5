from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import MAX_PROOF_BYTES
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_base import transaction
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import MemberRepository
from .members.service import MemberLedger
from .payments.mysql_payment_repository import MySQLPaymentRepository
from .payments.repository import PaymentRepository
from .payments.service import PaymentService
from .payments.storage import LocalProofStorage, ProofStorage


@dataclass(frozen=True)
class Container:
    members_repo: MemberRepository
    attendance_repo: AttendanceRepository
    payments_repo: PaymentRepository

    ledger: MemberLedger
    attendance_service: AttendanceService
    payment_service: PaymentService
    proof_storage: ProofStorage

    max_proof_bytes: int = MAX_PROOF_BYTES
    conn: Optional[DatabaseConnection] = None


def build_container(
    *,
    db_config: dict,
    upload_folder: str = "uploads/payments",
    max_proof_bytes: int = MAX_PROOF_BYTES,
    block_checkin_without_hours: bool = False,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    tx = partial(transaction, conn)

    members_repo = MySQLMemberRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    payments_repo = MySQLPaymentRepository(conn)

    ledger = MemberLedger(members_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        ledger,
        transaction=tx,
        block_checkin_without_hours=block_checkin_without_hours,
    )
    payment_service = PaymentService(payments_repo, ledger, transaction=tx)

    return Container(
        members_repo=members_repo,
        attendance_repo=attendance_repo,
        payments_repo=payments_repo,
        ledger=ledger,
        attendance_service=attendance_service,
        payment_service=payment_service,
        proof_storage=LocalProofStorage(upload_folder),
        max_proof_bytes=int(max_proof_bytes),
        conn=conn,
    )
