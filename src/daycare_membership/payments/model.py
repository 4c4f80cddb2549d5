from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import PaymentStatus
from ..members.model import BalanceSnapshot


@dataclass(frozen=True)
class PaymentRequest:
    request_id: int
    member_id: int
    member_name: str
    amount: float
    hours_requested: float
    request_date: datetime
    payment_proof_image: str
    status: PaymentStatus = PaymentStatus.PENDING
    approved_by: Optional[int] = None
    approval_date: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == PaymentStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "memberId": self.member_id,
            "memberName": self.member_name,
            "amount": self.amount,
            "hoursRequested": self.hours_requested,
            "requestDate": to_iso(self.request_date),
            "paymentProofImage": self.payment_proof_image,
            "status": self.status.value,
            "approvedBy": self.approved_by,
            "approvalDate": to_iso(self.approval_date),
        }


@dataclass(frozen=True)
class ApprovalResult:
    payment: PaymentRequest
    member: BalanceSnapshot

    def to_dict(self) -> dict:
        return {"payment": self.payment.to_dict(), "member": self.member.to_dict()}
