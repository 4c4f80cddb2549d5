from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import replace
from datetime import datetime
from typing import Callable, ContextManager, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_positive
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import PaymentStatus
from ..core.exceptions import AlreadyProcessed, InvalidAmount, MissingProof, NotFoundError
from ..members.service import MemberLedger
from .model import ApprovalResult, PaymentRequest
from .repository import PaymentRepository

logger = logging.getLogger(__name__)


class PaymentService:
    """Top-up requests: member submits, admin approves or rejects.

    pending -> approved | rejected, both terminal. Approval grants the
    requested hours in the same transaction as the status change.
    """

    def __init__(
        self,
        payments: PaymentRepository,
        ledger: MemberLedger,
        *,
        transaction: Optional[Callable[[], ContextManager]] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payments = payments
        self._ledger = ledger
        self._transaction = transaction or nullcontext
        self._clock = clock

    @staticmethod
    def check_amounts(amount, hours_requested) -> tuple[float, float]:
        return (
            require_positive(amount, "Amount", error=InvalidAmount),
            require_positive(hours_requested, "Hours requested", error=InvalidAmount),
        )

    def submit(self, *, member_id: int, amount, hours_requested, proof_ref: str) -> PaymentRequest:
        amount, hours = self.check_amounts(amount, hours_requested)
        proof_ref = (proof_ref or "").strip()
        if not proof_ref:
            raise MissingProof("Payment proof is required")

        member = self._ledger.get_member(member_id)
        now = self._clock()
        request_id = self._payments.create(
            member_id=member.member_id,
            member_name=member.name,
            amount=amount,
            hours_requested=hours,
            request_date=now,
            payment_proof_image=proof_ref,
        )
        logger.info("Payment request %s submitted by member %s for %.2f hours", request_id, member.member_id, hours)
        return PaymentRequest(
            request_id=request_id,
            member_id=member.member_id,
            member_name=member.name,
            amount=amount,
            hours_requested=hours,
            request_date=now,
            payment_proof_image=proof_ref,
        )

    def _get_pending(self, request_id: int) -> PaymentRequest:
        req = self._payments.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Payment request not found")
        if not req.is_pending:
            raise AlreadyProcessed(f"Payment request already {req.status.value}")
        return req

    def _decide(self, req: PaymentRequest, status: PaymentStatus, approver_id: int, now: datetime) -> PaymentRequest:
        decided = self._payments.decide(
            request_id=req.request_id,
            status=status,
            decided_by=int(approver_id),
            decided_at=now,
        )
        if not decided:
            raise AlreadyProcessed("Payment request already processed")
        return replace(req, status=status, approved_by=int(approver_id), approval_date=now)

    def approve(self, request_id: int, approver_id: int) -> ApprovalResult:
        req = self._get_pending(request_id)
        # Report a dangling member before touching the request.
        self._ledger.get_member(req.member_id)

        now = self._clock()
        with self._transaction():
            updated = self._decide(req, PaymentStatus.APPROVED, approver_id, now)
            snapshot = self._ledger.grant_hours(req.member_id, req.hours_requested)

        logger.info(
            "Payment request %s approved by %s: +%.2f hours for member %s",
            req.request_id,
            approver_id,
            req.hours_requested,
            req.member_id,
        )
        return ApprovalResult(payment=updated, member=snapshot)

    def reject(self, request_id: int, approver_id: int) -> PaymentRequest:
        req = self._get_pending(request_id)
        updated = self._decide(req, PaymentStatus.REJECTED, approver_id, self._clock())
        logger.info("Payment request %s rejected by %s", req.request_id, approver_id)
        return updated

    def list_payments(self, *, status: Optional[PaymentStatus] = None, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[PaymentRequest]:
        return self._payments.list_all(status=status, limit=limit)

    def list_member_payments(self, member_id: int, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[PaymentRequest]:
        member = self._ledger.get_member(member_id)
        return self._payments.list_for_member(member.member_id, limit=limit)
