from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PaymentStatus
from .model import PaymentRequest


class PaymentRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[PaymentRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: PaymentStatus,
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        """Move a PENDING request to a terminal status.

        Returns False when the request is absent or no longer pending, so two
        concurrent decisions cannot both succeed.
        """

        raise NotImplementedError

    def list_all(self, *, status: Optional[PaymentStatus] = None, limit: int = 500) -> Sequence[PaymentRequest]:
        raise NotImplementedError

    def list_for_member(self, member_id: int, *, limit: int = 500) -> Sequence[PaymentRequest]:
        raise NotImplementedError
