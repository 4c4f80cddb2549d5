from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role; also the discriminator of the Member/Admin account union."""

    ADMIN = "admin"
    MEMBER = "member"


class PaymentStatus(str, Enum):
    """Payment request lifecycle. PENDING is the only non-terminal state."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
