"""Duration math for attendance sessions."""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from ..core.constants import HOURS_DECIMALS, MIN_BILLABLE_HOURS

_QUANTUM = Decimal(1).scaleb(-HOURS_DECIMALS)


def round_hours(value: float) -> float:
    """Round half-up to two decimals (0.125 -> 0.13, not banker's 0.12)."""
    return float(Decimal(str(value)).quantize(_QUANTUM, rounding=ROUND_HALF_UP))


def elapsed_hours(start: datetime, end: datetime) -> float:
    """Hours between two instants, rounded to two decimals, no floor.

    Used for live "hours so far" of open sessions.
    """
    return round_hours((end - start).total_seconds() / 3600)


def billable_hours(check_in_time: datetime, check_out_time: datetime) -> float:
    """Hours charged for a closed session; never below MIN_BILLABLE_HOURS."""
    return max(MIN_BILLABLE_HOURS, elapsed_hours(check_in_time, check_out_time))
