"""
Late checkout fee with a grace period.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from frontdesk.config.settings import Settings
from frontdesk.utils.formatters import ZERO, money_float


@dataclass(frozen=True)
class GracePeriodPolicy:
    enabled: bool = True
    duration_minutes: int = 60
    late_fee_per_hour: Decimal = Decimal("100")
    max_late_fee: Decimal = Decimal("500")

    @classmethod
    def from_settings(cls, settings: Settings) -> "GracePeriodPolicy":
        return cls(
            enabled=settings.GRACE_PERIOD_ENABLED,
            duration_minutes=settings.GRACE_PERIOD_MINUTES,
            late_fee_per_hour=settings.LATE_FEE_PER_HOUR,
            max_late_fee=settings.MAX_LATE_FEE,
        )


@dataclass(frozen=True)
class LateFee:
    is_late: bool
    late_minutes: int
    within_grace_period: bool
    hours_charged: int
    fee: Decimal

    def to_dict(self):
        return {
            "is_late": self.is_late,
            "late_minutes": self.late_minutes,
            "grace_period_used": self.within_grace_period,
            "hours_charged": self.hours_charged,
            "late_fee": money_float(self.fee),
        }


NO_LATE_FEE = LateFee(is_late=False, late_minutes=0, within_grace_period=False, hours_charged=0, fee=ZERO)


def calculate_late_fee(
    scheduled_checkout: datetime,
    actual_checkout: datetime,
    policy: GracePeriodPolicy,
) -> LateFee:
    """
    Charge per started hour past the grace window, capped at the maximum.

    Lateness is counted in whole minutes. With the grace period disabled
    every late minute is chargeable.
    """
    late_seconds = (actual_checkout - scheduled_checkout).total_seconds()
    if late_seconds <= 0:
        return NO_LATE_FEE

    late_minutes = math.floor(late_seconds / 60)
    grace_minutes = policy.duration_minutes if policy.enabled else 0

    if late_minutes <= grace_minutes:
        return LateFee(
            is_late=True,
            late_minutes=late_minutes,
            within_grace_period=policy.enabled,
            hours_charged=0,
            fee=ZERO,
        )

    hours_charged = math.ceil((late_minutes - grace_minutes) / 60)
    fee = min(policy.late_fee_per_hour * hours_charged, policy.max_late_fee)
    return LateFee(
        is_late=True,
        late_minutes=late_minutes,
        within_grace_period=False,
        hours_charged=hours_charged,
        fee=fee,
    )
