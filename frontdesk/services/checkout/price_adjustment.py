"""
Checkout price adjustment.

Prorates a booking's charged amount by the difference between the
scheduled and actual stay length. Early departures produce a refund,
late departures an additional charge. The calculation is pure; callers
persist the result.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from frontdesk.core.exceptions import ValidationError
from frontdesk.models.enums import EarlyCheckoutReason
from frontdesk.utils.date_utils import DateLike, as_datetime, days_between_ceil
from frontdesk.utils.formatters import ZERO, Number, money_float, to_decimal

# Stays are billed for at least one night
MIN_BILLABLE_NIGHTS = 1


class AdjustmentKind(str, Enum):
    REFUND = "refund"
    ADDITIONAL_CHARGE = "additional_charge"
    NONE = "none"


@dataclass(frozen=True)
class PriceAdjustment:
    """Result of prorating a stay. Amounts are unrounded Decimals."""

    scheduled_days: int
    actual_days: int
    day_difference: int
    daily_rate: Decimal
    original_amount: Decimal
    adjustment: Decimal
    final_amount: Decimal
    kind: AdjustmentKind
    reason: str

    @property
    def is_early(self) -> bool:
        return self.day_difference > 0

    @property
    def is_late(self) -> bool:
        return self.day_difference < 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scheduled_days": self.scheduled_days,
            "actual_days": self.actual_days,
            "day_difference": self.day_difference,
            "daily_rate": money_float(self.daily_rate),
            "original_amount": money_float(self.original_amount),
            "price_adjustment": money_float(self.adjustment),
            "final_amount": money_float(self.final_amount),
            "adjustment_type": self.kind.value,
            "adjustment_reason": self.reason,
            "is_early": self.is_early,
            "is_late": self.is_late,
        }


def _billable_days(start: DateLike, end: DateLike) -> int:
    return max(MIN_BILLABLE_NIGHTS, days_between_ceil(start, end))


def calculate_price_adjustment(
    check_in: DateLike,
    scheduled_check_out: DateLike,
    actual_check_out: DateLike,
    original_total_amount: Number,
) -> PriceAdjustment:
    """
    Compute the signed adjustment for checking out on ``actual_check_out``.

    Args:
        check_in: Stay start
        scheduled_check_out: Originally booked end
        actual_check_out: Real departure, must not precede check_in
        original_total_amount: Amount charged for the scheduled stay

    Returns:
        PriceAdjustment with final_amount = original + adjustment

    Raises:
        ValidationError: On negative amounts or dates before check-in
    """
    original = to_decimal(original_total_amount)
    if original < 0:
        raise ValidationError(
            "Original amount cannot be negative",
            field_errors={"original_total_amount": ["must be >= 0"]},
        )
    if as_datetime(actual_check_out) < as_datetime(check_in):
        raise ValidationError(
            "Actual checkout cannot be before check-in",
            field_errors={"actual_check_out": ["must be on or after check-in"]},
        )
    if as_datetime(scheduled_check_out) < as_datetime(check_in):
        raise ValidationError(
            "Scheduled checkout cannot be before check-in",
            field_errors={"scheduled_check_out": ["must be on or after check-in"]},
        )

    scheduled_days = _billable_days(check_in, scheduled_check_out)
    actual_days = _billable_days(check_in, actual_check_out)
    day_difference = scheduled_days - actual_days
    daily_rate = original / scheduled_days

    if day_difference > 0:
        adjustment = -(daily_rate * day_difference)
        kind = AdjustmentKind.REFUND
        reason = f"Early checkout: {day_difference} day(s) refund"
    elif day_difference < 0:
        adjustment = daily_rate * abs(day_difference)
        kind = AdjustmentKind.ADDITIONAL_CHARGE
        reason = f"Late checkout: {abs(day_difference)} day(s) additional charge"
    else:
        adjustment = ZERO
        kind = AdjustmentKind.NONE
        reason = ""

    if not adjustment:
        adjustment = ZERO

    return PriceAdjustment(
        scheduled_days=scheduled_days,
        actual_days=actual_days,
        day_difference=day_difference,
        daily_rate=daily_rate,
        original_amount=original,
        adjustment=adjustment,
        final_amount=original + adjustment,
        kind=kind,
        reason=reason,
    )


def validate_early_checkout_reason(
    adjustment: PriceAdjustment,
    reason: Optional[str],
    custom_reason: Optional[str] = None,
) -> Optional[str]:
    """
    Enforce the early-checkout reason rule and return the text to store.

    A reason from EarlyCheckoutReason is required when the guest leaves
    before the scheduled date; "Other" needs a custom description.
    """
    if not adjustment.is_early:
        return reason or None

    if not reason:
        raise ValidationError(
            "Early checkout reason is required",
            field_errors={"early_checkout_reason": ["required for early checkout"]},
        )

    allowed = {item.value for item in EarlyCheckoutReason}
    if reason not in allowed:
        raise ValidationError(
            f"Unknown early checkout reason: {reason}",
            field_errors={"early_checkout_reason": [f"must be one of {sorted(allowed)}"]},
        )

    if reason == EarlyCheckoutReason.OTHER.value:
        if not custom_reason or not custom_reason.strip():
            raise ValidationError(
                "Please describe the early checkout reason",
                field_errors={"custom_reason": ["required when reason is Other"]},
            )
        return custom_reason.strip()
    return reason
