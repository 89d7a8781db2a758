"""
Payment summation shared by checkout, booking updates and every report.

Advance and receipt amounts are split across cash, card, UPI and bank.
Any field may be missing or NULL and counts as zero.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from frontdesk.models.enums import PaymentMethod
from frontdesk.utils.formatters import ZERO, Number, money_float, to_decimal

INSTRUMENTS = tuple(method.value for method in PaymentMethod)


@dataclass(frozen=True)
class PaymentTotals:
    advance_cash: Decimal
    advance_card: Decimal
    advance_upi: Decimal
    advance_bank: Decimal
    receipt_cash: Decimal
    receipt_card: Decimal
    receipt_upi: Decimal
    receipt_bank: Decimal
    total_amount: Decimal

    @property
    def advance_total(self) -> Decimal:
        return self.advance_cash + self.advance_card + self.advance_upi + self.advance_bank

    @property
    def receipt_total(self) -> Decimal:
        return self.receipt_cash + self.receipt_card + self.receipt_upi + self.receipt_bank

    @property
    def paid_total(self) -> Decimal:
        return self.advance_total + self.receipt_total

    @property
    def balance(self) -> Decimal:
        """Signed balance; negative when the guest has overpaid."""
        return self.total_amount - self.paid_total

    @property
    def outstanding(self) -> Decimal:
        """Balance floored at zero."""
        return max(self.balance, ZERO)

    def to_dict(self) -> Dict[str, float]:
        return {
            "advance_cash": money_float(self.advance_cash),
            "advance_card": money_float(self.advance_card),
            "advance_upi": money_float(self.advance_upi),
            "advance_bank": money_float(self.advance_bank),
            "advance_total": money_float(self.advance_total),
            "receipt_cash": money_float(self.receipt_cash),
            "receipt_card": money_float(self.receipt_card),
            "receipt_upi": money_float(self.receipt_upi),
            "receipt_bank": money_float(self.receipt_bank),
            "receipt_total": money_float(self.receipt_total),
            "total_amount": money_float(self.total_amount),
            "outstanding_amount": money_float(self.outstanding),
        }


def _read(record: Any, field: str) -> Number:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def summarize_payments(record: Any, total_amount: Optional[Number] = None) -> PaymentTotals:
    """
    Sum a payment breakdown into typed totals.

    Args:
        record: A BookingPaymentBreakdown, a mapping with the same keys,
            or None for a booking without a ledger
        total_amount: Overrides the charge total, e.g. with a checkout's
            final amount. Defaults to taxed_total_amount, falling back
            to total_amount.

    Returns:
        PaymentTotals
    """
    values = {}
    for kind in ("advance", "receipt"):
        for instrument in INSTRUMENTS:
            field = f"{kind}_{instrument}"
            values[field] = to_decimal(_read(record, field))

    if total_amount is None:
        total_amount = _read(record, "taxed_total_amount") or _read(record, "total_amount")

    return PaymentTotals(total_amount=to_decimal(total_amount), **values)
