from __future__ import annotations

from decimal import Decimal

from frontdesk.models.payment import BookingPaymentBreakdown
from frontdesk.services.payment.payment_summary import summarize_payments


class TestSummarizePayments:
    def test_null_instruments_count_as_zero(self):
        totals = summarize_payments({
            "advance_cash": 500,
            "advance_card": 0,
            "advance_upi": 200,
            "advance_bank": None,
        })
        assert totals.advance_total == Decimal("700")

    def test_outstanding_balance(self):
        totals = summarize_payments({
            "total_amount": 3000,
            "advance_cash": 500,
            "advance_upi": 200,
        })
        assert totals.advance_total == Decimal("700")
        assert totals.receipt_total == Decimal("0")
        assert totals.outstanding == Decimal("2300")

    def test_overpayment_floors_outstanding(self):
        totals = summarize_payments({"total_amount": 1000, "receipt_card": 1200})
        assert totals.balance == Decimal("-200")
        assert totals.outstanding == Decimal("0")

    def test_taxed_total_preferred(self):
        totals = summarize_payments({"total_amount": 1000, "taxed_total_amount": 1180})
        assert totals.total_amount == Decimal("1180")

    def test_total_override(self):
        totals = summarize_payments({"total_amount": 1000, "advance_cash": 400}, total_amount=Decimal("600"))
        assert totals.outstanding == Decimal("200")

    def test_missing_ledger(self):
        totals = summarize_payments(None)
        assert totals.paid_total == Decimal("0")
        assert totals.total_amount == Decimal("0")

    def test_reads_orm_rows(self):
        breakdown = BookingPaymentBreakdown(
            total_amount=Decimal("2500.00"),
            advance_card=Decimal("1000.00"),
            receipt_bank=Decimal("250.50"),
        )
        totals = summarize_payments(breakdown)
        assert totals.paid_total == Decimal("1250.50")
        assert totals.to_dict()["outstanding_amount"] == 1249.5
