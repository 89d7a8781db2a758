from __future__ import annotations

from datetime import date, datetime

import pytest

from frontdesk.core.exceptions import ReportParameterError
from frontdesk.utils.date_utils import (
    daterange,
    days_between_ceil,
    format_display_date,
    parse_report_date,
    parse_report_range,
)


class TestParseReportDate:
    def test_day_month_year(self):
        assert parse_report_date("05/02/2024") == date(2024, 2, 5)

    def test_iso(self):
        assert parse_report_date("2024-02-05") == date(2024, 2, 5)

    @pytest.mark.parametrize("value", ["2024/02", "31/02/2024", "ab/cd/efgh"])
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            parse_report_date(value)


class TestParseReportRange:
    def test_valid_range(self):
        assert parse_report_range("01/01/2024", "2024-01-31") == (date(2024, 1, 1), date(2024, 1, 31))

    def test_missing_values(self):
        with pytest.raises(ReportParameterError, match="fromDate and toDate parameters are required") as exc:
            parse_report_range("01/01/2024", None)
        assert exc.value.to_dict() == {"error": "fromDate and toDate parameters are required"}
        assert exc.value.status_code == 400

    def test_invalid_format(self):
        with pytest.raises(ReportParameterError, match="Invalid date format"):
            parse_report_range("January", "01/02/2024")

    def test_reversed_range(self):
        with pytest.raises(ReportParameterError, match="fromDate cannot be after toDate"):
            parse_report_range("10/01/2024", "01/01/2024")


class TestHelpers:
    def test_days_between_ceil(self):
        assert days_between_ceil(date(2024, 1, 1), date(2024, 1, 4)) == 3
        assert days_between_ceil(datetime(2024, 1, 1, 10), datetime(2024, 1, 2, 11)) == 2

    def test_daterange_is_inclusive(self):
        assert list(daterange(date(2024, 1, 30), date(2024, 2, 1))) == [
            date(2024, 1, 30),
            date(2024, 1, 31),
            date(2024, 2, 1),
        ]
        assert list(daterange(date(2024, 2, 1), date(2024, 1, 1))) == []

    def test_format_display_date(self):
        assert format_display_date(date(2024, 3, 9)) == "09/03/2024"
        assert format_display_date(None) == ""
