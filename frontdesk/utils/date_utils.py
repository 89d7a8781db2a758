"""
Date and time utility functions used across the project.

Notes:
- Stay timestamps are hotel-local naive datetimes.
- Report dates arrive as DD/MM/YYYY (front-desk convention) or ISO
  YYYY-MM-DD; any value containing "-" is treated as ISO.
"""

import logging
import math
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional, Tuple, Union

from dateutil import parser as date_parser

from frontdesk.core.exceptions import ErrorCode, ReportParameterError

logger = logging.getLogger(__name__)

DISPLAY_DATE_FORMAT = "%d/%m/%Y"
SECONDS_PER_DAY = 24 * 60 * 60

MISSING_DATES_MESSAGE = "fromDate and toDate parameters are required"
INVALID_DATE_MESSAGE = "Invalid date format. Please use DD/MM/YYYY format"
REVERSED_RANGE_MESSAGE = "fromDate cannot be after toDate"

DateLike = Union[date, datetime]


def start_of_day(d: date) -> datetime:
    """Return the start (00:00:00) of a given date."""
    return datetime.combine(d, time.min)


def end_of_day(d: date) -> datetime:
    """Return the end (23:59:59.999999) of a given date."""
    return datetime.combine(d, time.max)


def as_datetime(value: DateLike) -> datetime:
    """Promote a date to midnight; datetimes pass through without tzinfo."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    return start_of_day(value)


def days_between_ceil(start: DateLike, end: DateLike) -> int:
    """
    Whole days from start to end, rounding any partial day up.

    Dates count as midnight, so two plain dates give their calendar
    difference.
    """
    seconds = (as_datetime(end) - as_datetime(start)).total_seconds()
    return math.ceil(seconds / SECONDS_PER_DAY)


def parse_report_date(value: str) -> date:
    """
    Parse a report date given as DD/MM/YYYY or ISO.

    Raises:
        ValueError: If the value is not a valid date in either form
    """
    value = value.strip()
    if "-" in value:
        return date_parser.isoparse(value).date()

    parts = value.split("/")
    if len(parts) != 3:
        raise ValueError(f"Expected DD/MM/YYYY, got {value!r}")
    day, month, year = (int(part) for part in parts)
    return date(year, month, day)


def parse_report_range(from_value: Optional[str], to_value: Optional[str]) -> Tuple[date, date]:
    """
    Validate and parse a fromDate/toDate pair.

    Raises:
        ReportParameterError: When either value is missing, malformed,
            or the range is reversed
    """
    if not from_value or not to_value:
        raise ReportParameterError(MISSING_DATES_MESSAGE, ErrorCode.MISSING_REQUIRED_FIELD)

    try:
        start = parse_report_date(from_value)
        end = parse_report_date(to_value)
    except (ValueError, OverflowError) as e:
        logger.info(f"Rejected report dates {from_value!r} - {to_value!r}: {e}")
        raise ReportParameterError(INVALID_DATE_MESSAGE) from e

    if start > end:
        raise ReportParameterError(REVERSED_RANGE_MESSAGE, ErrorCode.INVALID_DATE_RANGE)
    return start, end


def format_display_date(d: Optional[DateLike]) -> str:
    """Format a date as DD/MM/YYYY, empty string for None."""
    if d is None:
        return ""
    return d.strftime(DISPLAY_DATE_FORMAT)


def daterange(start: date, end: date) -> Iterator[date]:
    """
    Iterate over dates from start to end inclusive.
    """
    if end < start:
        return
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
