"""
Status buckets used by the check-in/check-out style reports.

Rows with a cancelled, no-show or pending booking are reported in their
own groups; every other status is primary.
"""

from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Union

from frontdesk.models.enums import BookingStatus


class ReportBucket(str, Enum):
    PRIMARY = "primary"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"
    PENDING = "pending"


_SPECIAL_BUCKETS = {
    BookingStatus.CANCELLED.value: ReportBucket.CANCELLED,
    BookingStatus.NO_SHOW.value: ReportBucket.NO_SHOW,
    BookingStatus.PENDING.value: ReportBucket.PENDING,
}


def classify_status(status: Union[BookingStatus, str, None]) -> ReportBucket:
    if isinstance(status, BookingStatus):
        status = status.value
    return _SPECIAL_BUCKETS.get(status, ReportBucket.PRIMARY)


def _row_status(row: Any) -> Any:
    if isinstance(row, Mapping):
        return row.get("status")
    return getattr(row, "status", None)


def bucket_rows(
    rows: Iterable[Any],
    status_of: Callable[[Any], Any] = _row_status,
) -> Dict[str, Union[int, List[Any]]]:
    """
    Partition rows into buckets, preserving order within each bucket.

    Returns:
        {"total": n, "primary": [...], "cancelled": [...],
         "no_show": [...], "pending": [...]}
    """
    grouped: Dict[str, List[Any]] = {bucket.value: [] for bucket in ReportBucket}
    for row in rows:
        grouped[classify_status(status_of(row)).value].append(row)

    result: Dict[str, Union[int, List[Any]]] = {"total": sum(len(items) for items in grouped.values())}
    result.update(grouped)
    return result
