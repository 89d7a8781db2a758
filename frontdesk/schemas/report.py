"""
Report request schemas.
"""

from datetime import date
from typing import Any, Dict, Optional

from pydantic import Field

from frontdesk.schemas.common import BaseSchema


class DaySettlementSend(BaseSchema):
    """Send one day's settlement summary to a WhatsApp number."""

    day: date = Field(..., alias="date")
    phone: str = Field(..., min_length=8, max_length=20)


class DaySettlementSendResponse(BaseSchema):
    success: bool
    record: Optional[Dict[str, Any]] = None
    delivery: Dict[str, Any]
