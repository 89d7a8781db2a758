"""
WhatsApp Cloud API client for front-desk summaries.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

import requests

from frontdesk.config.settings import Settings
from frontdesk.core.logging import get_logger
from frontdesk.utils.date_utils import format_display_date
from frontdesk.utils.formatters import CurrencyFormatter

logger = get_logger(__name__)

INDIAN_MOBILE_PATTERN = re.compile(r'^(\+91|91|0)?([6-9]\d{9})$')


@dataclass
class WhatsAppResult:
    """Outcome of a send attempt."""
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self):
        return {
            "success": self.success,
            "message_id": self.message_id,
            "error": self.error,
            "timestamp": self.timestamp.isoformat(),
        }


def normalize_phone_number(phone: str) -> str:
    """Digits only with country code; bare Indian mobiles get 91 prepended."""
    cleaned = re.sub(r'[\s\-().]', '', phone or '')
    match = INDIAN_MOBILE_PATTERN.match(cleaned)
    if match:
        return f"91{match.group(2)}"
    return cleaned.lstrip('+')


class WhatsAppService:

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.WHATSAPP_PHONE_NUMBER_ID and self.settings.WHATSAPP_ACCESS_TOKEN)

    @property
    def messages_url(self) -> str:
        base = self.settings.WHATSAPP_API_URL.rstrip('/')
        return f"{base}/{self.settings.WHATSAPP_PHONE_NUMBER_ID}/messages"

    def send_text(self, phone: str, body: str) -> WhatsAppResult:
        """Send a plain text message. Never raises."""
        if not self.is_configured:
            logger.warning("WhatsApp is not configured, message not sent")
            return WhatsAppResult(success=False, error="WhatsApp is not configured")

        to = normalize_phone_number(phone)
        if not to.isdigit():
            return WhatsAppResult(success=False, error=f"Invalid phone number: {phone}")

        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"preview_url": False, "body": body},
        }
        headers = {"Authorization": f"Bearer {self.settings.WHATSAPP_ACCESS_TOKEN}"}

        try:
            response = self.session.post(
                self.messages_url,
                json=payload,
                headers=headers,
                timeout=self.settings.WHATSAPP_TIMEOUT,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"WhatsApp message to {to} failed: {e}")
            return WhatsAppResult(success=False, error=str(e))

        messages = data.get("messages") or [{}]
        message_id = messages[0].get("id")
        logger.info(f"WhatsApp message {message_id} sent to {to}")
        return WhatsAppResult(success=True, message_id=message_id)

    def format_day_settlement_message(self, record: Mapping[str, Any]) -> str:
        currency = self.settings.CURRENCY

        def money(value: Any) -> str:
            return CurrencyFormatter.format_amount(value, currency)

        collections = record.get("collections", {})
        occupancy = record.get("occupancy", {})
        lines = [
            f"*{self.settings.HOTEL_NAME} - Day Settlement*",
            f"Date: {format_display_date(record.get('date'))}",
            "",
            f"Room revenue: {money(record.get('room_revenue'))}",
            f"Service revenue: {money(record.get('service_revenue'))}",
            f"Total revenue: {money(record.get('total_revenue'))}",
            f"Advance collections: {money(record.get('advance_collections'))}",
            f"Outstanding: {money(record.get('outstanding'))}",
            "",
            "*Collections*",
        ]
        for method, amount in collections.items():
            lines.append(f"{method.replace('_', ' ').title()}: {money(amount)}")
        lines.append(f"Total: {money(record.get('total_collections'))}")
        lines.extend([
            "",
            f"Occupancy: {occupancy.get('occupied', 0)}/{occupancy.get('total', 0)} "
            f"({occupancy.get('rate', 0)}%)",
            f"Check-ins: {record.get('checkins', 0)} | Check-outs: {record.get('checkouts', 0)}",
        ])
        return "\n".join(lines)

    def send_day_settlement(self, record: Mapping[str, Any], phone: str) -> WhatsAppResult:
        return self.send_text(phone, self.format_day_settlement_message(record))
