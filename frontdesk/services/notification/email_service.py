"""
Email notifications over SMTP.

Messages are rendered from jinja2 templates in ``frontdesk/templates``.
Delivery is best-effort: callers get ``False`` back when SMTP is not
configured or the send fails, and the business operation carries on.
"""

import smtplib
from dataclasses import dataclass, field
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, List, Optional

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape

from frontdesk.config.settings import Settings
from frontdesk.core.exceptions import NotificationError
from frontdesk.core.logging import get_logger
from frontdesk.utils.date_utils import format_display_date
from frontdesk.utils.formatters import CurrencyFormatter

logger = get_logger(__name__)


def build_template_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("frontdesk", "templates"),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["display_date"] = format_display_date
    env.filters["currency"] = CurrencyFormatter.format_amount
    return env


@dataclass
class OutgoingEmail:
    """Rendered email ready for SMTP."""
    subject: str
    to: List[str]
    body_html: str
    body_text: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.subject.strip():
            raise NotificationError("Subject cannot be empty", channel="email")
        if not self.to:
            raise NotificationError("At least one recipient is required", channel="email")


class EmailService:
    """SMTP sender constructed from settings and shared through app.state."""

    def __init__(self, settings: Settings, templates: Optional[Environment] = None):
        self.settings = settings
        self.templates = templates or build_template_environment()

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.SMTP_HOST and self.settings.EMAIL_FROM_ADDRESS)

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        context = {
            "hotel_name": self.settings.HOTEL_NAME,
            "currency": self.settings.CURRENCY,
            **context,
        }
        return self.templates.get_template(template_name).render(**context)

    def _deliver(self, message: OutgoingEmail) -> None:
        """Send over SMTP; raises NotificationError on failure."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = f"{self.settings.EMAIL_FROM_NAME} <{self.settings.EMAIL_FROM_ADDRESS}>"
        msg["To"] = ", ".join(message.to)
        for key, value in message.headers.items():
            msg[key] = value

        if message.body_text:
            msg.attach(MIMEText(message.body_text, "plain"))
        msg.attach(MIMEText(message.body_html, "html"))

        try:
            with smtplib.SMTP(
                self.settings.SMTP_HOST,
                self.settings.SMTP_PORT,
                timeout=self.settings.SMTP_TIMEOUT,
            ) as server:
                if self.settings.SMTP_TLS:
                    server.starttls()
                if self.settings.SMTP_USER and self.settings.SMTP_PASSWORD:
                    server.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD)
                server.send_message(msg, to_addrs=message.to)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Failed to send email: {e}", channel="email") from e

    def send(self, message: OutgoingEmail) -> bool:
        """Send a message, logging instead of raising on failure."""
        if not self.is_configured:
            logger.warning(f"SMTP not configured, skipping email '{message.subject}'")
            return False
        try:
            self._deliver(message)
        except NotificationError as e:
            logger.error(f"Email '{message.subject}' to {message.to} failed: {e.message}")
            return False
        logger.info(f"Email '{message.subject}' sent to {len(message.to)} recipient(s)")
        return True

    def send_template(self, to: str, subject: str, template_name: str, context: Dict[str, Any]) -> bool:
        try:
            body = self.render(template_name, context)
            message = OutgoingEmail(subject=subject, to=[to], body_html=body)
        except (NotificationError, TemplateError) as e:
            logger.error(f"Could not build email '{subject}': {e}")
            return False
        return self.send(message)

    def send_staff_invitation(self, staff: Any) -> bool:
        return self.send_template(
            staff.email,
            f"Welcome to {self.settings.HOTEL_NAME}",
            "staff_invitation.html",
            {"staff": staff},
        )

    def send_booking_confirmation(self, booking: Any) -> bool:
        guest = booking.guest
        if guest is None or not guest.email:
            return False
        return self.send_template(
            guest.email,
            f"Booking confirmation {booking.booking_number}",
            "booking_confirmation.html",
            {"booking": booking, "guest": guest},
        )

    def send_checkout_receipt(self, booking: Any, summary: Dict[str, Any]) -> bool:
        guest = booking.guest
        if guest is None or not guest.email:
            return False
        return self.send_template(
            guest.email,
            f"Your receipt for booking {booking.booking_number}",
            "checkout_receipt.html",
            {"booking": booking, "guest": guest, "summary": summary},
        )


__all__ = ["EmailService", "OutgoingEmail", "build_template_environment"]
