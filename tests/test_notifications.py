from __future__ import annotations

import smtplib
from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import requests

from frontdesk.core.exceptions import NotificationError
from frontdesk.services.notification.email_service import EmailService, OutgoingEmail
from frontdesk.services.notification.whatsapp_service import WhatsAppService, normalize_phone_number

SETTLEMENT = {
    "date": date(2024, 3, 9),
    "room_revenue": 12000,
    "service_revenue": 800,
    "total_revenue": 12800,
    "advance_collections": 5000,
    "outstanding": 2300,
    "collections": {"cash": 4000, "card": 3000, "upi": 2500, "bank_transfer": 0},
    "total_collections": 9500,
    "occupancy": {"occupied": 12, "total": 20, "rate": 60.0},
    "checkins": 4,
    "checkouts": 3,
}


@pytest.fixture
def smtp_settings(settings):
    return settings.model_copy(update={
        "SMTP_HOST": "smtp.example.com",
        "EMAIL_FROM_ADDRESS": "desk@example.com",
        "SMTP_USER": "desk",
        "SMTP_PASSWORD": "secret",
    })


@pytest.fixture
def whatsapp_settings(settings):
    return settings.model_copy(update={
        "WHATSAPP_PHONE_NUMBER_ID": "12345",
        "WHATSAPP_ACCESS_TOKEN": "token",
    })


class TestEmailService:
    def test_unconfigured_smtp_skips_send(self, settings):
        service = EmailService(settings)
        assert not service.is_configured
        assert service.send(OutgoingEmail(subject="Hi", to=["a@example.com"], body_html="<p>x</p>")) is False

    def test_outgoing_email_needs_recipient(self):
        with pytest.raises(NotificationError, match="At least one recipient"):
            OutgoingEmail(subject="Hi", to=[], body_html="")

    def test_staff_invitation_is_rendered_and_sent(self, smtp_settings, monkeypatch):
        smtp = MagicMock()
        monkeypatch.setattr(smtplib, "SMTP", smtp)
        staff = SimpleNamespace(name="Meera", email="meera@example.com", role="manager", department=None)

        assert EmailService(smtp_settings).send_staff_invitation(staff) is True

        server = smtp.return_value.__enter__.return_value
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("desk", "secret")
        message = server.send_message.call_args.args[0]
        assert message["To"] == "meera@example.com"
        assert "Welcome" in message["Subject"]

    def test_smtp_failure_returns_false(self, smtp_settings, monkeypatch):
        smtp = MagicMock()
        smtp.return_value.__enter__.return_value.send_message.side_effect = smtplib.SMTPException("boom")
        monkeypatch.setattr(smtplib, "SMTP", smtp)

        message = OutgoingEmail(subject="Hi", to=["a@example.com"], body_html="<p>x</p>")
        assert EmailService(smtp_settings).send(message) is False

    def test_booking_confirmation_without_guest_email(self, smtp_settings):
        booking = SimpleNamespace(guest=SimpleNamespace(email=None), booking_number="BK1")
        assert EmailService(smtp_settings).send_booking_confirmation(booking) is False


class TestNormalizePhoneNumber:
    @pytest.mark.parametrize("raw", ["9876543210", "+91 98765 43210", "09876543210", "(98765) 43210"])
    def test_indian_mobiles(self, raw):
        assert normalize_phone_number(raw) == "919876543210"

    def test_other_numbers_keep_digits(self):
        assert normalize_phone_number("+44 7700 900123") == "447700900123"


class TestWhatsAppService:
    def test_unconfigured(self, settings):
        result = WhatsAppService(settings, session=MagicMock()).send_text("9876543210", "hi")
        assert result.success is False
        assert result.error == "WhatsApp is not configured"

    def test_send_text(self, whatsapp_settings):
        session = MagicMock()
        session.post.return_value.json.return_value = {"messages": [{"id": "wamid.1"}]}

        result = WhatsAppService(whatsapp_settings, session=session).send_text("98765 43210", "hello")

        assert result.success is True
        assert result.message_id == "wamid.1"
        kwargs = session.post.call_args.kwargs
        assert session.post.call_args.args[0].endswith("/12345/messages")
        assert kwargs["json"]["to"] == "919876543210"
        assert kwargs["headers"] == {"Authorization": "Bearer token"}

    def test_network_error_is_reported(self, whatsapp_settings):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("unreachable")

        result = WhatsAppService(whatsapp_settings, session=session).send_text("9876543210", "hello")

        assert result.success is False
        assert "unreachable" in result.error
        assert result.to_dict()["success"] is False

    def test_invalid_phone(self, whatsapp_settings):
        result = WhatsAppService(whatsapp_settings, session=MagicMock()).send_text("call me", "hello")
        assert result.success is False
        assert result.error.startswith("Invalid phone number")

    def test_day_settlement_message(self, settings):
        text = WhatsAppService(settings, session=MagicMock()).format_day_settlement_message(SETTLEMENT)
        assert "Day Settlement" in text
        assert "Date: 09/03/2024" in text
        assert "Total revenue: ₹12,800.00" in text
        assert "Bank Transfer: ₹0.00" in text
        assert "Occupancy: 12/20 (60.0%)" in text
