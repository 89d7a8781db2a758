from frontdesk.services.notification.email_service import EmailService
from frontdesk.services.notification.whatsapp_service import WhatsAppResult, WhatsAppService

__all__ = ["EmailService", "WhatsAppService", "WhatsAppResult"]
