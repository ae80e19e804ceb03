"""Forward contact form messages by email."""

import logging
import smtplib
from email.message import EmailMessage

from sdgclub.core.config import settings
from sdgclub.schemas.feedback import ContactMessage
from sdgclub.services.errors import EmailDeliveryFailed, EmailNotConfigured

logger = logging.getLogger(__name__)


def build_contact_email(message: ContactMessage) -> EmailMessage:
    email = EmailMessage()
    email["Subject"] = f"[Contact] {message.subject}"
    email["From"] = settings.SMTP_SENDER
    email["To"] = settings.CONTACT_RECIPIENT
    email["Reply-To"] = f"{message.name} <{message.email}>"
    email.set_content(
        f"New message from the website contact form\n\n"
        f"Name: {message.name}\n"
        f"Email: {message.email}\n"
        f"Subject: {message.subject}\n\n"
        f"{message.message}\n"
    )
    return email


def send_contact_email(message: ContactMessage) -> None:
    """Deliver a contact form submission to the club inbox."""
    if not settings.SMTP_HOST:
        raise EmailNotConfigured("Email delivery is not configured")

    email = build_contact_email(message)
    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=15) as server:
            server.starttls()
            if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
                server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            server.send_message(email)
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("Failed to send contact email from %s: %s", message.email, exc)
        raise EmailDeliveryFailed("Failed to send message. Please try again.") from exc

    logger.info("Forwarded contact message from %s", message.email)
