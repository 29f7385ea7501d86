"""SMTP delivery for notification e-mails."""
from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from html import escape
from typing import Optional

from resume_chat.config import Settings

LOGGER = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 20


class MailerError(RuntimeError):
    """Raised when an e-mail cannot be delivered."""


class Mailer:
    """Sends plain-text e-mails with an optional HTML alternative."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def configured(self) -> bool:
        return self._settings.email_configured

    def send(self, recipient: str, subject: str, body: str, html: Optional[str] = None) -> None:
        """Deliver a message or raise :class:`MailerError`."""

        if not self.configured:
            raise MailerError("SMTP is not configured: set EMAIL_HOST, EMAIL_USER and EMAIL_PASS.")

        settings = self._settings
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = formataddr((settings.email_sender_name, settings.email_user or ""))
        message["To"] = recipient
        message.set_content(body)
        if html:
            message.add_alternative(html, subtype="html")

        context = self._tls_context()
        try:
            if settings.email_port == 465:
                with smtplib.SMTP_SSL(
                    settings.email_host,
                    settings.email_port,
                    timeout=SMTP_TIMEOUT_SECONDS,
                    context=context,
                ) as server:
                    server.login(settings.email_user, settings.email_pass)
                    server.send_message(message)
            else:
                with smtplib.SMTP(
                    settings.email_host, settings.email_port, timeout=SMTP_TIMEOUT_SECONDS
                ) as server:
                    server.ehlo()
                    if server.has_extn("starttls"):
                        server.starttls(context=context)
                        server.ehlo()
                    server.login(settings.email_user, settings.email_pass)
                    server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            LOGGER.error("smtp delivery failed", extra={"recipient": recipient, "detail": str(exc)})
            raise MailerError(f"Failed to send email: {exc}") from exc

        LOGGER.info("email sent", extra={"recipient": recipient})

    def notify(self, recipient: str, subject: str, body: str, html: Optional[str] = None) -> bool:
        """Best-effort delivery: returns ``False`` when skipped or failed."""

        if not self.configured:
            LOGGER.info("Email not configured, skipping notification", extra={"recipient": recipient})
            return False
        try:
            self.send(recipient, subject, body, html)
        except MailerError:
            LOGGER.exception("Failed to send notification email", extra={"recipient": recipient})
            return False
        return True

    def notify_upload(self, recipient: str, cv_name: str) -> bool:
        safe_name = escape(cv_name)
        return self.notify(
            recipient,
            f"CV Processed: {cv_name}",
            f'Your CV "{cv_name}" has been successfully processed and is ready for chat!',
            html=(
                "<h2>CV Processed Successfully!</h2>"
                f'<p>Your CV "<strong>{safe_name}</strong>" has been successfully processed '
                "and is ready for chat.</p>"
                "<p>You can now ask questions about your CV using our AI chat feature.</p>"
                f"<p>Best regards,<br>{escape(self._settings.email_sender_name)}</p>"
            ),
        )

    def _tls_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        if not self._settings.email_verify_tls:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context
