"""SMTP email sender service."""

from __future__ import annotations

import logging
import smtplib
from collections.abc import Iterable
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from brokerage.core.config import Config, get_config
from brokerage.utils.validators import clean_email_html, is_valid_email

logger = logging.getLogger(__name__)

Attachment = tuple[str, str, bytes]


class EmailSender:
    """Transactional email over SMTP. Returns False instead of raising."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or get_config()

    def _build_message(self, to_email: str, subject: str, html_body: str) -> MIMEMultipart:
        message = MIMEMultipart("mixed")
        message["Subject"] = subject
        message["From"] = self.config.MAIL_SENDER
        message["To"] = to_email
        message.attach(MIMEText(clean_email_html(html_body), "html"))
        return message

    def _deliver(self, to_email: str, message: MIMEMultipart) -> bool:
        if not is_valid_email(to_email):
            logger.warning("email.invalid_recipient", extra={"event": "email.invalid_recipient", "to_email": to_email})
            return False

        if self.config.MAIL_SANDBOX_MODE:
            logger.info("email.sandbox.sent", extra={"event": "email.sandbox.sent", "to_email": to_email})
            return True

        if not self.config.SMTP_SERVER:
            logger.warning("email.smtp_not_configured", extra={"event": "email.smtp_not_configured"})
            return False

        try:
            with smtplib.SMTP(self.config.SMTP_SERVER, self.config.SMTP_PORT, timeout=30) as server:
                server.starttls()
                if self.config.SMTP_USERNAME:
                    server.login(self.config.SMTP_USERNAME, self.config.SMTP_PASSWORD or "")
                server.send_message(message)
            logger.info("email.sent", extra={"event": "email.sent", "to_email": to_email})
            return True
        except Exception:
            logger.exception("email.send_failed", extra={"event": "email.send_failed", "to_email": to_email})
            return False

    def send_email(self, to_email: str, subject: str, html_body: str) -> bool:
        return self._deliver(to_email, self._build_message(to_email, subject, html_body))

    def send_email_with_attachments(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        attachments: Iterable[Attachment],
    ) -> bool:
        message = self._build_message(to_email, subject, html_body)
        for filename, content_type, data in attachments:
            subtype = content_type.split("/", 1)[-1] if "/" in content_type else "octet-stream"
            part = MIMEApplication(data, _subtype=subtype)
            part.add_header("Content-Disposition", "attachment", filename=filename)
            message.attach(part)
        return self._deliver(to_email, message)
