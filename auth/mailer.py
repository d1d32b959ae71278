"""
Password-reset email delivery over SMTP.

One synchronous delivery attempt per call.  ``smtplib`` is blocking, so
the send is offloaded to a thread via ``asyncio.to_thread()`` to keep the
event loop free.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Dict, Protocol, Tuple

from auth.errors import ConfigurationError, SendError
from config.settings import Settings

logger = logging.getLogger(__name__)

# host / implicit-TLS port / STARTTLS port for providers addressable by name
_WELL_KNOWN_SERVICES: Dict[str, Tuple[str, int, int]] = {
    "gmail": ("smtp.gmail.com", 465, 587),
    "outlook": ("smtp.office365.com", 465, 587),
    "hotmail": ("smtp.office365.com", 465, 587),
    "yahoo": ("smtp.mail.yahoo.com", 465, 587),
}

RESET_SUBJECT = "Password Reset Request"


class ResetNotifier(Protocol):
    async def send_reset(self, email: str, token: str) -> Dict[str, str]: ...


def build_reset_message(sender: str, recipient: str, token: str) -> MIMEMultipart:
    message = MIMEMultipart("alternative")
    message["From"] = sender
    message["To"] = recipient
    message["Subject"] = RESET_SUBJECT

    text = (
        "Hey there,\n\n"
        "You requested to change your password.\n\n"
        f"Token: {token}\n\n"
        "Use this token to reset your password.\n"
    )
    html = (
        "<p>Hey there,</p>"
        "<p>You requested to change your password.</p>"
        f"<p>Token: {token} </p>"
        "<p>Use this token to reset your password.</p>"
    )
    message.attach(MIMEText(text, "plain"))
    message.attach(MIMEText(html, "html"))
    return message


class ResetMailer:
    """Sends reset tokens through the SMTP server described by ``Settings``."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def _server(self) -> Tuple[str, int]:
        host, port = self._settings.email_host, self._settings.email_port
        service = (self._settings.email_service or "").lower()
        if not host and service in _WELL_KNOWN_SERVICES:
            host, ssl_port, starttls_port = _WELL_KNOWN_SERVICES[service]
            port = ssl_port if self._settings.email_secure else starttls_port
        if not host:
            raise ConfigurationError("email host is not configured")
        return host, port

    @property
    def sender(self) -> str:
        return formataddr((self._settings.email_user, self._settings.email_id))

    def _deliver(self, recipient: str, token: str) -> None:
        host, port = self._server()
        message = build_reset_message(self.sender, recipient, token)
        context = ssl.create_default_context()

        if self._settings.email_secure:
            smtp = smtplib.SMTP_SSL(host, port, context=context)
        else:
            smtp = smtplib.SMTP(host, port)
        with smtp:
            if not self._settings.email_secure:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls(context=context)
                    smtp.ehlo()
            if self._settings.email_id and self._settings.email_pass:
                smtp.login(self._settings.email_id, self._settings.email_pass)
            smtp.sendmail(self._settings.email_id, [recipient], message.as_string())

    async def send_reset(self, email: str, token: str) -> Dict[str, str]:
        """Deliver *token* to *email*.  Raises ``SendError`` on any failure."""
        try:
            await asyncio.to_thread(self._deliver, email, token)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Reset email to %s failed: %s", email, exc)
            raise SendError("email could not be sent") from exc

        logger.info("Reset email sent to %s", email)
        return {"message": "email sent"}
