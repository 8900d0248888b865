"""Mailer — outgoing SMTP email and the account verification message.

Invariants:
    - Every message carries a plain-text body and an HTML alternative
    - send() raises EmailDeliveryError; send_verification_email_safely() never raises
    - Verification links carry the transport (base64) form of the code, URL-encoded

Design Decisions:
    - aiosmtplib: delivery runs on the event loop without a thread pool
    - Fire-and-forget through FastAPI BackgroundTasks: the response is sent first
"""

import logging
from dataclasses import dataclass
from email.message import EmailMessage
from html import escape
from urllib.parse import urlencode

import aiosmtplib

from directory_api.core.errors import EmailDeliveryError

logger = logging.getLogger(__name__)

VERIFY_SUBJECT = "Verify Your Account"


@dataclass(frozen=True)
class MailerSettings:
    host: str
    port: int = 587
    secure: bool = False
    require_tls: bool = True
    username: str | None = None
    password: str | None = None
    sender: str = "info@localhost"


class Mailer:
    """Sends email through one configured SMTP server."""

    def __init__(self, settings: MailerSettings):
        self.settings = settings

    def build_message(
        self, recipient: str, subject: str, text: str, html: str,
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.settings.sender
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content(text)
        message.add_alternative(html, subtype="html")
        return message

    async def send(
        self, recipient: str, subject: str, text: str, html: str,
    ) -> None:
        message = self.build_message(recipient, subject, text, html)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.settings.host,
                port=self.settings.port,
                username=self.settings.username,
                password=self.settings.password,
                use_tls=self.settings.secure,
                start_tls=self.settings.require_tls and not self.settings.secure,
            )
        except aiosmtplib.SMTPException as e:
            raise EmailDeliveryError(str(e), recipient) from e
        logger.info("Email sent", extra={"recipient": recipient})


def build_verification_url(
    public_api_url: str, api_prefix: str, email_address: str, code: str,
) -> str:
    query = urlencode({"emailAddress": email_address, "code": code})
    return f"{public_api_url.rstrip('/')}{api_prefix}/verify?{query}"


def render_verification_email(url: str) -> tuple[str, str]:
    """(text, html) bodies for the verification message."""
    text = (
        "To verify your account, please click the following link or paste it "
        f"into your web browser's address bar:\n\n    <{url}>"
    )
    html = (
        "<p>To verify your account, please click the button below:</p>"
        f'<a href="{escape(url)}"><button>Verify Account</button></a>'
    )
    return text, html


async def send_verification_email_safely(
    mailer: Mailer, email_address: str, verification_url: str,
) -> None:
    """Background task: delivery failures are logged, never raised."""
    text, html = render_verification_email(verification_url)
    try:
        await mailer.send(email_address, VERIFY_SUBJECT, text, html)
    except Exception as e:
        logger.error(
            f"Verification email failed: {e}",
            exc_info=True,
            extra={"recipient": email_address},
        )
