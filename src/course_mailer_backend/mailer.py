"""
Outbound mail: message composition and the SMTP transport.

The registration handler only depends on the ``MailTransport`` protocol, a
single ``send`` coroutine, so tests can substitute a recording double and the
SMTP details stay here.
"""

from __future__ import annotations

import html
import logging
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from pathlib import Path
from typing import Protocol

import aiosmtplib

from .configuration import Settings
from .errors import MailDeliveryError
from .models import OutgoingMail
from .utils import attachment_filename, read_bytes

logger = logging.getLogger(__name__)

HTML_TEMPLATE = """\
<h2>&#127891; Registration Successful!</h2>
<p>Hello <b>{name}</b>,</p>
<p>Your course PDF is attached.</p>
<p>Thanks,<br>{signature}</p>
"""

TEXT_TEMPLATE = """\
Registration Successful!

Hello {name},

Your course PDF is attached.

Thanks,
{signature}
"""


class MailTransport(Protocol):
    async def send(self, mail: OutgoingMail) -> None:
        """Deliver ``mail`` or raise describing why it could not be sent."""
        ...


def compose_course_mail(name: str, email: str, specialization: str, pdf_path: Path, signature: str) -> OutgoingMail:
    return OutgoingMail(
        recipient=email,
        subject=f"Course Information - {specialization}",
        text_body=TEXT_TEMPLATE.format(name=name, signature=signature),
        html_body=HTML_TEMPLATE.format(name=html.escape(name), signature=html.escape(signature)),
        attachment_path=pdf_path,
        attachment_filename=attachment_filename(specialization),
    )


def build_message(mail: OutgoingMail, sender: str, attachment: bytes, sender_name: str = "") -> EmailMessage:
    """Render ``mail`` as a multipart message with the PDF attached."""
    message = EmailMessage()
    message["From"] = formataddr((sender_name, sender)) if sender_name else sender
    message["To"] = mail.recipient
    message["Subject"] = mail.subject
    message["Message-ID"] = make_msgid()
    message.set_content(mail.text_body)
    message.add_alternative(mail.html_body, subtype="html")
    message.add_attachment(
        attachment,
        maintype="application",
        subtype="pdf",
        filename=mail.attachment_filename,
    )
    return message


class SmtpMailTransport:
    """
    Sends mail through an authenticated SMTP server with aiosmtplib.

    Port 465 uses implicit TLS and port 587 STARTTLS; other ports let the
    client upgrade opportunistically. Each ``send`` opens its own connection.
    """

    def __init__(self, settings: Settings):
        self.hostname = settings.smtp_host
        self.port = settings.smtp_port
        self.timeout = settings.smtp_timeout
        self.username = settings.gmail_user
        self._password = settings.gmail_pass
        self.sender_name = settings.signature

    def _client(self) -> aiosmtplib.SMTP:
        return aiosmtplib.SMTP(
            hostname=self.hostname,
            port=self.port,
            timeout=self.timeout,
            use_tls=self.port == 465,
            start_tls=True if self.port == 587 else None,
        )

    async def send(self, mail: OutgoingMail) -> None:
        attachment = await read_bytes(mail.attachment_path)
        message = build_message(mail, self.username, attachment, self.sender_name)

        try:
            async with self._client() as smtp:
                await smtp.login(self.username, self._password)
                await smtp.send_message(message)
        except aiosmtplib.SMTPResponseException as exc:
            raise MailDeliveryError(f"{exc.code} {exc.message}") from exc
        except aiosmtplib.SMTPException as exc:
            raise MailDeliveryError(str(exc) or exc.__class__.__name__) from exc

        logger.info(f"Sent {mail.attachment_filename} to {mail.recipient} ({message['Message-ID']})")
