"""
Tests for message composition and the aiosmtplib transport.
"""

import asyncio
from dataclasses import replace

import aiosmtplib
import pytest

from course_mailer_backend import mailer
from course_mailer_backend.errors import MailDeliveryError
from course_mailer_backend.mailer import SmtpMailTransport, build_message, compose_course_mail

from conftest import PDF_CONTENT


class FakeSMTP:
    """Stands in for aiosmtplib.SMTP and records what the transport does."""

    instances = []
    login_error = None

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.logins = []
        self.messages = []
        FakeSMTP.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def login(self, username, password):
        if FakeSMTP.login_error is not None:
            raise FakeSMTP.login_error
        self.logins.append((username, password))

    async def send_message(self, message):
        self.messages.append(message)


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.login_error = None
    monkeypatch.setattr(mailer.aiosmtplib, "SMTP", FakeSMTP)
    return FakeSMTP


@pytest.fixture
def course_mail(pdf_dir):
    return compose_course_mail(
        name="Ada Lovelace",
        email="ada@example.com",
        specialization="Fine Arts",
        pdf_path=pdf_dir / "Fine_Arts_Course.pdf",
        signature="Vijay",
    )


class TestComposition:
    def test_compose_course_mail(self, course_mail, pdf_dir):
        assert course_mail.recipient == "ada@example.com"
        assert course_mail.subject == "Course Information - Fine Arts"
        assert course_mail.attachment_filename == "Fine_Arts.pdf"
        assert course_mail.attachment_path == pdf_dir / "Fine_Arts_Course.pdf"
        assert "Hello <b>Ada Lovelace</b>" in course_mail.html_body
        assert "Hello Ada Lovelace" in course_mail.text_body
        assert "Vijay" in course_mail.text_body

    def test_build_message(self, course_mail):
        message = build_message(course_mail, "courses@example.com", PDF_CONTENT, sender_name="Vijay")

        assert message["To"] == "ada@example.com"
        assert message["From"] == "Vijay <courses@example.com>"
        assert message["Subject"] == "Course Information - Fine Arts"
        assert message["Message-ID"]

        attachments = list(message.iter_attachments())
        assert len(attachments) == 1
        assert attachments[0].get_filename() == "Fine_Arts.pdf"
        assert attachments[0].get_content_type() == "application/pdf"
        assert attachments[0].get_content() == PDF_CONTENT

        html_part = message.get_body(preferencelist=("html",))
        assert "Ada Lovelace" in html_part.get_content()


class TestSmtpMailTransport:
    def test_sends_over_implicit_tls(self, settings, course_mail, fake_smtp):
        asyncio.run(SmtpMailTransport(settings).send(course_mail))

        (client,) = fake_smtp.instances
        assert client.kwargs["hostname"] == "smtp.gmail.com"
        assert client.kwargs["port"] == 465
        assert client.kwargs["use_tls"] is True
        assert client.kwargs["timeout"] == 60.0
        assert client.logins == [("courses@example.com", "app-password")]
        (message,) = client.messages
        assert message["To"] == "ada@example.com"

    def test_starttls_on_submission_port(self, settings, course_mail, fake_smtp):
        asyncio.run(SmtpMailTransport(replace(settings, smtp_port=587)).send(course_mail))

        (client,) = fake_smtp.instances
        assert client.kwargs["use_tls"] is False
        assert client.kwargs["start_tls"] is True

    def test_smtp_response_error_is_wrapped(self, settings, course_mail, fake_smtp):
        fake_smtp.login_error = aiosmtplib.SMTPAuthenticationError(535, "Username and Password not accepted")

        with pytest.raises(MailDeliveryError, match="535 Username and Password not accepted"):
            asyncio.run(SmtpMailTransport(settings).send(course_mail))

    def test_connection_error_is_wrapped(self, settings, course_mail, fake_smtp):
        fake_smtp.login_error = aiosmtplib.SMTPServerDisconnected("Unexpected EOF received")

        with pytest.raises(MailDeliveryError, match="Unexpected EOF received"):
            asyncio.run(SmtpMailTransport(settings).send(course_mail))

    def test_missing_attachment_raises_file_not_found(self, settings, course_mail, fake_smtp):
        missing = replace(course_mail, attachment_path=course_mail.attachment_path.with_name("gone.pdf"))

        with pytest.raises(FileNotFoundError):
            asyncio.run(SmtpMailTransport(settings).send(missing))
        assert fake_smtp.instances == []
