"""
Pytest configuration and fixtures for Course Mailer Backend tests.
"""

import pytest
from fastapi.testclient import TestClient

from course_mailer_backend.configuration import Settings, load_catalog
from course_mailer_backend.main import create_app
from course_mailer_backend.models import OutgoingMail

# Minimal PDF that is technically valid
PDF_CONTENT = b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [3 0 R] /Count 1 >>
endobj
3 0 obj
<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] >>
endobj
trailer
<< /Size 4 /Root 1 0 R >>
%%EOF"""

# Only these catalog entries have a PDF on disk in tests
AVAILABLE_PDFS = ("CSE_Course.pdf", "Fine_Arts_Course.pdf")


class RecordingTransport:
    """Mail transport double that records every message instead of sending it."""

    def __init__(self):
        self.sent: list[OutgoingMail] = []

    async def send(self, mail: OutgoingMail) -> None:
        self.sent.append(mail)


class FailingTransport:
    """Mail transport double that raises the given exception on every send."""

    def __init__(self, exc: BaseException):
        self.exc = exc
        self.calls = 0

    async def send(self, mail: OutgoingMail) -> None:
        self.calls += 1
        raise self.exc


@pytest.fixture
def pdf_dir(tmp_path):
    """Create a PDF directory holding a subset of the course PDFs."""
    directory = tmp_path / "pdfs"
    directory.mkdir()
    for filename in AVAILABLE_PDFS:
        (directory / filename).write_bytes(PDF_CONTENT)
    return directory


@pytest.fixture
def settings(pdf_dir):
    return Settings(
        gmail_user="courses@example.com",
        gmail_pass="app-password",
        catalog=load_catalog(pdf_dir),
        cors_origin="https://form.example.com",
    )


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def client(settings, transport):
    """Create a test client wired to the recording transport."""
    return TestClient(create_app(settings, transport=transport))


@pytest.fixture
def make_client(settings):
    """Build a test client around an arbitrary transport."""

    def _make(mail_transport):
        return TestClient(create_app(settings, transport=mail_transport))

    return _make


@pytest.fixture
def valid_payload():
    return {
        "name": "Ada Lovelace",
        "email": "ada.lovelace@example.com",
        "specialization": "Computer Science Engineering",
    }
