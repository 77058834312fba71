"""
Registration handling: validate, resolve the course PDF, send it.

``RegistrationHandler.register`` is the whole request pipeline. It never
raises for per-request problems; every path ends in a ``RegistrationOutcome``
whose ``outcome`` the HTTP layer maps to a status code.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Awaitable, Callable, Mapping, Optional

from .mailer import MailTransport, compose_course_mail
from .models import Outcome, RegistrationOutcome, RegistrationRequest
from .utils import path_exists
from .validation import validate

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Email sent successfully!"

ExistsCheck = Callable[[Path], Awaitable[bool]]


def _not_found(specialization: str) -> RegistrationOutcome:
    return RegistrationOutcome.failure(Outcome.NOT_FOUND, f"PDF for {specialization} not found.")


class RegistrationHandler:
    """
    Stateless handler for course registrations.

    Args:
        catalog: Read-only mapping of specialization name to PDF path
        transport: Mail transport used to deliver the course PDF
        signature: Name the message is signed with
        exists: Coroutine reporting whether a PDF path exists
    """

    def __init__(
        self,
        catalog: Mapping[str, Path],
        transport: MailTransport,
        signature: str,
        exists: Optional[ExistsCheck] = None,
    ):
        self.catalog = catalog
        self.transport = transport
        self.signature = signature
        self.exists = exists or path_exists

    async def register(self, request: RegistrationRequest) -> RegistrationOutcome:
        failure = validate(request, self.catalog)
        if failure is not None:
            logger.info(f"Rejected registration: {failure.result.message}")
            return failure

        specialization: str = request.specialization
        pdf_path = self.catalog[specialization]

        try:
            if not await self.exists(pdf_path):
                logger.warning(f"PDF for {specialization!r} missing at {pdf_path}")
                return _not_found(specialization)

            mail = compose_course_mail(
                name=request.name,
                email=request.email,
                specialization=specialization,
                pdf_path=pdf_path,
                signature=self.signature,
            )
            await self.transport.send(mail)
        except FileNotFoundError:
            logger.warning(f"PDF for {specialization!r} not found at {pdf_path}")
            return _not_found(specialization)
        except Exception as exc:  # noqa: BLE001
            logger.exception(f"MAIL ERROR sending {specialization!r} course PDF ({pdf_path}) to {request.email}")
            reason = str(exc) or "Unknown error."
            return RegistrationOutcome.failure(Outcome.SERVER_ERROR, f"Email send failed: {reason}")

        logger.info(f"Registration for {specialization!r} mailed to {request.email}")
        return RegistrationOutcome.ok(SUCCESS_MESSAGE)
