"""
Ordered request validators for ``POST /register``.

Each validator inspects one rule and returns ``None`` when the request passes
it, or a ``BAD_REQUEST`` outcome describing the violation. ``validate`` runs
them in order and stops at the first failure.
"""

from __future__ import annotations

import json
import re
from typing import Callable, Mapping, Optional, Sequence

from .models import Outcome, RegistrationOutcome, RegistrationRequest

# Intentionally loose: local@label.label.tld with a tld of two or more chars.
EMAIL_PATTERN = re.compile(r"[\w.-]+@([\w-]+\.)+[\w-]{2,}", re.ASCII)

MISSING_FIELDS_MESSAGE = "Missing required fields: name, email, specialization."
INVALID_EMAIL_MESSAGE = "Invalid email address."

Validator = Callable[[RegistrationRequest, Mapping[str, object]], Optional[RegistrationOutcome]]


def is_valid_email(email: object) -> bool:
    return isinstance(email, str) and EMAIL_PATTERN.fullmatch(email) is not None


def is_valid_specialization(specialization: object, catalog: Mapping[str, object]) -> bool:
    return isinstance(specialization, str) and specialization in catalog


def _display(value: object) -> str:
    # Echo non-string JSON values as JSON, not as Python reprs.
    return value if isinstance(value, str) else json.dumps(value)


def check_required_fields(request: RegistrationRequest, catalog: Mapping[str, object]) -> Optional[RegistrationOutcome]:
    if not request.name or not isinstance(request.name, str) or not request.email or not request.specialization:
        return RegistrationOutcome.failure(Outcome.BAD_REQUEST, MISSING_FIELDS_MESSAGE)
    return None


def check_email(request: RegistrationRequest, catalog: Mapping[str, object]) -> Optional[RegistrationOutcome]:
    if not is_valid_email(request.email):
        return RegistrationOutcome.failure(Outcome.BAD_REQUEST, INVALID_EMAIL_MESSAGE)
    return None


def check_specialization(request: RegistrationRequest, catalog: Mapping[str, object]) -> Optional[RegistrationOutcome]:
    if not is_valid_specialization(request.specialization, catalog):
        return RegistrationOutcome.failure(
            Outcome.BAD_REQUEST,
            f"Invalid specialization: {_display(request.specialization)}",
        )
    return None


VALIDATORS: Sequence[Validator] = (
    check_required_fields,
    check_email,
    check_specialization,
)


def validate(
    request: RegistrationRequest,
    catalog: Mapping[str, object],
    validators: Sequence[Validator] = VALIDATORS,
) -> Optional[RegistrationOutcome]:
    """Return the first validation failure, or ``None`` if the request is valid."""
    for validator in validators:
        failure = validator(request, catalog)
        if failure is not None:
            return failure
    return None
