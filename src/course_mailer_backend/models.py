from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict


class Outcome(str, Enum):
    OK = "ok"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    Outcome.OK: 200,
    Outcome.BAD_REQUEST: 400,
    Outcome.NOT_FOUND: 404,
    Outcome.SERVER_ERROR: 500,
}


class RegistrationRequest(BaseModel):
    # Loosely typed so presence and type problems surface as 400s from the
    # validators instead of 422s from schema validation.
    model_config = ConfigDict(extra="ignore")

    name: Any = None
    email: Any = None
    specialization: Any = None


class RegistrationResult(BaseModel):
    success: bool
    message: str


@dataclass(frozen=True)
class RegistrationOutcome:
    outcome: Outcome
    result: RegistrationResult

    @classmethod
    def ok(cls, message: str) -> "RegistrationOutcome":
        return cls(Outcome.OK, RegistrationResult(success=True, message=message))

    @classmethod
    def failure(cls, outcome: Outcome, message: str) -> "RegistrationOutcome":
        return cls(outcome, RegistrationResult(success=False, message=message))

    @property
    def status_code(self) -> int:
        return self.outcome.status_code


@dataclass(frozen=True)
class OutgoingMail:
    recipient: str
    subject: str
    text_body: str
    html_body: str
    attachment_path: Path
    attachment_filename: str
