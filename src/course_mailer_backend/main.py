from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .configuration import Settings, load_settings
from .errors import ConfigurationError
from .mailer import MailTransport, SmtpMailTransport
from .models import RegistrationRequest, RegistrationResult
from .registration import ExistsCheck, RegistrationHandler

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [course-mailer] %(levelname)s %(name)s: %(message)s"

HEALTH_MESSAGE = "API Running ✔"

router = APIRouter()


def get_registration_handler(request: Request) -> RegistrationHandler:
    return request.app.state.registration_handler


@router.get("/", response_class=PlainTextResponse)
def healthcheck() -> str:
    return HEALTH_MESSAGE


@router.post("/register", response_model=RegistrationResult)
async def register(request: Request, handler: RegistrationHandler = Depends(get_registration_handler)) -> JSONResponse:
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    # Anything other than a JSON object is treated as an empty submission.
    registration = RegistrationRequest.model_validate(payload if isinstance(payload, dict) else {})
    outcome = await handler.register(registration)
    return JSONResponse(status_code=outcome.status_code, content=outcome.result.model_dump())


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[MailTransport] = None,
    exists: Optional[ExistsCheck] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    With no arguments, settings are read from the environment and mail goes
    out over SMTP; tests pass their own settings and transport.

    Raises:
        ConfigurationError: If settings are read from the environment and
            required values are missing
    """
    if settings is None:
        settings = load_settings()

    app = FastAPI(title="Course Mailer API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.registration_handler = RegistrationHandler(
        catalog=settings.catalog,
        transport=transport or SmtpMailTransport(settings),
        signature=settings.signature,
        exists=exists,
    )
    app.include_router(router)
    return app


def run() -> None:
    """Console entry point: load settings, fail fast if misconfigured, serve."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logger.error(str(exc))
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)
    logger.info(f"Serving {len(settings.catalog)} specializations; CORS origin {settings.cors_origin}")
    logger.info(f"Mail transport: SMTP {settings.smtp_host}:{settings.smtp_port} as {settings.gmail_user}")

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
