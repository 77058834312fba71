"""
Startup configuration for the course mailer backend.

Everything the request path needs is resolved here once, at process start:

- Mail credentials and SMTP endpoint from the environment
- Listening address, allowed CORS origin and logging level
- The specialization catalog, read from the packaged ``catalog.yaml``

The resulting ``Settings`` object is immutable and is handed to the
application factory explicitly; request handlers never read ``os.environ``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import yaml
from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException

from .errors import CatalogError, ConfigurationError

CATALOG_PATH = Path(__file__).resolve().parent / "config/catalog.yaml"

REQUIRED_CREDENTIALS = ("GMAIL_USER", "GMAIL_PASS")

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 465
DEFAULT_SMTP_TIMEOUT = 60.0
DEFAULT_CORS_ORIGIN = "https://form1-bice.vercel.app"
DEFAULT_PDF_DIR = "pdfs"
DEFAULT_SIGNATURE = "Vijay"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration, constructed once by ``load_settings``.

    Attributes:
        gmail_user: Account used to authenticate and as the sender address
        gmail_pass: Password or app password for ``gmail_user``
        catalog: Read-only mapping of specialization name to PDF path
        port: TCP port the HTTP server listens on
        host: Interface the HTTP server binds to
        smtp_host: SMTP server hostname
        smtp_port: SMTP server port (465 implicit TLS, 587 STARTTLS)
        smtp_timeout: Seconds before an SMTP operation is abandoned
        cors_origin: The single browser origin allowed to call the API
        signature: Name used to sign outgoing messages
        log_level: Root logging level name
    """

    gmail_user: str
    gmail_pass: str = field(repr=False)
    catalog: Mapping[str, Path]
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    smtp_host: str = DEFAULT_SMTP_HOST
    smtp_port: int = DEFAULT_SMTP_PORT
    smtp_timeout: float = DEFAULT_SMTP_TIMEOUT
    cors_origin: str = DEFAULT_CORS_ORIGIN
    signature: str = DEFAULT_SIGNATURE
    log_level: str = "INFO"


@lru_cache(maxsize=4)
def _load_catalog_config(catalog_path: Path) -> DictConfig:
    if not catalog_path.exists():
        raise CatalogError(f"Specialization catalog not found at {catalog_path}")
    try:
        return OmegaConf.load(catalog_path)
    except (OmegaConfBaseException, yaml.YAMLError) as exc:
        raise CatalogError(f"Could not parse specialization catalog {catalog_path}: {exc}") from exc


def load_catalog(pdf_dir: Path, catalog_path: Path = CATALOG_PATH) -> Mapping[str, Path]:
    """
    Build the immutable specialization catalog.

    Paths are resolved against ``pdf_dir`` but are not checked for existence;
    a missing PDF is reported per request, not at startup.

    Raises:
        CatalogError: If the catalog file is missing, malformed or empty
    """
    config = _load_catalog_config(Path(catalog_path))
    if not isinstance(config, DictConfig):
        raise CatalogError(f"Specialization catalog {catalog_path} must be a mapping")
    entries = OmegaConf.to_container(config, resolve=True).get("specializations")  # type: ignore[union-attr]
    if not isinstance(entries, dict) or not entries:
        raise CatalogError(f"No specializations defined in {catalog_path}")

    catalog: dict[str, Path] = {}
    for name, filename in entries.items():
        if not isinstance(filename, str) or not filename:
            raise CatalogError(f"Specialization {name!r} has no PDF filename")
        catalog[str(name)] = pdf_dir / filename
    return MappingProxyType(catalog)


def _read_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from exc


def _read_float(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from exc


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    catalog_path: Path = CATALOG_PATH,
) -> Settings:
    """
    Read settings from ``environ`` (defaults to ``os.environ``).

    Raises:
        ConfigurationError: If a mail credential is absent or a numeric
            value cannot be parsed
        CatalogError: If the specialization catalog cannot be loaded
    """
    env = os.environ if environ is None else environ

    missing = [key for key in REQUIRED_CREDENTIALS if not env.get(key, "").strip()]
    if missing:
        raise ConfigurationError(
            "Missing Gmail credentials in environment variables "
            f"({' and '.join(REQUIRED_CREDENTIALS)}); not set: {', '.join(missing)}"
        )

    log_level = (env.get("LOG_LEVEL") or "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        raise ConfigurationError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    pdf_dir = Path(env.get("PDF_DIR") or DEFAULT_PDF_DIR).resolve()

    return Settings(
        gmail_user=env["GMAIL_USER"].strip(),
        gmail_pass=env["GMAIL_PASS"],
        catalog=load_catalog(pdf_dir, catalog_path),
        port=_read_int(env, "PORT", DEFAULT_PORT),
        host=env.get("HOST") or DEFAULT_HOST,
        smtp_host=env.get("SMTP_HOST") or DEFAULT_SMTP_HOST,
        smtp_port=_read_int(env, "SMTP_PORT", DEFAULT_SMTP_PORT),
        smtp_timeout=_read_float(env, "SMTP_TIMEOUT", DEFAULT_SMTP_TIMEOUT),
        cors_origin=env.get("CORS_ORIGIN") or DEFAULT_CORS_ORIGIN,
        signature=env.get("MAIL_SIGNATURE") or DEFAULT_SIGNATURE,
        log_level=log_level,
    )
