"""Startup validation and bootstrap helpers."""

from __future__ import annotations

import logging

from brokerage.core.config import get_config
from brokerage.core.logging_config import configure_logging
from brokerage.database.db import get_active_database_url, verify_database_connection

logger = logging.getLogger(__name__)


def validate_startup_config() -> None:
    """Fail-fast config and connectivity checks."""
    config = get_config()
    active_database_url = get_active_database_url()
    if not verify_database_connection():
        raise RuntimeError("Database connectivity check failed.")

    if config.is_production and active_database_url.startswith("sqlite"):
        logger.warning(
            "startup.production.sqlite_detected",
            extra={"event": "startup.production.sqlite_detected"},
        )
    if not config.MAIL_SANDBOX_MODE and not config.SMTP_SERVER:
        logger.warning(
            "startup.mail.smtp_missing",
            extra={"event": "startup.mail.smtp_missing"},
        )

    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": config.ENV,
            "database_url_scheme": active_database_url.split("://", 1)[0],
            "mail_sandbox": config.MAIL_SANDBOX_MODE,
        },
    )


def bootstrap() -> None:
    """Initialize logging and validate runtime configuration."""
    configure_logging()
    validate_startup_config()
