"""Create tables and the default agency settings row."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

import brokerage.database.db as db_module
from brokerage.core.startup import bootstrap
from brokerage.database.models import AgencySettings, Base

logger = logging.getLogger(__name__)


def ensure_default_settings(session: Session) -> AgencySettings:
    row = session.query(AgencySettings).order_by(AgencySettings.id).first()
    if row is None:
        row = AgencySettings()
        session.add(row)
        session.commit()
        logger.info("database.settings.seeded", extra={"event": "database.settings.seeded"})
    return row


def init_db() -> None:
    bootstrap()
    Base.metadata.create_all(bind=db_module.get_engine())
    with db_module.SessionLocal() as session:
        ensure_default_settings(session)
    logger.info(
        "database.tables.created",
        extra={"event": "database.tables.created", "database_url_scheme": db_module.get_active_database_url().split("://", 1)[0]},
    )


if __name__ == "__main__":
    init_db()
