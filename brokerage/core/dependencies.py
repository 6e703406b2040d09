"""Dependency providers for API handlers."""

from __future__ import annotations

from collections.abc import Generator

from fastapi import Header
from sqlalchemy.orm import Session

from brokerage.database.db import get_db
from brokerage.services.identity import Actor, resolve_display_name


def get_db_session() -> Generator[Session, None, None]:
    """Yield SQLAlchemy session for dependency injection."""
    yield from get_db()


def get_actor(
    x_actor_id: str | None = Header(default=None, alias="X-Actor-Id"),
    x_actor_name: str | None = Header(default=None, alias="X-Actor-Name"),
    x_actor_email: str | None = Header(default=None, alias="X-Actor-Email"),
) -> Actor:
    """Resolve the acting user from gateway-supplied headers.

    Authentication happens upstream; requests without headers act as ``system``.
    """
    user_id = x_actor_id.strip() if x_actor_id and x_actor_id.strip() else None
    return Actor(user_id=user_id, display_name=resolve_display_name(x_actor_name, email=x_actor_email))
