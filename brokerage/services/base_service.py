"""Shared service base with robust session lifecycle behavior."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from brokerage.core.exceptions import ConcurrencyConflictError
from brokerage.database.db import SessionLocal


class BaseService:
    """Base class for services that operate on a SQLAlchemy session."""

    def __init__(self, db: Session | None = None) -> None:
        self.db = db or SessionLocal()

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            self.db.commit()
        except StaleDataError as exc:
            self.db.rollback()
            raise ConcurrencyConflictError("Record was modified by another request; reload and retry.") from exc
        except Exception:
            self.db.rollback()
            raise

    @contextmanager
    def atomic(self) -> Iterator[Session]:
        """Run a multi-row change as one unit: a single commit, or nothing."""
        try:
            yield self.db
        except Exception:
            self.db.rollback()
            raise
        self.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()
