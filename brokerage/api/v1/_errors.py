"""Shared error mapping for API v1 route modules."""

from __future__ import annotations

from brokerage.core.exceptions import (
    ConcurrencyConflictError,
    InvalidTransitionError,
    NotFoundError,
    StageViolationError,
    ValidationError,
)


def map_domain_error(exc: Exception) -> tuple[int, str]:
    if isinstance(exc, NotFoundError):
        return 404, str(exc)
    if isinstance(exc, (InvalidTransitionError, StageViolationError, ConcurrencyConflictError)):
        return 409, str(exc)
    if isinstance(exc, ValidationError):
        return 422, str(exc)
    return 500, "Internal error."
