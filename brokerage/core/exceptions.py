"""Custom exceptions for the brokerage application."""


class BrokerageException(Exception):
    """Base exception for the brokerage application."""

    pass


class ValidationError(BrokerageException):
    """Raised when validation fails."""

    pass


class NotFoundError(BrokerageException):
    """Raised when a deal, offer, deadline or property id is missing."""

    pass


class ConfigurationError(BrokerageException):
    """Raised when configuration is invalid."""

    pass


class InvalidTransitionError(BrokerageException):
    """Raised when a deal is moved between statuses the pipeline forbids."""

    def __init__(self, current: str, target: str, reason: str | None = None) -> None:
        self.current = current
        self.target = target
        message = f"Transition not allowed: {current} -> {target}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class OfferRangeViolationError(ValidationError):
    """Raised when an offer amount falls outside 90-100% of the list price."""

    def __init__(self, amount, minimum, maximum) -> None:
        self.amount = amount
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Offer amount {amount} must be between {minimum} and {maximum}."
        )


class StageViolationError(BrokerageException):
    """Raised when an offer operation is attempted in the wrong deal stage."""

    pass


class ConcurrencyConflictError(BrokerageException):
    """Raised when a deal was changed by another request mid-transition."""

    pass
