"""Offer amount bounds and current-offer selection shared by deals and offers."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from brokerage.core.enums import OfferStatus
from brokerage.core.exceptions import OfferRangeViolationError, ValidationError
from brokerage.database.models import Offer
from brokerage.services.commission import round_money, to_decimal

MIN_LIST_PRICE_RATIO = Decimal("0.9")


def offer_bounds(list_price) -> tuple[Decimal, Decimal] | None:
    """Allowed (min, max) for an offer, or None when the list price is unknown."""
    if list_price is None:
        return None
    price = to_decimal(list_price)
    if price <= 0:
        return None
    return round_money(price * MIN_LIST_PRICE_RATIO), price


def check_offer_range(amount, list_price) -> Decimal:
    value = to_decimal(amount)
    if value <= 0:
        raise ValidationError("Offer amount must be greater than zero.")
    bounds = offer_bounds(list_price)
    if bounds is None:
        return round_money(value)
    minimum, maximum = bounds
    if not minimum <= value <= maximum:
        raise OfferRangeViolationError(value, minimum, maximum)
    return round_money(value)


def current_offer(offers: Iterable[Offer]) -> Offer | None:
    """Accepted offer if any, else the most recently created one."""
    latest: Offer | None = None
    for offer in offers:
        if offer.status == OfferStatus.ACCEPTED.value:
            return offer
        if latest is None or (offer.created_at, offer.id or 0) > (latest.created_at, latest.id or 0):
            latest = offer
    return latest
