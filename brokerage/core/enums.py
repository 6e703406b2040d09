"""Enums for the deal pipeline.

Values are the exact strings persisted in the status/type columns and shown on
the board, so they are CamelCase rather than lower-case identifiers.
"""

from enum import Enum


class DealStatus(str, Enum):
    """Columns of the deal board, in pipeline order."""

    NEW = "New"
    OFFER_MADE = "OfferMade"
    NEGOTIATION = "Negotiation"
    CONTRACT_DRAFT = "ContractDraft"
    UNDER_CONTRACT = "UnderContract"
    CLOSED = "Closed"
    ARCHIVED = "Archived"


class OfferStatus(str, Enum):
    PROPOSED = "Proposed"
    ACCEPTED = "Accepted"
    DECLINED = "Declined"


class DeadlineType(str, Enum):
    """Milestones seeded when a deal goes under contract."""

    INSPECTION = "Inspection"
    APPRAISAL = "Appraisal"
    LOAN_COMMITMENT = "LoanCommitment"
    CLOSING = "Closing"


class NotificationType(str, Enum):
    DEAL_CREATED = "deal.created"
    DEAL_MOVED = "deal.moved"
    DEAL_CLOSED = "deal.closed"
    OFFER_CREATED = "offer.created"
    OFFER_ACCEPTED = "offer.accepted"
    OFFER_DECLINED = "offer.declined"
    CONTRACT_EMAILED = "contract.emailed"
    CONTRACT_DISPATCH_FAILED = "contract.dispatch_failed"


CANONICAL_DEADLINE_TYPES = tuple(item.value for item in DeadlineType)
