from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .db import Base


def utcnow() -> datetime:
    """Return UTC now as a naive datetime, matching the stored columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Property(Base):
    __tablename__ = "properties"
    __table_args__ = (Index("idx_properties_listing_status", "listing_status"),)

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    address = Column(String(512), nullable=False, default="")
    price = Column(Numeric(18, 2))
    property_type = Column(String(64), nullable=False, default="Residential")
    bedrooms = Column(Integer)
    bathrooms = Column(Integer)
    area = Column(Integer)
    listing_status = Column(String(32), default="Active")
    agent = Column(String(255))
    created_at = Column(DateTime, default=utcnow, nullable=False)

    deals = relationship("Deal", back_populates="property")


class Contact(Base):
    __tablename__ = "contacts"
    __table_args__ = (Index("idx_contacts_name", "name"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320))
    phone = Column(String(64))
    type = Column(String(32), default="Client")
    is_active = Column(Boolean, default=True, nullable=False)


class Deal(Base):
    __tablename__ = "deals"
    __table_args__ = (
        Index("idx_deals_status_order", "status", "display_order"),
        Index("idx_deals_property", "property_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False)
    status = Column(String(32), nullable=False, default="New")
    agent_name = Column(String(255))
    agent_user_id = Column(String(64))
    client_name = Column(String(255))
    offer_amount = Column(Numeric(18, 2))
    created_at = Column(DateTime, default=utcnow, nullable=False)
    last_updated = Column(DateTime, default=utcnow)
    closed_at = Column(DateTime)
    closed_by_user_id = Column(String(64))
    display_order = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False)

    property = relationship("Property", back_populates="deals")
    offers = relationship(
        "Offer",
        back_populates="deal",
        cascade="all, delete-orphan",
        order_by="Offer.created_at",
    )
    deadlines = relationship(
        "DealDeadline",
        back_populates="deal",
        cascade="all, delete-orphan",
        order_by="DealDeadline.due_date",
    )

    __mapper_args__ = {"version_id_col": version}


class Offer(Base):
    __tablename__ = "offers"
    __table_args__ = (Index("idx_offers_deal_status", "deal_id", "status"),)

    id = Column(Integer, primary_key=True, index=True)
    deal_id = Column(Integer, ForeignKey("deals.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    status = Column(String(32), nullable=False, default="Proposed")
    financing_type = Column(String(64))
    earnest_money = Column(Numeric(18, 2))
    close_date = Column(Date)
    notes = Column(String(512))
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow)

    deal = relationship("Deal", back_populates="offers")


class DealDeadline(Base):
    __tablename__ = "deal_deadlines"
    __table_args__ = (Index("idx_deadlines_deal", "deal_id"),)

    id = Column(Integer, primary_key=True, index=True)
    deal_id = Column(Integer, ForeignKey("deals.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(64), nullable=False)
    due_date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    completed_at = Column(DateTime)
    notes = Column(String(512))

    deal = relationship("Deal", back_populates="deadlines")


class AgencySettings(Base):
    __tablename__ = "agency_settings"

    id = Column(Integer, primary_key=True, index=True)
    broker_commission_percent = Column(Numeric(5, 2), nullable=False, default=10)
    agent_commission_percent = Column(Numeric(5, 2), nullable=False, default=5)
    monthly_revenue_goal = Column(Numeric(18, 2), nullable=False, default=0)
    inspection_days = Column(Integer, nullable=False, default=7)
    appraisal_days = Column(Integer, nullable=False, default=14)
    loan_commitment_days = Column(Integer, nullable=False, default=21)
    closing_days = Column(Integer, nullable=False, default=30)
    max_active_assignments_per_agent = Column(Integer, nullable=False, default=5)
    max_declines_per_agent_per_month = Column(Integer, nullable=False, default=3)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (Index("idx_notifications_recipient_read", "recipient", "is_read"),)

    id = Column(Integer, primary_key=True, index=True)
    recipient = Column(String(255))
    actor_user_id = Column(String(64))
    message = Column(String(512), nullable=False)
    link_url = Column(String(256))
    type = Column(String(64))
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
