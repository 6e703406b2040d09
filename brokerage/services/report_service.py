"""Commission reporting over closed deals."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from sqlalchemy import func

from brokerage.core.enums import DealStatus
from brokerage.core.exceptions import ValidationError
from brokerage.database.models import Deal
from brokerage.services.base_service import BaseService
from brokerage.services.commission import CommissionSummary, summarize_commissions
from brokerage.services.settings_service import AgencyRates, AgencySettingsService


class ReportService(BaseService):
    def __init__(self, db=None, rates: AgencyRates | None = None) -> None:
        super().__init__(db)
        self.rates = rates or AgencySettingsService(db=self.db).get_rates()

    def closed_deals_between(self, start: date, end: date) -> list[Deal]:
        """Closed deals whose close time falls in ``[start, end]`` (whole days)."""
        if end < start:
            raise ValidationError("Report end date must not precede start date.")
        lower = datetime.combine(start, time.min)
        upper = datetime.combine(end + timedelta(days=1), time.min)
        closed_on = func.coalesce(Deal.closed_at, Deal.last_updated)
        return (
            self.db.query(Deal)
            .filter(Deal.status == DealStatus.CLOSED.value)
            .filter(closed_on >= lower)
            .filter(closed_on < upper)
            .order_by(closed_on)
            .all()
        )

    def commission_summary(self, start: date, end: date) -> CommissionSummary:
        deals = self.closed_deals_between(start, end)
        return summarize_commissions(
            deals,
            self.rates.broker_pct,
            self.rates.agent_pct,
            monthly_goal=self.rates.monthly_goal,
        )

    def month_to_date(self, today: date) -> CommissionSummary:
        return self.commission_summary(today.replace(day=1), today)
