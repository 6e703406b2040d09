"""Agency-wide settings: commission rates, deadline offsets and revenue goal.

The settings row is only read here. Everything downstream receives an
immutable ``AgencyRates`` snapshot so a transition works against one
consistent set of numbers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from brokerage.core.enums import DeadlineType
from brokerage.core.exceptions import ValidationError
from brokerage.database.models import AgencySettings, utcnow
from brokerage.services.base_service import BaseService
from brokerage.services.commission import to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgencyRates:
    broker_pct: Decimal = Decimal("10")
    agent_pct: Decimal = Decimal("5")
    inspection_days: int = 7
    appraisal_days: int = 14
    loan_commitment_days: int = 21
    closing_days: int = 30
    monthly_goal: Decimal = Decimal("0")
    max_active_assignments_per_agent: int = 5
    max_declines_per_agent_per_month: int = 3

    def deadline_offsets(self) -> dict[str, int]:
        return {
            DeadlineType.INSPECTION.value: self.inspection_days,
            DeadlineType.APPRAISAL.value: self.appraisal_days,
            DeadlineType.LOAN_COMMITMENT.value: self.loan_commitment_days,
            DeadlineType.CLOSING.value: self.closing_days,
        }

    @classmethod
    def from_row(cls, row: AgencySettings) -> "AgencyRates":
        return cls(
            broker_pct=to_decimal(row.broker_commission_percent),
            agent_pct=to_decimal(row.agent_commission_percent),
            inspection_days=row.inspection_days,
            appraisal_days=row.appraisal_days,
            loan_commitment_days=row.loan_commitment_days,
            closing_days=row.closing_days,
            monthly_goal=to_decimal(row.monthly_revenue_goal),
            max_active_assignments_per_agent=row.max_active_assignments_per_agent,
            max_declines_per_agent_per_month=row.max_declines_per_agent_per_month,
        )


class AgencySettingsService(BaseService):
    """Reads and updates the single agency settings row."""

    def _row(self) -> AgencySettings | None:
        return self.db.query(AgencySettings).order_by(AgencySettings.id).first()

    def _row_for_update(self) -> AgencySettings:
        row = self._row()
        if row is None:
            row = AgencySettings()
            self.db.add(row)
        return row

    def get_rates(self) -> AgencyRates:
        row = self._row()
        if row is None:
            return AgencyRates()
        return AgencyRates.from_row(row)

    def save_commission_rates(self, broker_pct, agent_pct) -> AgencyRates:
        broker = to_decimal(broker_pct)
        agent = to_decimal(agent_pct)
        if not (0 <= broker <= 100 and 0 <= agent <= 100):
            raise ValidationError("Percentages must be between 0 and 100.")
        if broker + agent > 100:
            raise ValidationError("Broker + Agent percentage cannot exceed 100%.")

        with self.atomic():
            row = self._row_for_update()
            row.broker_commission_percent = broker
            row.agent_commission_percent = agent
            row.updated_at = utcnow()
        logger.info(
            "settings.commission_saved",
            extra={"event": "settings.commission_saved"},
        )
        return self.get_rates()

    def save_deadline_offsets(
        self,
        inspection: int,
        appraisal: int,
        loan_commitment: int,
        closing: int,
    ) -> AgencyRates:
        with self.atomic():
            row = self._row_for_update()
            row.inspection_days = max(1, inspection)
            row.appraisal_days = max(1, appraisal)
            row.loan_commitment_days = max(1, loan_commitment)
            row.closing_days = max(1, closing)
            row.updated_at = utcnow()
        logger.info("settings.deadlines_saved", extra={"event": "settings.deadlines_saved"})
        return self.get_rates()

    def save_monthly_goal(self, goal) -> AgencyRates:
        value = to_decimal(goal)
        if value < 0:
            value = Decimal("0")
        with self.atomic():
            row = self._row_for_update()
            row.monthly_revenue_goal = value
            row.updated_at = utcnow()
        return self.get_rates()
