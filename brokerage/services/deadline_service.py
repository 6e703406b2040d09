"""Contract milestone deadlines: default scheduling and manual edits."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta

from brokerage.core.enums import CANONICAL_DEADLINE_TYPES
from brokerage.core.exceptions import NotFoundError, ValidationError
from brokerage.database.models import Deal, DealDeadline, utcnow
from brokerage.services.base_service import BaseService
from brokerage.services.settings_service import AgencyRates, AgencySettingsService
from brokerage.utils.validators import sanitize_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeadlineEdit:
    """One row of a bulk deadline save; matched by id, else by type."""

    type: str
    due_date: date
    id: int | None = None
    notes: str | None = None
    completed: bool | None = None


class DeadlineService(BaseService):
    def __init__(self, db=None, rates: AgencyRates | None = None) -> None:
        super().__init__(db)
        self._rates = rates

    @property
    def rates(self) -> AgencyRates:
        if self._rates is None:
            self._rates = AgencySettingsService(db=self.db).get_rates()
        return self._rates

    def require_deal(self, deal_id: int) -> Deal:
        deal = self.db.query(Deal).filter(Deal.id == deal_id).first()
        if deal is None:
            raise NotFoundError(f"Deal {deal_id} not found.")
        return deal

    def list_deadlines(self, deal_id: int) -> list[DealDeadline]:
        return (
            self.db.query(DealDeadline)
            .filter(DealDeadline.deal_id == deal_id)
            .order_by(DealDeadline.due_date, DealDeadline.id)
            .all()
        )

    def has_deadlines(self, deal_id: int) -> bool:
        return self.db.query(DealDeadline.id).filter(DealDeadline.deal_id == deal_id).first() is not None

    def stage_default_deadlines(
        self,
        deal_id: int,
        contract_entry_date: date,
        offsets: dict[str, int] | None = None,
    ) -> list[DealDeadline]:
        """Add the canonical deadlines to the session without committing.

        Nothing is added when the deal already has any deadline, so entering
        UnderContract a second time never duplicates them.
        """
        if self.has_deadlines(deal_id):
            return []

        offsets = offsets or self.rates.deadline_offsets()
        now = utcnow()
        rows = [
            DealDeadline(
                deal_id=deal_id,
                type=deadline_type,
                due_date=contract_entry_date + timedelta(days=int(offsets[deadline_type])),
                created_at=now,
            )
            for deadline_type in CANONICAL_DEADLINE_TYPES
        ]
        self.db.add_all(rows)
        return rows

    def schedule_default_deadlines(self, deal_id: int, contract_entry_date: date | None = None) -> list[DealDeadline]:
        self.require_deal(deal_id)
        entry = contract_entry_date or utcnow().date()
        with self.atomic():
            created = self.stage_default_deadlines(deal_id, entry)
        if created:
            logger.info(
                "deadlines.scheduled",
                extra={"event": "deadlines.scheduled", "deal_id": deal_id},
            )
        return self.list_deadlines(deal_id)

    def set_deadline_completed(self, deadline_id: int, completed: bool) -> DealDeadline:
        deadline = self.db.query(DealDeadline).filter(DealDeadline.id == deadline_id).first()
        if deadline is None:
            raise NotFoundError(f"Deadline {deadline_id} not found.")
        with self.atomic():
            deadline.completed_at = utcnow() if completed else None
        logger.info(
            "deadline.completion_changed",
            extra={"event": "deadline.completion_changed", "deadline_id": deadline_id},
        )
        return deadline

    def save_deadlines(self, deal_id: int, edits: list[DeadlineEdit]) -> list[DealDeadline]:
        """Upsert deadlines for a deal.

        Chronological order between milestone types is not enforced; a manual
        edit may put Closing before Inspection.
        """
        self.require_deal(deal_id)
        existing = self.list_deadlines(deal_id)
        by_id = {row.id: row for row in existing}
        by_type = {row.type.lower(): row for row in existing}

        with self.atomic():
            for edit in edits:
                deadline_type = sanitize_text(edit.type, 64)
                if not deadline_type:
                    raise ValidationError("Deadline type is required.")

                if edit.id is not None:
                    row = by_id.get(edit.id)
                    if row is None:
                        raise NotFoundError(f"Deadline {edit.id} not found for deal {deal_id}.")
                else:
                    row = by_type.get(deadline_type.lower())

                if row is None:
                    row = DealDeadline(deal_id=deal_id, created_at=utcnow())
                    self.db.add(row)
                    by_type[deadline_type.lower()] = row

                row.type = deadline_type
                row.due_date = edit.due_date
                if edit.notes is not None:
                    row.notes = sanitize_text(edit.notes, 512) or None
                if edit.completed is True and row.completed_at is None:
                    row.completed_at = utcnow()
                elif edit.completed is False:
                    row.completed_at = None

        return self.list_deadlines(deal_id)
