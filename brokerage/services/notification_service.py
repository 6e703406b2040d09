"""Persisted in-app notifications for brokers and agents."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from brokerage.database.models import Notification, utcnow
from brokerage.services.base_service import BaseService
from brokerage.services.effects import EffectResult
from brokerage.utils.validators import sanitize_text

logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    """Fire-and-forget notification sink; failures come back as results."""

    def notify(
        self,
        recipient: str,
        message: str,
        link_url: str | None = None,
        actor_id: str | None = None,
        event_type: str | None = None,
    ) -> EffectResult:
        return self.notify_many([recipient], message, link_url, actor_id, event_type)

    def notify_many(
        self,
        recipients: Iterable[str | None],
        message: str,
        link_url: str | None = None,
        actor_id: str | None = None,
        event_type: str | None = None,
    ) -> EffectResult:
        unique = list(dict.fromkeys(r for r in recipients if r))
        if not unique:
            return EffectResult.success("notification", "no recipients")

        now = utcnow()
        try:
            self.db.add_all(
                [
                    Notification(
                        recipient=recipient,
                        actor_user_id=actor_id,
                        message=sanitize_text(message, 512),
                        link_url=sanitize_text(link_url, 256) or None,
                        type=event_type,
                        created_at=now,
                        is_read=False,
                    )
                    for recipient in unique
                ]
            )
            self.commit()
        except Exception as exc:
            logger.exception(
                "notification.failed",
                extra={"event": "notification.failed", "recipient": ",".join(unique)},
            )
            return EffectResult.failure("notification", str(exc))
        return EffectResult.success("notification", f"{len(unique)} recipient(s)")

    def list_for(self, recipient: str, unread_only: bool = False) -> list[Notification]:
        query = self.db.query(Notification).filter(Notification.recipient == recipient)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()
