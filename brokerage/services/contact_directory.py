"""Read-only client lookup for contract packets."""

from __future__ import annotations

from sqlalchemy import func

from brokerage.database.models import Contact
from brokerage.services.base_service import BaseService


class ContactDirectory(BaseService):
    def find_client(self, name: str | None) -> Contact | None:
        if not name or not name.strip():
            return None
        matches = (
            self.db.query(Contact)
            .filter(Contact.is_active.is_(True))
            .filter(func.lower(Contact.name) == name.strip().lower())
            .order_by(Contact.id)
            .all()
        )
        for contact in matches:
            if (contact.type or "").lower() == "client":
                return contact
        return matches[0] if matches else None
