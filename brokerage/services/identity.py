"""Actor identity used for attribution and agent assignment matching."""

from __future__ import annotations

from dataclasses import dataclass

from brokerage.database.models import Deal


@dataclass(frozen=True)
class Actor:
    user_id: str | None = None
    display_name: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.user_id or "system"


SYSTEM_ACTOR = Actor()


def resolve_display_name(
    full_name: str | None,
    username: str | None = None,
    email: str | None = None,
) -> str | None:
    """FullName claim first, then username, then email."""
    for candidate in (full_name, username, email):
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def agent_matches(deal: Deal, actor: Actor) -> bool:
    """True when the actor is the deal's assigned agent.

    Deals created before ``agent_user_id`` existed only carry a display name,
    so those fall back to a case-insensitive name comparison.
    """
    if deal.agent_user_id:
        return actor.user_id is not None and deal.agent_user_id == actor.user_id
    if not deal.agent_name or not actor.display_name:
        return False
    return deal.agent_name.strip().casefold() == actor.display_name.strip().casefold()


def agent_recipient(deal: Deal) -> str | None:
    return deal.agent_user_id or deal.agent_name
