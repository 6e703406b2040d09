"""Result types for transitions and the best-effort work attached to them."""

from __future__ import annotations

from dataclasses import dataclass, field

from brokerage.database.models import Deal, Offer


@dataclass(frozen=True)
class EffectResult:
    """Outcome of a side effect that must never fail the transition it follows."""

    name: str
    ok: bool
    detail: str | None = None

    @classmethod
    def success(cls, name: str, detail: str | None = None) -> "EffectResult":
        return cls(name=name, ok=True, detail=detail)

    @classmethod
    def failure(cls, name: str, detail: str) -> "EffectResult":
        return cls(name=name, ok=False, detail=detail)


@dataclass
class TransitionResult:
    deal: Deal
    effects: list[EffectResult] = field(default_factory=list)
    offer: Offer | None = None

    @property
    def failed_effects(self) -> list[EffectResult]:
        return [effect for effect in self.effects if not effect.ok]

    def effect(self, name: str) -> EffectResult | None:
        for item in self.effects:
            if item.name == name:
                return item
        return None
