"""Pick advice value objects."""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class TeamProfile:
    """Aggregate of the allied roster used for synergy scoring."""

    avg_magic: float = 5.0
    avg_attack: float = 5.0
    avg_defense: float = 5.0
    tags: Tuple[str, ...] = ()
    has_tank: bool = False
    has_engage: bool = False
    count: int = 0


@dataclass(frozen=True)
class PickSuggestion:
    alias: str
    name: str
    score: float
    counter_score: float
    synergy_bonus: float = 0.0
    with_synergy: bool = False

    @property
    def details(self) -> str:
        if self.with_synergy:
            sign = "+" if self.synergy_bonus >= 0 else ""
            return f"ctr {self.counter_score:.1f}% syn {sign}{self.synergy_bonus:.1f}"
        return f"avg {self.counter_score:.1f}%"

    def to_dict(self) -> dict:
        return {
            'alias': self.alias,
            'name': self.name,
            'score': self.score,
            'details': self.details,
        }
