"""Summoner spell pair record."""
from dataclasses import dataclass
from typing import Tuple

from ..enums import DataSource


@dataclass(frozen=True)
class SummonerSpellRecord:
    """A summoner spell combination, e.g. Flash + Ignite = (4, 14)."""

    spell_ids: Tuple[int, int]
    win_rate: float
    sample_size: int
    source: DataSource

    def to_dict(self) -> dict:
        return {
            'ids': list(self.spell_ids),
            'win_rate': self.win_rate,
            'games': self.sample_size,
            'source': self.source.value,
        }
