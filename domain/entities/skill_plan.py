"""Skill levelling records."""
from dataclasses import dataclass
from typing import Tuple

from ..enums import DataSource

SKILL_LEVELS = 15
_SKILL_KEYS = {"1": "Q", "2": "W", "3": "E", "4": "R"}


@dataclass(frozen=True)
class SkillPlanRecord:
    """Max order plus the full level-by-level sequence.

    ``level_sequence`` holds 15 digits where 1=Q, 2=W, 3=E, 4=R.
    """

    max_order_label: str
    level_sequence: str
    win_rate: float
    sample_size: int
    source: DataSource

    @property
    def level_keys(self) -> str:
        """Sequence rendered with ability letters, e.g. ``QEWQQRQ...``."""
        return "".join(_SKILL_KEYS[d] for d in self.level_sequence)

    def to_dict(self) -> dict:
        return {
            'max_order': self.max_order_label,
            'sequence': self.level_sequence,
            'keys': self.level_keys,
            'win_rate': self.win_rate,
            'games': self.sample_size,
            'source': self.source.value,
        }


@dataclass(frozen=True)
class SkillCell:
    win_rate: float
    pick_rate: float
    games: int


@dataclass(frozen=True)
class SkillEarlyLevel:
    """One of levels 1-3: a cell per ability (Q, W, E, R)."""

    skills: Tuple[SkillCell, ...]
