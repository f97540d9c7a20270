"""Everything extracted from one build-summary fetch."""
from dataclasses import dataclass
from typing import Tuple

from .rune_page import RunePageRecord
from .skill_plan import SkillEarlyLevel, SkillPlanRecord
from .summoner_spells import SummonerSpellRecord


@dataclass(frozen=True)
class BuildSummary:
    runes: Tuple[RunePageRecord, ...] = ()
    summoner_spells: Tuple[SummonerSpellRecord, ...] = ()
    skill_plans: Tuple[SkillPlanRecord, ...] = ()
    skill_early: Tuple[SkillEarlyLevel, ...] = ()

    @property
    def is_empty(self) -> bool:
        """A summary without runes or skill plans is not worth caching."""
        return not self.runes and not self.skill_plans

    def to_dict(self) -> dict:
        return {
            'runes': [r.to_dict() for r in self.runes],
            'summoner_spells': [s.to_dict() for s in self.summoner_spells],
            'skill_plans': [p.to_dict() for p in self.skill_plans],
        }
