"""Domain entities."""
from .matchup import MatchupRecord
from .build import BuildRecord
from .rune_page import RunePageRecord, PERK_COUNT
from .skill_plan import SkillPlanRecord, SkillEarlyLevel, SkillCell, SKILL_LEVELS
from .summoner_spells import SummonerSpellRecord
from .build_summary import BuildSummary
from .champion import ChampionInfo, to_alias
from .pick import PickSuggestion, TeamProfile

__all__ = [
    'MatchupRecord',
    'BuildRecord',
    'RunePageRecord',
    'PERK_COUNT',
    'SkillPlanRecord',
    'SkillEarlyLevel',
    'SkillCell',
    'SKILL_LEVELS',
    'SummonerSpellRecord',
    'BuildSummary',
    'ChampionInfo',
    'to_alias',
    'PickSuggestion',
    'TeamProfile',
]
