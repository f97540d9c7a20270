"""Domain layer - Records, enums, errors and interfaces."""
from .entities import (
    MatchupRecord,
    BuildRecord,
    RunePageRecord,
    SkillPlanRecord,
    SummonerSpellRecord,
    BuildSummary,
    ChampionInfo,
    PickSuggestion,
    TeamProfile,
    to_alias,
)
from .enums import Lane, DataSource, Channel
from .errors import StatsUnavailableError, TransportError, ShapeError, InsufficientDataError
from .interfaces import IReferenceData

__all__ = [
    # Entities
    'MatchupRecord',
    'BuildRecord',
    'RunePageRecord',
    'SkillPlanRecord',
    'SummonerSpellRecord',
    'BuildSummary',
    'ChampionInfo',
    'PickSuggestion',
    'TeamProfile',
    'to_alias',
    # Enums
    'Lane',
    'DataSource',
    'Channel',
    # Errors
    'StatsUnavailableError',
    'TransportError',
    'ShapeError',
    'InsufficientDataError',
    # Interfaces
    'IReferenceData',
]
