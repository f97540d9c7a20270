"""Matchup record: how a subject champion fares against one opponent."""
from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class MatchupRecord:
    """Win rate of the subject champion against a single opponent.

    ``win_rate`` is always from the subject's point of view (0-100), so a low
    value means the opponent counters the subject.
    """

    opponent_alias: str
    opponent_name: str
    win_rate: float
    sample_size: int
    default_lane: Optional[str] = None

    def inverted(self) -> 'MatchupRecord':
        """Same matchup seen from the opponent's side, rounded to 2 decimals."""
        return replace(self, win_rate=round(100.0 - self.win_rate, 2))

    def to_dict(self) -> dict:
        return {
            'alias': self.opponent_alias,
            'name': self.opponent_name,
            'win_rate': self.win_rate,
            'games': self.sample_size,
            'default_lane': self.default_lane,
        }
