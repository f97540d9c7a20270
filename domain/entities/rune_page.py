"""Rune page record."""
from dataclasses import dataclass
from typing import Tuple

from ..enums import DataSource

PRIMARY_PERKS = 4
SECONDARY_PERKS = 2
STAT_SHARDS = 3
PERK_COUNT = PRIMARY_PERKS + SECONDARY_PERKS + STAT_SHARDS


@dataclass(frozen=True)
class RunePageRecord:
    """A full rune page ready to be pushed to the client.

    ``perk_ids`` is always 9 long: 4 primary, 2 secondary, 3 stat shards.
    """

    primary_tree_id: int
    secondary_tree_id: int
    perk_ids: Tuple[int, ...]
    win_rate: float
    sample_size: int
    source: DataSource
    keystone_name: str = ""

    @property
    def keystone_id(self) -> int:
        return self.perk_ids[0]

    @property
    def primary_perks(self) -> Tuple[int, ...]:
        return self.perk_ids[:PRIMARY_PERKS]

    @property
    def secondary_perks(self) -> Tuple[int, ...]:
        return self.perk_ids[PRIMARY_PERKS:PRIMARY_PERKS + SECONDARY_PERKS]

    @property
    def stat_shards(self) -> Tuple[int, ...]:
        return self.perk_ids[PRIMARY_PERKS + SECONDARY_PERKS:]

    def to_dict(self) -> dict:
        return {
            'primary_style_id': self.primary_tree_id,
            'sub_style_id': self.secondary_tree_id,
            'selected_perk_ids': list(self.perk_ids),
            'keystone': self.keystone_name,
            'win_rate': self.win_rate,
            'games': self.sample_size,
            'source': self.source.value,
        }
