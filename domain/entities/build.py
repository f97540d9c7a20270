"""Item build record."""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class BuildRecord:
    """Recommended purchase path for a champion in a lane."""

    # Starter purchase, e.g. Doran's Blade + Health Potion
    starting_items: Tuple[int, ...]
    # Up to six completed items in purchase order, boots included
    full_build: Tuple[int, ...]

    def to_dict(self) -> dict:
        return {
            'starting_items': list(self.starting_items),
            'full_build': list(self.full_build),
        }
