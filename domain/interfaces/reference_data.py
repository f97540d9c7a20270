"""Reference data interface (ids ⇄ names ⇄ aliases)."""
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from ..entities import ChampionInfo


class IReferenceData(ABC):
    """Static game data consumed by the statistics engine."""

    @abstractmethod
    def version(self) -> str:
        """Full game data version, e.g. ``14.24.1``."""
        pass

    def patch(self) -> str:
        """Content version as ``major.minor``, the form the analytics site expects."""
        parts = self.version().split(".")
        return ".".join(parts[:2])

    @abstractmethod
    def champion_by_key(self, key: int | str) -> Optional[ChampionInfo]:
        """Champion by numeric key (e.g. 266 for Aatrox)."""
        pass

    @abstractmethod
    def champion_by_alias(self, alias: str) -> Optional[ChampionInfo]:
        """Champion by analytics alias (e.g. ``masteryi``)."""
        pass

    @abstractmethod
    def champions(self) -> Iterable[ChampionInfo]:
        pass

    @abstractmethod
    def item_cost(self, item_id: int) -> int:
        """Total gold cost, 0 if unknown."""
        pass

    @abstractmethod
    def item_name(self, item_id: int) -> Optional[str]:
        pass
