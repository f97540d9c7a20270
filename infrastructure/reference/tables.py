"""In-memory reference tables."""
from typing import Dict, Iterable, Optional

from domain.entities import ChampionInfo, to_alias
from domain.interfaces import IReferenceData


class ReferenceTables(IReferenceData):
    """Champion and item lookups built once per game data version."""

    def __init__(
        self,
        version: str,
        champions: Iterable[ChampionInfo] = (),
        items: Optional[Dict[int, dict]] = None,
    ) -> None:
        self._version = version
        self._by_key: Dict[int, ChampionInfo] = {}
        self._by_alias: Dict[str, ChampionInfo] = {}
        for champ in champions:
            self._by_key[champ.key] = champ
            self._by_alias[champ.alias] = champ
        # item id -> {"name": str, "gold": int}
        self._items: Dict[int, dict] = dict(items or {})

    def version(self) -> str:
        return self._version

    def champion_by_key(self, key: int | str) -> Optional[ChampionInfo]:
        try:
            return self._by_key.get(int(key))
        except (TypeError, ValueError):
            return None

    def champion_by_alias(self, alias: str) -> Optional[ChampionInfo]:
        return self._by_alias.get(to_alias(alias))

    def champions(self) -> Iterable[ChampionInfo]:
        return self._by_key.values()

    def item_cost(self, item_id: int) -> int:
        return int(self._items.get(item_id, {}).get("gold", 0))

    def item_name(self, item_id: int) -> Optional[str]:
        return self._items.get(item_id, {}).get("name")

    def __repr__(self) -> str:
        return f"ReferenceTables(version={self._version!r}, champions={len(self._by_key)}, items={len(self._items)})"
