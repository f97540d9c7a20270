"""Champion reference entity and alias normalisation."""
import re
from dataclasses import dataclass
from typing import Tuple

_ALIAS_STRIP = re.compile(r"['\s.&]")


def to_alias(name: str) -> str:
    """Lolalytics alias for a champion id or display name.

    ``"MasterYi"`` → ``"masteryi"``, ``"Kai'Sa"`` → ``"kaisa"``,
    ``"Dr. Mundo"`` → ``"drmundo"``.
    """
    if not name:
        return "unknown"
    return _ALIAS_STRIP.sub("", name).lower()


@dataclass(frozen=True)
class ChampionInfo:
    """Static champion data from Data Dragon."""

    # Data Dragon id, e.g. "MasterYi"
    id: str
    # Numeric key used by the client APIs and the analytics JSON, e.g. 11
    key: int
    name: str
    attack: int = 5
    defense: int = 5
    magic: int = 5
    tags: Tuple[str, ...] = ()

    @property
    def alias(self) -> str:
        return to_alias(self.id)

    @property
    def primary_tag(self) -> str:
        return self.tags[0] if self.tags else ""
