"""Lane enumeration as understood by the analytics site."""
from enum import Enum


class Lane(Enum):
    """Lanes accepted by Lolalytics ``lane=`` parameters."""

    TOP = "top"
    JUNGLE = "jungle"
    MIDDLE = "middle"
    BOTTOM = "bottom"
    SUPPORT = "support"
    ARAM = "aram"
    DEFAULT = "default"  # the champion's own most-played lane

    @property
    def api_lane(self) -> str:
        """Lane value sent to the JSON endpoint (ARAM has no lanes)."""
        return "default" if self is Lane.ARAM else self.value

    @property
    def is_aram(self) -> bool:
        return self is Lane.ARAM

    @classmethod
    def ranked_lanes(cls) -> list['Lane']:
        """The five Summoner's Rift positions."""
        return [cls.TOP, cls.JUNGLE, cls.MIDDLE, cls.BOTTOM, cls.SUPPORT]

    @classmethod
    def from_string(cls, lane_str: str) -> 'Lane':
        """Create Lane from a site lane, a client position or a common shorthand.

        Handles both the client platform's ``utility``/``bottom`` and the live
        game client's ``UTILITY``/``BOTTOM``. Unknown values map to TOP.
        """
        value = (lane_str or "").strip().lower()
        try:
            return cls(value)
        except ValueError:
            mappings = {
                "utility": cls.SUPPORT,
                "sup": cls.SUPPORT,
                "supp": cls.SUPPORT,
                "adc": cls.BOTTOM,
                "bot": cls.BOTTOM,
                "mid": cls.MIDDLE,
                "jg": cls.JUNGLE,
                "jgl": cls.JUNGLE,
                "jungler": cls.JUNGLE,
            }
            return mappings.get(value, cls.TOP)
