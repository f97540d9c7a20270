"""Which aggregate a recommended page/plan was taken from."""
from enum import Enum


class DataSource(Enum):
    """Lolalytics shows a 'most common' and a 'highest win rate' variant."""

    MOST_COMMON = "most_common"
    HIGHEST_WR = "highest_wr"

    @property
    def section_key(self) -> str:
        """Key of the matching section in a build summary payload."""
        return "pick" if self is DataSource.MOST_COMMON else "win"

    @classmethod
    def ordered(cls) -> list['DataSource']:
        return [cls.MOST_COMMON, cls.HIGHEST_WR]
