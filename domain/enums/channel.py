"""Upstream channels a query can be served from."""
from enum import Enum


class Channel(Enum):
    """
    Provides:
    - PRIMARY: structured JSON query endpoint
    - SECONDARY: server-rendered HTML page carrying a serialized-state blob
    """

    PRIMARY = "primary"
    SECONDARY = "secondary"
