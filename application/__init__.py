"""Application layer - Extraction pipelines and the statistics engine."""
from .services import StatsEngine

__all__ = [
    'StatsEngine',
]
