"""Presentation layer - User interfaces."""
from .cli import StatsCommand

__all__ = [
    "StatsCommand",
]
