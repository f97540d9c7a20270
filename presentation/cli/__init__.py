"""Presentation CLI exports."""
from .stats_command import StatsCommand, build_parser

__all__ = [
    "StatsCommand",
    "build_parser",
]
