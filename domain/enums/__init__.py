"""Domain enumerations."""
from .lane import Lane
from .data_source import DataSource
from .channel import Channel

__all__ = [
    'Lane',
    'DataSource',
    'Channel',
]
