"""Infrastructure reference-data module."""
from .tables import ReferenceTables
from .data_dragon import DataDragonLoader

__all__ = [
    'ReferenceTables',
    'DataDragonLoader',
]
