"""Domain interfaces."""
from .reference_data import IReferenceData

__all__ = [
    'IReferenceData',
]
