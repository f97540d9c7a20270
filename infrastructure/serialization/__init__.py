"""Infrastructure serialization module."""
from .qwik_state import SerializedState, extract_state_block, MAX_DEPTH

__all__ = [
    'SerializedState',
    'extract_state_block',
    'MAX_DEPTH',
]
