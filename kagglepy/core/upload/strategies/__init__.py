"""Upload strategies."""
from .archiving import ArchiveMode

__all__ = [
    'ArchiveMode',
]
