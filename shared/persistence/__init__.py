from .repository import RecordRepository
from .locks import EntityLocks
from .immutability import register_immutable
from .clock import utcnow

__all__ = [
    "RecordRepository",
    "EntityLocks",
    "register_immutable",
    "utcnow",
]
