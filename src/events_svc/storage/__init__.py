"""Persistent stores for unsent events."""

from .base import PersistentStore
from .file import FileStore
from .memory import InMemoryStore
from .redis import RedisStore

__all__ = [
    "PersistentStore",
    "FileStore",
    "InMemoryStore",
    "RedisStore",
]
