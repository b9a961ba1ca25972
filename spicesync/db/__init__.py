"""SQLite key-value storage for the pantry and user profile."""

from .kv import KeyValueStore
from .schema import ensure_schema

__all__ = [
    "KeyValueStore",
    "ensure_schema",
]
