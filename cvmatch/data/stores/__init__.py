"""
Component stores: read-only access to a profile owner's items.

Components:
- ComponentStore: Store interface (indexed search is optional)
- InMemoryComponentStore: Dict-backed store, optionally indexed
- ChromaComponentStore: Persistent ChromaDB-backed store
"""

from .base import ComponentStore
from .chroma import ChromaComponentStore
from .memory import InMemoryComponentStore

__all__ = [
    "ComponentStore",
    "ChromaComponentStore",
    "InMemoryComponentStore",
]
