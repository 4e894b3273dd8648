"""
Component store interface.

A component store gives the engine read-only access to one owner's
profile items. Indexed vector search is optional: stores without an index
raise ``CapabilityUnsupportedError`` and the engine falls back to scanning.
"""

from abc import ABC, abstractmethod

from cvmatch.data.models import ProfileItem


class ComponentStore(ABC):
    """Abstract base class for profile item stores."""

    @abstractmethod
    def vector_search(
        self,
        owner_id: str,
        vector: list[float],
        k: int,
    ) -> list[ProfileItem]:
        """
        Return up to ``k`` of the owner's items nearest to ``vector``.

        Raises:
            CapabilityUnsupportedError: If the store has no vector index.
            StoreError: If the query failed.
        """
        pass

    @abstractmethod
    def list_all(self, owner_id: str) -> list[ProfileItem]:
        """Return every item of the owner, in insertion order."""
        pass

    def list_with_embeddings(self, owner_id: str) -> list[ProfileItem]:
        """Return the owner's items that carry an embedding."""
        return [item for item in self.list_all(owner_id) if item.embedding]
