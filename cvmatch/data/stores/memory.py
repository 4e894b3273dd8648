"""
In-memory component store.

Holds profile items in insertion order. Without ``indexed=True`` the store
behaves like a backend with no vector index and rejects ``vector_search``.
"""

from collections import defaultdict
from typing import Iterable, Optional

from cvmatch.data.models import ProfileItem
from cvmatch.ml.embeddings.similarity import rank_by_similarity
from cvmatch.utils.exceptions import CapabilityUnsupportedError
from cvmatch.utils.logger import get_logger

from .base import ComponentStore

logger = get_logger(__name__)


class InMemoryComponentStore(ComponentStore):
    """Component store backed by a dict of owner id to item list."""

    def __init__(
        self,
        items: Optional[Iterable[ProfileItem]] = None,
        indexed: bool = False,
    ):
        """
        Initialize the store.

        Args:
            items: Initial items. Items without ``owner_id`` are rejected.
            indexed: Whether ``vector_search`` is available.
        """
        self.indexed = indexed
        self._items: dict[str, list[ProfileItem]] = defaultdict(list)
        if items:
            self.add_items(items)

    def add_items(self, items: Iterable[ProfileItem]) -> int:
        """Add items, replacing any existing item with the same id and owner."""
        added = 0
        for item in items:
            if not item.owner_id:
                raise ValueError(f"Profile item {item.id} has no owner_id")
            bucket = self._items[item.owner_id]
            for i, existing in enumerate(bucket):
                if existing.id == item.id:
                    bucket[i] = item
                    break
            else:
                bucket.append(item)
            added += 1
        logger.debug(f"Stored {added} profile items")
        return added

    def vector_search(
        self,
        owner_id: str,
        vector: list[float],
        k: int,
    ) -> list[ProfileItem]:
        if not self.indexed:
            raise CapabilityUnsupportedError(
                "In-memory store has no vector index",
                operation="vector_search",
            )
        ranked = rank_by_similarity(vector, self._items.get(owner_id, []), limit=k)
        return [item for item, _ in ranked]

    def list_all(self, owner_id: str) -> list[ProfileItem]:
        return list(self._items.get(owner_id, []))

    def owners(self) -> list[str]:
        """Owner ids with at least one item."""
        return [owner for owner, items in self._items.items() if items]
