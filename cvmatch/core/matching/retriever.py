"""
Tiered candidate retrieval.

Candidates for one requirement are looked up in three tiers:

1. Indexed vector search in the store.
2. In-process brute-force cosine ranking over the owner's embedded items.
3. The owner's items in store order, unranked.

A store without an index moves on to tier 2 without counting as a failure;
a hard tier-1 error skips straight to tier 3. Only a tier-3 failure is
fatal.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from cvmatch.data.models import EmbeddingCoverage, ProfileItem
from cvmatch.data.stores import ComponentStore
from cvmatch.ml.embeddings import rank_by_similarity
from cvmatch.utils.config import get_settings
from cvmatch.utils.exceptions import CapabilityUnsupportedError, StoreUnavailableError
from cvmatch.utils.logger import get_logger

logger = get_logger(__name__)


class TierStatus(str, Enum):
    """Outcome of one retrieval tier."""

    OK = "ok"
    UNSUPPORTED = "unsupported"
    ERROR = "error"


@dataclass
class TierOutcome:
    """Items returned by a tier, or why it produced none."""

    status: TierStatus
    items: list[ProfileItem] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def hit(self) -> bool:
        return self.status == TierStatus.OK and bool(self.items)


class CandidateRetriever:
    """Finds candidate profile items for a query vector."""

    def __init__(
        self,
        store: ComponentStore,
        similarity_threshold: Optional[float] = None,
        default_limit: Optional[int] = None,
    ):
        """
        Initialize the retriever.

        Args:
            store: Store holding the owner's profile items.
            similarity_threshold: Tier-2 cut-off; only similarities strictly
                above it are kept. Defaults to config setting.
            default_limit: Limit used when ``find_candidates`` gets none.
        """
        settings = get_settings().matching
        self.store = store
        self.similarity_threshold = (
            similarity_threshold
            if similarity_threshold is not None
            else settings.retrieval_similarity_threshold
        )
        self.default_limit = (
            default_limit if default_limit is not None else settings.candidate_limit
        )

    def find_candidates(
        self,
        owner_id: str,
        query_vector: Sequence[float] | np.ndarray,
        limit: Optional[int] = None,
    ) -> list[ProfileItem]:
        """
        Retrieve up to ``limit`` candidate items for a query vector.

        Args:
            owner_id: Owner whose items are searched.
            query_vector: Requirement embedding.
            limit: Maximum number of candidates.

        Returns:
            Candidates, most similar first when a ranking tier succeeded.

        Raises:
            StoreUnavailableError: If even the unranked listing failed.
            ValueError: If ``limit`` is negative.
        """
        limit = limit if limit is not None else self.default_limit
        if limit < 0:
            raise ValueError("limit must not be negative")
        if limit == 0:
            return []

        vector = [float(v) for v in np.asarray(query_vector).ravel()]

        indexed = self._indexed_search(owner_id, vector, limit)
        if indexed.hit:
            return indexed.items[:limit]

        if indexed.status == TierStatus.UNSUPPORTED:
            logger.info(f"index_unsupported owner={owner_id}")
        elif indexed.status == TierStatus.ERROR:
            logger.warning(f"index_error owner={owner_id}: {indexed.error}")
        else:
            logger.debug(f"index_miss owner={owner_id}")

        if indexed.status != TierStatus.ERROR:
            scanned = self._scan_search(owner_id, vector, limit)
            if scanned.hit:
                return scanned.items

            if scanned.status == TierStatus.ERROR:
                logger.warning(f"scan_error owner={owner_id}: {scanned.error}")
            else:
                logger.debug(f"scan_miss owner={owner_id}")

        logger.info(f"unranked_fallback owner={owner_id} limit={limit}")
        return self._unranked(owner_id, limit)

    def _indexed_search(self, owner_id: str, vector: list[float], limit: int) -> TierOutcome:
        try:
            items = self.store.vector_search(owner_id, vector, limit)
        except CapabilityUnsupportedError as e:
            return TierOutcome(TierStatus.UNSUPPORTED, error=e)
        except Exception as e:
            return TierOutcome(TierStatus.ERROR, error=e)
        return TierOutcome(TierStatus.OK, items=list(items or []))

    def _scan_search(self, owner_id: str, vector: list[float], limit: int) -> TierOutcome:
        try:
            items = self.store.list_with_embeddings(owner_id)
            ranked = rank_by_similarity(
                vector, items, threshold=self.similarity_threshold, limit=limit
            )
        except Exception as e:
            return TierOutcome(TierStatus.ERROR, error=e)
        return TierOutcome(TierStatus.OK, items=[item for item, _ in ranked])

    def _unranked(self, owner_id: str, limit: int) -> list[ProfileItem]:
        try:
            items = self.store.list_all(owner_id)
        except Exception as e:
            logger.error(f"Component store unavailable for owner={owner_id}: {e}")
            raise StoreUnavailableError(
                f"Component store unavailable: {e}", operation="list_all", cause=e
            ) from e
        return list(items)[:limit]

    def embedding_coverage(self, owner_id: str) -> EmbeddingCoverage:
        """
        Report how many of the owner's items carry an embedding.

        Raises:
            StoreUnavailableError: If the store cannot list the owner's items.
        """
        try:
            items = self.store.list_all(owner_id)
        except Exception as e:
            raise StoreUnavailableError(
                f"Component store unavailable: {e}", operation="list_all", cause=e
            ) from e

        total = len(items)
        with_embedding = sum(1 for item in items if item.has_embedding)
        return EmbeddingCoverage(
            total=total,
            with_embedding=with_embedding,
            without_embedding=total - with_embedding,
            percentage=round(with_embedding / total * 100) if total else 0,
        )
