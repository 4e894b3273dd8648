"""
Matching engine facade.

Ties the embedding client, candidate retriever, pair scorer, aggregator
and variant ranker together behind the operations callers use:
``match_all``, ``score_and_suggest``, ``build_variants``,
``compare_variants`` and ``suggest_focus_areas``.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from cvmatch.core.variants import VariantEvaluator, VariantRanker, analyze_focus_areas
from cvmatch.data.models import (
    AggregateScore,
    EmbeddingCoverage,
    FocusAreaAnalysis,
    MatchResult,
    RequirementItem,
    Variant,
    VariantComparison,
)
from cvmatch.data.stores import ChromaComponentStore, ComponentStore
from cvmatch.ml.embeddings import EmbeddingClient, EmbeddingProvider, create_provider
from cvmatch.utils.config import get_settings
from cvmatch.utils.constants import FocusArea
from cvmatch.utils.exceptions import StoreUnavailableError
from cvmatch.utils.logger import get_logger

from .aggregator import Aggregator
from .explanation import ExplanationGenerator
from .retriever import CandidateRetriever
from .scorer import PairScorer

logger = get_logger(__name__)

NO_PROFILE_ITEMS_REASONING = (
    "No profile items found. Please add your experiences, skills, and education."
)


class MatchingEngine:
    """
    Engine for matching job requirements against a profile.

    Each requirement is matched greedily to its single best profile item;
    requirements are independent and may be processed in parallel.
    """

    def __init__(
        self,
        client: EmbeddingClient,
        store: ComponentStore,
        explainer: Optional[ExplanationGenerator] = None,
        evaluator: Optional[VariantEvaluator] = None,
        candidate_limit: Optional[int] = None,
        max_concurrency: Optional[int] = None,
    ):
        """
        Initialize the matching engine.

        Args:
            client: Embedding client used for requirements and candidates.
            store: Store holding profile items.
            explainer: Match explanation generator. Defaults to the template one.
            evaluator: Variant evaluator. Defaults to the keyword one.
            candidate_limit: Candidates retrieved per requirement.
            max_concurrency: Requirements matched in parallel.
        """
        settings = get_settings().matching
        self.client = client
        self.store = store
        self.candidate_limit = (
            candidate_limit if candidate_limit is not None else settings.candidate_limit
        )
        self.max_concurrency = max_concurrency or settings.max_concurrency

        self.retriever = CandidateRetriever(store, default_limit=self.candidate_limit)
        self.scorer = PairScorer(client, explainer=explainer)
        self.aggregator = Aggregator()
        self.ranker = VariantRanker(evaluator=evaluator)

    def match_requirement(self, requirement: RequirementItem, owner_id: str) -> MatchResult:
        """
        Match one requirement that already carries an embedding.

        Raises:
            StoreUnavailableError: If the store cannot be read at all.
        """
        if not requirement.embedding:
            logger.warning(f"Requirement {requirement.id} could not be embedded")
            return MatchResult.no_match(requirement)

        candidates = self.retriever.find_candidates(
            owner_id, requirement.embedding, self.candidate_limit
        )
        return self.scorer.score_match(requirement, candidates)

    def match_all(
        self,
        requirements: Sequence[RequirementItem],
        owner_id: str,
    ) -> list[MatchResult]:
        """
        Match every requirement against the owner's profile items.

        Args:
            requirements: Requirement items of one job posting.
            owner_id: Owner of the profile items.

        Returns:
            One result per requirement, in input order; unmatched and failed
            requirements get the no-match sentinel.

        Raises:
            StoreUnavailableError: If the store cannot be read at all.
        """
        if not requirements:
            return []

        try:
            profile_items = self.store.list_all(owner_id)
        except Exception as e:
            logger.error(f"Could not list profile items for owner={owner_id}: {e}")
            raise StoreUnavailableError(
                f"Component store unavailable: {e}", operation="list_all", cause=e
            ) from e

        if not profile_items:
            logger.warning(f"Owner {owner_id} has no profile items")
            return [
                MatchResult.no_match(requirement, reasoning=NO_PROFILE_ITEMS_REASONING)
                for requirement in requirements
            ]

        hydrated = self._hydrate_requirements(requirements)
        semaphore = threading.BoundedSemaphore(self.max_concurrency)

        def run(requirement: RequirementItem) -> MatchResult:
            with semaphore:
                try:
                    return self.match_requirement(requirement, owner_id)
                except StoreUnavailableError:
                    raise
                except Exception as e:
                    logger.error(f"Matching requirement {requirement.id} failed: {e}")
                    return MatchResult.no_match(requirement)

        workers = min(self.max_concurrency, len(hydrated))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(run, requirement) for requirement in hydrated]
            results = [future.result() for future in futures]

        matched = sum(1 for result in results if result.is_match)
        logger.info(f"Matched {matched}/{len(results)} requirements for owner={owner_id}")
        return results

    def score_and_suggest(self, matches: Sequence[MatchResult]) -> AggregateScore:
        """Aggregate completed matches into an overall score with suggestions."""
        return self.aggregator.aggregate(matches)

    def build_variants(
        self,
        matches: Sequence[MatchResult],
        focus_areas: Optional[Sequence[FocusArea]] = None,
    ) -> list[Variant]:
        """Build and rank one CV variant per focus area (all areas by default)."""
        if focus_areas is None:
            focus_areas = list(FocusArea)
        return self.ranker.rank_variants(matches, focus_areas)

    def compare_variants(self, variants: Sequence[Variant]) -> list[VariantComparison]:
        """Rank variants and list their pros and cons."""
        return self.ranker.compare_variants(variants)

    def suggest_focus_areas(
        self,
        requirements: Sequence[RequirementItem],
        matches: Sequence[MatchResult],
    ) -> FocusAreaAnalysis:
        """Suggest focus areas from the posting and the matched items."""
        return analyze_focus_areas(requirements, matches)

    def embedding_coverage(self, owner_id: str) -> EmbeddingCoverage:
        """Report how many of the owner's items are already embedded."""
        return self.retriever.embedding_coverage(owner_id)

    def _hydrate_requirements(
        self, requirements: Sequence[RequirementItem]
    ) -> list[RequirementItem]:
        pending = [i for i, r in enumerate(requirements) if not r.has_embedding]
        if not pending:
            return list(requirements)

        logger.debug(f"Embedding {len(pending)} requirements without an embedding")
        vectors = self.client.batch_embed([requirements[i].text for i in pending])

        hydrated = list(requirements)
        for index, vector in zip(pending, vectors):
            if vector.size:
                hydrated[index] = requirements[index].model_copy(
                    update={"embedding": vector.tolist()}
                )
        return hydrated


def create_matching_engine(
    store: Optional[ComponentStore] = None,
    provider: Optional[EmbeddingProvider] = None,
    explainer: Optional[ExplanationGenerator] = None,
    evaluator: Optional[VariantEvaluator] = None,
) -> MatchingEngine:
    """
    Build a matching engine from settings.

    Args:
        store: Component store. Defaults to the ChromaDB store.
        provider: Embedding provider. Defaults to the configured one.
        explainer: Match explanation generator.
        evaluator: Variant evaluator.
    """
    client = EmbeddingClient(provider or create_provider())
    return MatchingEngine(
        client=client,
        store=store or ChromaComponentStore(),
        explainer=explainer,
        evaluator=evaluator,
    )
