"""
Shared test fixtures for the cvmatch test suite.

Sets environment variables before any cvmatch imports so settings never
touch the network or the log directory, then provides a fake embedding
provider, scripted component stores and item factories.
"""

import os

# === Set environment BEFORE any cvmatch imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("LOG_FILE_OUTPUT", "false")
os.environ.setdefault("LOG_CONSOLE_OUTPUT", "false")
os.environ.setdefault("EMBEDDING_DEVICE", "cpu")
os.environ.setdefault("EMBEDDING_BACKOFF_BASE_SECONDS", "0")

import threading
from typing import Any, Callable, Optional, Sequence

import pytest

from cvmatch.core.matching import MatchingEngine
from cvmatch.data.models import MatchResult, ProfileItem, RequirementItem
from cvmatch.data.stores import ComponentStore, InMemoryComponentStore
from cvmatch.ml.embeddings import EmbeddingCache, EmbeddingClient, EmbeddingProvider
from cvmatch.utils.constants import MatchQuality, ProfileCategory, RequirementCategory
from cvmatch.utils.exceptions import CapabilityUnsupportedError, StoreError


# ---------------------------------------------------------------------------
# Fake embedding provider
# ---------------------------------------------------------------------------


class FakeProvider(EmbeddingProvider):
    """
    Deterministic provider.

    Texts found in ``vectors`` get that vector; any other text gets a
    vector derived from its length. ``failures`` maps a text to a list of
    exceptions raised on successive calls before the text succeeds.
    """

    def __init__(
        self,
        vectors: Optional[dict[str, list[float]]] = None,
        failures: Optional[dict[str, list[BaseException]]] = None,
        dimension: int = 3,
        on_call: Optional[Callable[[str], None]] = None,
    ):
        self.vectors = dict(vectors or {})
        self.failures = {text: list(errors) for text, errors in (failures or {}).items()}
        self._dimension = dimension
        self.on_call = on_call
        self.calls: list[str] = []
        self._lock = threading.Lock()

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def calls_for(self, text: str) -> int:
        return sum(1 for call in self.calls if call == text)

    def embed(self, text: str) -> list[float]:
        with self._lock:
            self.calls.append(text)
            pending = self.failures.get(text)
            error = pending.pop(0) if pending else None
        if self.on_call:
            self.on_call(text)
        if error is not None:
            raise error
        if text in self.vectors:
            return list(self.vectors[text])
        base = float(len(text) % 7 + 1)
        return [base] + [1.0] * (self._dimension - 1)


# ---------------------------------------------------------------------------
# Scripted component store
# ---------------------------------------------------------------------------


class ScriptedStore(ComponentStore):
    """
    Store whose tiers behave as scripted.

    Each behaviour is ``"ok"``, ``"empty"``, ``"unsupported"`` (vector search
    only) or ``"error"``.
    """

    def __init__(
        self,
        items: Sequence[ProfileItem] = (),
        vector_search: str = "unsupported",
        list_with_embeddings: str = "ok",
        list_all: str = "ok",
        search_results: Optional[Sequence[ProfileItem]] = None,
    ):
        self.items = list(items)
        self.behaviour = {
            "vector_search": vector_search,
            "list_with_embeddings": list_with_embeddings,
            "list_all": list_all,
        }
        self.search_results = list(search_results) if search_results is not None else None
        self.calls: list[str] = []

    def _check(self, operation: str) -> bool:
        self.calls.append(operation)
        behaviour = self.behaviour[operation]
        if behaviour == "unsupported":
            raise CapabilityUnsupportedError("no index", operation=operation)
        if behaviour == "error":
            raise StoreError("connection refused", operation=operation)
        return behaviour == "ok"

    def vector_search(self, owner_id: str, vector: list[float], k: int) -> list[ProfileItem]:
        if not self._check("vector_search"):
            return []
        results = self.search_results if self.search_results is not None else self.items
        return [item for item in results if item.owner_id == owner_id][:k]

    def list_with_embeddings(self, owner_id: str) -> list[ProfileItem]:
        if not self._check("list_with_embeddings"):
            return []
        return [item for item in self.items if item.owner_id == owner_id and item.embedding]

    def list_all(self, owner_id: str) -> list[ProfileItem]:
        if not self._check("list_all"):
            return []
        return [item for item in self.items if item.owner_id == owner_id]


# ---------------------------------------------------------------------------
# Factory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_requirement():
    """Factory that returns a callable to build RequirementItem models."""
    counter = {"n": 0}

    def _factory(
        title: str = "Python development",
        description: str = "",
        category: RequirementCategory = RequirementCategory.SKILL,
        is_required: bool = True,
        embedding: Optional[list[float]] = (1.0, 0.0, 0.0),
        **kwargs: Any,
    ) -> RequirementItem:
        counter["n"] += 1
        return RequirementItem(
            id=kwargs.pop("id", f"req-{counter['n']}"),
            title=title,
            description=description,
            category=category,
            is_required=is_required,
            embedding=list(embedding) if embedding is not None else None,
            **kwargs,
        )

    return _factory


@pytest.fixture
def make_profile_item():
    """Factory that returns a callable to build ProfileItem models."""
    counter = {"n": 0}

    def _factory(
        title: str = "Backend Engineer",
        category: ProfileCategory = ProfileCategory.EXPERIENCE,
        embedding: Optional[list[float]] = (1.0, 0.0, 0.0),
        owner_id: str = "user-1",
        description: Optional[str] = None,
        highlights: Optional[list[str]] = None,
        **kwargs: Any,
    ) -> ProfileItem:
        counter["n"] += 1
        return ProfileItem(
            id=kwargs.pop("id", f"item-{counter['n']}"),
            owner_id=owner_id,
            category=category,
            title=title,
            description=description,
            highlights=highlights or [],
            embedding=list(embedding) if embedding is not None else None,
            **kwargs,
        )

    return _factory


@pytest.fixture
def make_match(make_requirement, make_profile_item):
    """Factory for MatchResult models with a given score (0 gives the sentinel)."""

    def _factory(
        score: int,
        requirement: Optional[RequirementItem] = None,
        profile_item: Optional[ProfileItem] = None,
        is_required: bool = True,
        requirement_category: RequirementCategory = RequirementCategory.REQUIREMENT,
        item_category: ProfileCategory = ProfileCategory.EXPERIENCE,
    ) -> MatchResult:
        requirement = requirement or make_requirement(
            is_required=is_required, category=requirement_category
        )
        if score == 0 and profile_item is None:
            return MatchResult.no_match(requirement)
        profile_item = profile_item or make_profile_item(category=item_category)
        return MatchResult(
            requirement=requirement,
            profile_item=profile_item,
            score=score,
            quality_tier=MatchQuality.from_score(score),
            reasoning="test",
        )

    return _factory


# ---------------------------------------------------------------------------
# Engine fixtures (no external services)
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def embedding_client(fake_provider):
    """Embedding client over the fake provider, without retry sleeps."""
    return EmbeddingClient(
        fake_provider,
        cache=EmbeddingCache(max_size=100, ttl_seconds=3600),
        backoff_base_seconds=0,
        sleep=lambda _: None,
    )


@pytest.fixture
def memory_store():
    return InMemoryComponentStore()


@pytest.fixture
def make_engine(embedding_client):
    """Factory building a MatchingEngine over a given store."""

    def _factory(store: ComponentStore, **kwargs: Any) -> MatchingEngine:
        return MatchingEngine(client=kwargs.pop("client", embedding_client), store=store, **kwargs)

    return _factory


@pytest.fixture
def make_provider():
    """Factory for FakeProvider instances."""
    return FakeProvider


@pytest.fixture
def make_store():
    """Factory for ScriptedStore instances."""
    return ScriptedStore
