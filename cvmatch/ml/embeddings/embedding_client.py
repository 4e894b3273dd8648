"""
Embedding client with caching, retries and bounded batch concurrency.

Transient provider failures (HTTP 5xx, connection resets, timeouts, DNS
failures) are retried with exponential backoff; anything else fails on the
first attempt.
"""

import re
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence

import numpy as np
import requests
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from cvmatch.data.models import ProfileItem
from cvmatch.utils.config import get_settings
from cvmatch.utils.constants import TRANSIENT_ERROR_PATTERNS
from cvmatch.utils.exceptions import EmbeddingError, ProviderError
from cvmatch.utils.logger import get_logger

from .embedding_cache import EmbeddingCache
from .providers import EmbeddingProvider

logger = get_logger(__name__)

_TRANSIENT_RE = re.compile("|".join(TRANSIENT_ERROR_PATTERNS), re.IGNORECASE)

_CONNECTION_ERRORS = (
    requests.ConnectionError,
    requests.Timeout,
    ConnectionError,
    TimeoutError,
)


def empty_vector() -> np.ndarray:
    """The placeholder returned for a failed slot in ``batch_embed``."""
    return np.empty(0, dtype=np.float32)


def is_transient_error(exc: BaseException) -> bool:
    """
    Decide whether a provider failure is worth retrying.

    Only retries on:
    - Errors carrying an HTTP status >= 500
    - Connection errors and timeouts
    - Messages naming a connection reset, timeout or DNS failure

    Does NOT retry on client errors (4xx).
    """
    status_code = getattr(exc, "status_code", None)
    if status_code is not None:
        return status_code >= 500

    if isinstance(exc, _CONNECTION_ERRORS):
        return True

    cause = getattr(exc, "cause", None) or exc.__cause__
    if cause is not None and isinstance(cause, _CONNECTION_ERRORS):
        return True

    return bool(_TRANSIENT_RE.search(str(exc)))


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.warning(
        f"Transient embedding failure (attempt {retry_state.attempt_number}), "
        f"retrying in {wait:.2f}s: {exc}"
    )


class EmbeddingClient:
    """
    Produces embeddings through a provider, backed by an LRU/TTL cache.

    The cache is the client's only mutable state and is safe to share
    between the worker threads of ``batch_embed``.
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        cache: Optional[EmbeddingCache] = None,
        use_cache: Optional[bool] = None,
        max_attempts: Optional[int] = None,
        backoff_base_seconds: Optional[float] = None,
        max_concurrency: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the client.

        Args:
            provider: Embedding provider to call on cache misses.
            cache: Cache to use. A new one is built from settings when omitted.
            use_cache: Disable caching entirely when False. Defaults to config.
            max_attempts: Total attempts per text, including the first.
            backoff_base_seconds: First retry delay; doubles on each retry.
            max_concurrency: Default concurrency for ``batch_embed``.
            sleep: Sleep function used between retries.
        """
        settings = get_settings()
        self.provider = provider
        self.max_attempts = max_attempts or settings.embedding.max_attempts
        self.backoff_base_seconds = (
            backoff_base_seconds
            if backoff_base_seconds is not None
            else settings.embedding.backoff_base_seconds
        )
        self.max_concurrency = max_concurrency or settings.embedding.max_concurrency
        self._sleep = sleep

        if use_cache is None:
            use_cache = settings.cache.enabled
        if use_cache:
            self._cache = cache if cache is not None else EmbeddingCache()
        else:
            self._cache = None

    @property
    def cache(self) -> Optional[EmbeddingCache]:
        """The embedding cache, or None when caching is disabled."""
        return self._cache

    @property
    def dimension(self) -> int:
        return self.provider.dimension

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_base_seconds, min=0),
            retry=retry_if_exception(is_transient_error),
            before_sleep=_log_retry,
            sleep=self._sleep,
            reraise=True,
        )

    def _call_provider(self, text: str) -> np.ndarray:
        values = self.provider.embed(text)
        if values is None or len(values) == 0:
            raise ProviderError("Provider returned an empty embedding")
        return np.asarray(values, dtype=np.float32).ravel()

    def embed(self, text: str) -> np.ndarray:
        """
        Generate an embedding for a text.

        Args:
            text: Input text. Blank text is rejected without a provider call.

        Returns:
            float32 vector of length D.

        Raises:
            EmbeddingError: On a permanent failure or once retries are exhausted.
        """
        if not text or not text.strip():
            raise EmbeddingError("Cannot embed empty text", attempts=0)

        if self._cache is not None:
            cached = self._cache.get(text)
            if cached is not None:
                return cached

        attempts = 0
        try:
            for attempt in self._retrying():
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    vector = self._call_provider(text)
        except Exception as e:
            kind = "transient" if is_transient_error(e) else "permanent"
            logger.error(
                f"Embedding failed after {attempts} attempt(s) ({kind}): {e}"
            )
            raise EmbeddingError(
                f"Failed to generate embedding: {e}", attempts=attempts, cause=e
            ) from e

        if self._cache is not None:
            self._cache.set(text, vector)
        return vector

    def batch_embed(
        self,
        texts: Sequence[str],
        max_concurrency: Optional[int] = None,
    ) -> list[np.ndarray]:
        """
        Embed many texts with bounded concurrency.

        Args:
            texts: Texts to embed.
            max_concurrency: Maximum in-flight provider calls.

        Returns:
            One vector per input text, in input order. Failed slots hold an
            empty vector; individual failures never raise.
        """
        if not texts:
            return []

        limit = max_concurrency or self.max_concurrency
        if limit < 1:
            raise ValueError("max_concurrency must be at least 1")

        semaphore = threading.BoundedSemaphore(limit)

        def embed_one(text: str) -> np.ndarray:
            with semaphore:
                try:
                    return self.embed(text)
                except EmbeddingError as e:
                    logger.warning(f"Excluding text from batch: {e.message}")
                    return empty_vector()

        with ThreadPoolExecutor(max_workers=min(limit, len(texts))) as pool:
            results = list(pool.map(embed_one, texts))

        failed = sum(1 for vector in results if vector.size == 0)
        logger.debug(f"Batch embedded {len(texts) - failed}/{len(texts)} texts")
        return results

    def embed_profile_item(self, item: ProfileItem) -> np.ndarray:
        """Embed a profile item from its canonical text."""
        return self.embed(item.embedding_text())

    def hydrate_items(
        self,
        items: Sequence[ProfileItem],
        dimension: Optional[int] = None,
    ) -> list[ProfileItem]:
        """
        Fill in missing or wrong-sized embeddings.

        Args:
            items: Profile items, left untouched.
            dimension: Required vector length. Any embedding is accepted
                when omitted.

        Returns:
            Items in input order. Items that needed an embedding are copies;
            those that could not be embedded come back without one.
        """
        def usable(item: ProfileItem) -> bool:
            if dimension is None:
                return item.has_embedding
            return item.has_embedding_of(dimension)

        pending = [i for i, item in enumerate(items) if not usable(item)]
        if not pending:
            return list(items)

        vectors = self.batch_embed([items[i].embedding_text() for i in pending])

        hydrated = list(items)
        for index, vector in zip(pending, vectors):
            embedding = vector.tolist() if vector.size else None
            if embedding is not None and dimension is not None and len(embedding) != dimension:
                logger.warning(
                    f"Provider returned {len(embedding)} dimensions for item "
                    f"{items[index].id}, expected {dimension}"
                )
                embedding = None
            hydrated[index] = items[index].model_copy(update={"embedding": embedding})

        return hydrated
