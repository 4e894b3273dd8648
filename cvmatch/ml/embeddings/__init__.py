"""
Text embedding, caching and vector similarity.

Components:
- EmbeddingProvider: Provider interface (local sentence-transformers or HTTP)
- EmbeddingCache: Bounded LRU/TTL cache keyed by text digest
- EmbeddingClient: Cached, retrying embedding front end with batch support
- cosine_similarity: Dimension-checked cosine similarity
"""

from .embedding_cache import EmbeddingCache, cache_key

from .providers import (
    EmbeddingProvider,
    HTTPEmbeddingProvider,
    SentenceTransformerProvider,
    create_provider,
)

from .embedding_client import (
    EmbeddingClient,
    empty_vector,
    is_transient_error,
)

from .similarity import cosine_similarity, rank_by_similarity

__all__ = [
    # Cache
    "EmbeddingCache",
    "cache_key",
    # Providers
    "EmbeddingProvider",
    "HTTPEmbeddingProvider",
    "SentenceTransformerProvider",
    "create_provider",
    # Client
    "EmbeddingClient",
    "empty_vector",
    "is_transient_error",
    # Similarity
    "cosine_similarity",
    "rank_by_similarity",
]
