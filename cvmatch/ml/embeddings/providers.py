"""
Embedding providers.

A provider turns one text into one vector and knows nothing about caching
or retries; ``EmbeddingClient`` layers those on top.
"""

from abc import ABC, abstractmethod
from typing import Optional

import requests

from cvmatch.utils.config import get_settings
from cvmatch.utils.exceptions import ConfigurationError, ProviderError
from cvmatch.utils.logger import get_logger

logger = get_logger(__name__)


class EmbeddingProvider(ABC):
    """Abstract base class for embedding providers."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Length of the vectors this provider returns."""
        pass

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """
        Generate an embedding for ``text``.

        Raises:
            ProviderError: If the upstream call failed.
        """
        pass


class SentenceTransformerProvider(EmbeddingProvider):
    """
    Provider backed by a local sentence-transformers model.

    The model is loaded on first use.
    """

    def __init__(
        self,
        model_name: Optional[str] = None,
        device: Optional[str] = None,
        dimension: Optional[int] = None,
    ):
        """
        Initialize the provider.

        Args:
            model_name: Name of the sentence-transformers model to use.
                       Defaults to config setting.
            device: Device to run model on ('cpu', 'cuda', 'mps').
                   Defaults to config setting.
            dimension: Expected vector length. Defaults to config setting.
        """
        settings = get_settings()
        self.model_name = model_name or settings.embedding.model_name
        self.device = device or settings.embedding.device
        self._dimension = dimension or settings.embedding.dimension

        self._model = None

    def _load_model(self) -> None:
        """Lazy load the embedding model."""
        if self._model is not None:
            return

        try:
            from sentence_transformers import SentenceTransformer

            logger.info(f"Loading embedding model: {self.model_name}")
            self._model = SentenceTransformer(self.model_name, device=self.device)
            logger.info(f"Embedding model loaded on device: {self.device}")

        except ImportError:
            logger.error(
                "sentence-transformers not installed. "
                "Install with: pip install sentence-transformers"
            )
            raise
        except Exception as e:
            logger.error(f"Failed to load embedding model: {e}")
            raise ProviderError(f"Failed to load embedding model: {e}", cause=e) from e

    @property
    def model(self):
        """Get the underlying sentence-transformer model."""
        self._load_model()
        return self._model

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed(self, text: str) -> list[float]:
        vector = self.model.encode(
            text,
            normalize_embeddings=True,
            convert_to_numpy=True,
            show_progress_bar=False,
        )
        return vector.astype(float).tolist()


class HTTPEmbeddingProvider(EmbeddingProvider):
    """
    Provider for an OpenAI-compatible ``/embeddings`` HTTP endpoint.

    Non-2xx responses raise ``ProviderError`` carrying the status code so
    the client can tell transient server failures from client errors.
    Connection errors and timeouts from ``requests`` propagate unchanged.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        dimension: Optional[int] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        settings = get_settings().embedding
        self.api_url = api_url or settings.api_url
        self.api_key = api_key if api_key is not None else settings.api_key
        self.model = model or settings.api_model
        self._dimension = dimension or settings.dimension
        self.timeout = timeout or settings.request_timeout
        self.session = session or requests.Session()

        if not self.api_key:
            raise ConfigurationError(
                "HTTP embedding provider needs an API key (EMBEDDING_API_KEY)"
            )

    @property
    def dimension(self) -> int:
        return self._dimension

    def embed(self, text: str) -> list[float]:
        response = self.session.post(
            self.api_url,
            json={"model": self.model, "input": text, "dimensions": self._dimension},
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
        )

        if response.status_code >= 400:
            raise ProviderError(
                f"Embedding request failed with HTTP {response.status_code}: "
                f"{response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()["data"]
            return [float(v) for v in data[0]["embedding"]]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(
                f"Malformed embedding response: {e}",
                status_code=response.status_code,
                cause=e,
            ) from e


def create_provider(name: Optional[str] = None) -> EmbeddingProvider:
    """
    Build the provider named in settings (or ``name``).

    Args:
        name: ``"sentence_transformers"`` or ``"http"``.
    """
    name = name or get_settings().embedding.provider
    if name == "sentence_transformers":
        return SentenceTransformerProvider()
    if name == "http":
        return HTTPEmbeddingProvider()
    raise ConfigurationError(f"Unknown embedding provider: {name}")
