"""
Configuration management for the cvmatch engine.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent
PACKAGE_DIR = ROOT_DIR / "cvmatch"
DATA_DIR = ROOT_DIR / "data"


class EmbeddingSettings(BaseSettings):
    """Embedding provider and client configuration."""

    model_config = SettingsConfigDict(env_prefix="EMBEDDING_")

    provider: Literal["sentence_transformers", "http"] = "sentence_transformers"

    # Local sentence-transformers model
    model_name: str = "sentence-transformers/all-mpnet-base-v2"
    device: Literal["cpu", "cuda", "mps", "auto"] = "auto"

    # Remote OpenAI-compatible endpoint
    api_url: str = "https://api.openai.com/v1/embeddings"
    api_key: Optional[str] = None
    api_model: str = "text-embedding-3-small"
    request_timeout: float = 30.0

    # Vector dimension D, fixed per deployment
    dimension: int = 768

    # Retry policy
    max_attempts: int = 3
    backoff_base_seconds: float = 0.3

    # Batch embedding
    max_concurrency: int = 10

    @field_validator("device")
    @classmethod
    def validate_device(cls, v: str) -> str:
        """Auto-detect device if set to auto."""
        if v == "auto":
            try:
                import torch

                if torch.cuda.is_available():
                    return "cuda"
                elif torch.backends.mps.is_available():
                    return "mps"
            except ImportError:
                pass
            return "cpu"
        return v

    @field_validator("max_attempts", "max_concurrency")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v


class CacheSettings(BaseSettings):
    """Embedding cache configuration."""

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    enabled: bool = True
    max_entries: int = 1000
    ttl_seconds: float = 24 * 60 * 60


class MatchingSettings(BaseSettings):
    """Matching, scoring and aggregation configuration."""

    model_config = SettingsConfigDict(env_prefix="MATCHING_")

    # Candidate retrieval
    candidate_limit: int = 20
    retrieval_similarity_threshold: float = 0.7

    # Pair scoring
    min_match_score: float = 0.3
    keyword_bonus_max: int = 15

    # Aggregation
    required_weight: float = 0.7
    optional_weight: float = 0.3
    suggestion_threshold: int = 60

    # Variants
    variant_min_score: int = 40

    # Requirements matched in parallel
    max_concurrency: int = 4


class VectorStoreSettings(BaseSettings):
    """Vector database configuration for profile item embeddings."""

    model_config = SettingsConfigDict(env_prefix="VECTOR_")

    persist_directory: Path = DATA_DIR / "vectors"
    collection_name: str = "profile_items"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    file_path: Path = ROOT_DIR / "logs" / "cvmatch.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    console_output: bool = True
    file_output: bool = True


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    name: str = "cvmatch"
    version: str = "0.1.0"
    description: str = "Semantic matching and scoring engine for job requirements"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Nested settings
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Global settings instance (singleton pattern)
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Force reload settings from environment."""
    global _settings
    _settings = AppSettings()
    return _settings
