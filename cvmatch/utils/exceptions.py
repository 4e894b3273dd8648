"""
Exception hierarchy for the cvmatch engine.

Transient provider failures surface as ``EmbeddingError`` only after the
retry budget is spent; permanent failures fail fast. A missing store
capability is signalled with ``CapabilityUnsupportedError`` and is not a
failure. A run fails as a whole only with ``StoreUnavailableError``.
"""

from typing import Any, Optional


class CVMatchError(Exception):
    """Base exception for the matching engine."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/response."""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ConfigurationError(CVMatchError):
    """Raised when the engine cannot be built from the current settings."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="CONFIGURATION_ERROR", **kwargs)


class ProviderError(CVMatchError):
    """Raised by an embedding provider for a failed upstream call."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        details = kwargs.pop("details", {})
        if status_code is not None:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, error_code="PROVIDER_ERROR", details=details, **kwargs)


class EmbeddingError(CVMatchError):
    """Raised when an embedding could not be produced."""

    def __init__(self, message: str, attempts: int = 0, **kwargs):
        details = kwargs.pop("details", {})
        details["attempts"] = attempts
        self.attempts = attempts
        super().__init__(message, error_code="EMBEDDING_ERROR", details=details, **kwargs)


class DimensionMismatchError(CVMatchError, ValueError):
    """Raised when two vectors of different length are compared."""

    def __init__(self, left: int, right: int):
        super().__init__(
            f"Embeddings must have the same length ({left} != {right})",
            error_code="DIMENSION_MISMATCH",
            details={"left": left, "right": right},
        )


class StoreError(CVMatchError):
    """Raised when a component store query fails."""

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if operation:
            details["operation"] = operation
        kwargs.setdefault("error_code", "STORE_ERROR")
        super().__init__(message, details=details, **kwargs)


class CapabilityUnsupportedError(StoreError):
    """Raised when a store lacks a capability, e.g. indexed vector search."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="CAPABILITY_UNSUPPORTED", **kwargs)


class StoreUnavailableError(StoreError):
    """Raised when every retrieval tier failed because the store is unreachable."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="STORE_UNAVAILABLE", **kwargs)
