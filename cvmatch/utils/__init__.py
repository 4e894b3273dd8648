"""
Utility modules for cvmatch.

This package contains shared utilities used across the engine:
- config: Configuration management
- logger: Logging infrastructure
- constants: Enums, thresholds and keyword tables
- exceptions: Error taxonomy
- scoring: Score rounding
"""

from cvmatch.utils.config import (
    AppSettings,
    get_settings,
    reload_settings,
    ROOT_DIR,
    PACKAGE_DIR,
    DATA_DIR,
)
from cvmatch.utils.constants import (
    APP_NAME,
    APP_DISPLAY_NAME,
    VERSION,
    FocusArea,
    MatchQuality,
    ProfileCategory,
    RequirementCategory,
)
from cvmatch.utils.exceptions import (
    CVMatchError,
    CapabilityUnsupportedError,
    ConfigurationError,
    DimensionMismatchError,
    EmbeddingError,
    ProviderError,
    StoreError,
    StoreUnavailableError,
)
from cvmatch.utils.logger import (
    setup_logging,
    get_logger,
    sanitize_for_logging,
)
from cvmatch.utils.scoring import round_half_up

__all__ = [
    # Config
    "AppSettings",
    "get_settings",
    "reload_settings",
    "ROOT_DIR",
    "PACKAGE_DIR",
    "DATA_DIR",
    # Constants
    "APP_NAME",
    "APP_DISPLAY_NAME",
    "VERSION",
    "FocusArea",
    "MatchQuality",
    "ProfileCategory",
    "RequirementCategory",
    # Exceptions
    "CVMatchError",
    "CapabilityUnsupportedError",
    "ConfigurationError",
    "DimensionMismatchError",
    "EmbeddingError",
    "ProviderError",
    "StoreError",
    "StoreUnavailableError",
    # Logger
    "setup_logging",
    "get_logger",
    "sanitize_for_logging",
    # Scoring
    "round_half_up",
]
