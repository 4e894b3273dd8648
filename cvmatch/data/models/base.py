"""
Base model classes for cvmatch data models.

Provides the shared configuration and vector coercion used by every
domain model.
"""

from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """
    Base model for engine inputs and results.

    Instances are immutable; use ``model_copy(update=...)`` to derive a
    changed copy.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
    )


class MutableModel(BaseModel):
    """Base model for small result containers built up incrementally."""

    model_config = ConfigDict(populate_by_name=True)


def coerce_vector(value: Any) -> Any:
    """Convert numpy arrays and other sequences to a plain list of floats."""
    if value is None:
        return None
    if isinstance(value, np.ndarray):
        return value.astype(float).ravel().tolist()
    if isinstance(value, (list, tuple)):
        return [float(v) for v in value]
    return value
