"""Platform availability classification."""

from .service import (
    EXCLUDED_COORDINATES,
    AvailabilityClassifier,
    is_bootstrap_module,
    is_excluded_module,
    never_provided,
)

__all__ = [
    "EXCLUDED_COORDINATES",
    "AvailabilityClassifier",
    "is_bootstrap_module",
    "is_excluded_module",
    "never_provided",
]
