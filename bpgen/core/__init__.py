"""Core infrastructure components for bpgen."""

from .config import Config, get_config
from .exceptions import (
    ArtifactIOError,
    BpGenError,
    ConfigurationShapeError,
    GraphInconsistencyError,
    ValidationError,
)
from .logging import get_logger, run_context, setup_logging
from .types import PlatformPredicate, ServiceResult

__all__ = [
    "Config",
    "get_config",
    "ArtifactIOError",
    "BpGenError",
    "ConfigurationShapeError",
    "GraphInconsistencyError",
    "ValidationError",
    "get_logger",
    "run_context",
    "setup_logging",
    "PlatformPredicate",
    "ServiceResult",
]
