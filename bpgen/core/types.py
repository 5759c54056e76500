"""
Core type definitions for bpgen.

Provides type aliases and result types shared by the services and the
generation pipeline.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from ..models.module import Module


# Type aliases
PlatformPredicate = Callable[["Module"], bool]

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """Result wrapper for service operations.

    Failures are raised as BpGenError subclasses rather than returned, so a
    result always carries data; metadata describes what was done.
    """

    data: T
    metadata: dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0

    @classmethod
    def ok(cls, data: T, **metadata: Any) -> ServiceResult[T]:
        """Create a successful result."""
        duration_ms = metadata.pop("duration_ms", 0.0)
        return cls(data=data, metadata=metadata, duration_ms=duration_ms)
