"""
Custom exception hierarchy for bpgen.

All exceptions inherit from BpGenError to enable consistent error handling
across a generation run. Every error is fatal: the run aborts and the CLI
exits with a non-zero status.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class BpGenError(Exception):
    """Base exception for all bpgen errors."""

    message: str
    context: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        ctx = f" | context: {self.context}" if self.context else ""
        cause = f" | caused by: {self.cause}" if self.cause else ""
        return f"{self.message}{ctx}{cause}"


@dataclass
class ValidationError(BpGenError):
    """Raised when configuration or an input document fails validation."""

    field_name: str | None = None

    def __str__(self) -> str:
        base = super().__str__()
        if self.field_name:
            return f"Validation failed for '{self.field_name}': {base}"
        return f"Validation failed: {base}"


@dataclass
class ConfigurationShapeError(BpGenError):
    """Raised when the hand-maintained Android.bp no longer has the expected shape.

    The file is left untouched when this is raised.
    """

    file_path: str = ""
    region: str = ""

    def __str__(self) -> str:
        return f"Unexpected shape of '{self.file_path}' (missing {self.region}): {super().__str__()}"


@dataclass
class ArtifactIOError(BpGenError):
    """Raised when an artifact or output file operation fails."""

    path: str = ""
    operation: str = ""

    def __str__(self) -> str:
        base = super().__str__()
        return f"[{self.operation}] {self.path}: {base}"


@dataclass
class GraphInconsistencyError(BpGenError):
    """Raised when the resolved dependency graph is not a consistent DAG."""

    coordinate: str = ""
    path: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        base = super().__str__()
        if self.path:
            return f"Graph inconsistency at '{self.coordinate}' via {' -> '.join(self.path)}: {base}"
        return f"Graph inconsistency at '{self.coordinate}': {base}"
