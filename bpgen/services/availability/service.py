"""
Availability Classifier.

Partitions modules into platform-provided and vendored ones using a single
injected predicate, and carries the structural exclusions that never make it
into generated output.
"""

from __future__ import annotations

from collections.abc import Iterable
from fnmatch import fnmatchcase

from ...core.logging import get_logger
from ...core.types import PlatformPredicate
from ...models.module import Module

logger = get_logger(__name__)

KOTLIN_BOM = ("org.jetbrains.kotlin", "kotlin-bom")
KOTLIN_STDLIB_COMMON = ("org.jetbrains.kotlin", "kotlin-stdlib-common")

EXCLUDED_COORDINATES: frozenset[tuple[str, str]] = frozenset({KOTLIN_BOM, KOTLIN_STDLIB_COMMON})


def is_bootstrap_module(group: str, name: str) -> bool:
    """Whether a coordinate is the compiler's bill-of-materials module."""
    return (group, name) == KOTLIN_BOM


def is_excluded_module(group: str, name: str) -> bool:
    """Whether a coordinate must never appear in a dependency list or declaration."""
    return (group, name) in EXCLUDED_COORDINATES


def never_provided(module: Module) -> bool:
    return False


class AvailabilityClassifier:
    """Shared classification for one generation run.

    Every component of a run receives the same instance, so a module is
    classified identically wherever it is referenced.
    """

    def __init__(self, is_provided_by_platform: PlatformPredicate = never_provided) -> None:
        """Initialize the classifier.

        Args:
            is_provided_by_platform: Caller-supplied predicate.
        """
        self._predicate = is_provided_by_platform

    def __call__(self, module: Module) -> bool:
        return self.is_provided_by_platform(module)

    def is_provided_by_platform(self, module: Module) -> bool:
        """Whether the platform already ships the module."""
        return bool(self._predicate(module))

    @staticmethod
    def is_excluded(module: Module) -> bool:
        """Whether the module is filtered out of every generated artifact."""
        return is_excluded_module(module.group, module.name)

    def is_vendored(self, module: Module) -> bool:
        """Whether the module must be copied and declared locally."""
        return not self.is_excluded(module) and not self.is_provided_by_platform(module)

    def partition(self, modules: Iterable[Module]) -> tuple[list[Module], list[Module]]:
        """Split modules into (vendored, platform-provided), keeping their order.

        Excluded modules land in neither list.
        """
        vendored: list[Module] = []
        provided: list[Module] = []
        for module in modules:
            if self.is_excluded(module):
                continue
            if self.is_provided_by_platform(module):
                provided.append(module)
            else:
                vendored.append(module)
        return vendored, provided

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> AvailabilityClassifier:
        """Build a classifier from ``group:name`` glob patterns.

        A pattern without ``:`` matches the group only, so ``androidx.*`` is
        equivalent to ``androidx.*:*``. Matching is case-sensitive.

        Args:
            patterns: Patterns such as ``androidx.*:*`` or ``org.jetbrains:annotations``.

        Returns:
            AvailabilityClassifier: Classifier using the patterns as predicate.
        """
        compiled = [p if ":" in p else f"{p}:*" for p in patterns if p]
        logger.debug("Platform module patterns", patterns=compiled)

        def matches(module: Module) -> bool:
            return any(fnmatchcase(module.coordinate, pattern) for pattern in compiled)

        return cls(matches)
