"""
Name Canonicalizer.

Maps Maven (group, name) coordinates to Soong module names.
"""

from __future__ import annotations

from collections.abc import Mapping

from ...core.types import PlatformPredicate
from ...models.module import Module
from .names import DEFAULT_MODULE_NAMES


class NameCanonicalizer:
    """Derives Soong module names and libs-relative paths for modules.

    Vendored modules get a project-scoped name so they never collide with a
    platform module. Platform-provided modules are looked up in the override
    table and otherwise fall back to the coordinate with ``:`` replaced.
    """

    def __init__(
        self,
        project_name: str,
        is_provided_by_platform: PlatformPredicate,
        name_table: Mapping[str, str] = DEFAULT_MODULE_NAMES,
    ) -> None:
        """Initialize the canonicalizer.

        Args:
            project_name: Prefix for vendored module names.
            is_provided_by_platform: Shared platform-availability predicate.
            name_table: Read-only ``group:name`` -> module name overrides.
        """
        self.project_name = project_name
        self.is_provided_by_platform = is_provided_by_platform
        self.name_table = name_table

    def platform_name(self, group: str, name: str) -> str:
        coordinate = f"{group}:{name}"
        override = self.name_table.get(coordinate)
        if override is not None:
            return override
        return coordinate.replace(":", "_")

    def vendored_name(self, group: str, name: str) -> str:
        return f"{self.project_name}_{group}_{name}"

    def module_name(self, module: Module) -> str:
        """Soong module name of a module."""
        if self.is_provided_by_platform(module):
            return self.platform_name(module.group, module.name)
        return self.vendored_name(module.group, module.name)

    def module_path(self, module: Module) -> str:
        """Directory of a module below the libs root.

        Returns:
            str: The module name with path and drive separators replaced.
        """
        return self.module_name(module).replace(":", "_").replace("/", "_").replace("\\", "_")
