"""
Patcher.

Keeps the hand-maintained Android.bp in sync with the generated modules by
rewriting exactly two things: the generated static_libs list and the
sdk_version fields. Everything else in the file is left byte-for-byte intact.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

from ...core.exceptions import ArtifactIOError, ConfigurationShapeError
from ...core.logging import get_logger
from ...core.types import ServiceResult
from ..synthesizer.templates import INDENT, render_list_entries

logger = get_logger(__name__)

STATIC_LIBS_START = "static_libs: ["
STATIC_LIBS_END = "]"
GENERATED_SECTION_MARKER = "// DO NOT EDIT THIS SECTION MANUALLY"
# Bare sdk_version only; min_sdk_version and friends are left alone
SDK_VERSION_PATTERN = re.compile(r'(?<![\w])sdk_version: "\d+"')


@dataclass(frozen=True)
class TextRegion:
    """Half-open character range of a list body, between ``[`` and ``]``."""

    start: int
    end: int

    def splice(self, text: str, replacement: str) -> str:
        return text[: self.start] + replacement + text[self.end:]


def find_static_libs_region(text: str, marker: str = GENERATED_SECTION_MARKER) -> TextRegion | None:
    """Locate the static_libs list body to regenerate.

    The first list whose body already contains the marker wins, so a file
    with several modules keeps patching the same list on every run. Without
    a marked list, the first static_libs list in the file is used.

    Returns:
        TextRegion of the list body, or None if no terminated list exists.
    """
    first: TextRegion | None = None
    search_from = 0
    while True:
        start = text.find(STATIC_LIBS_START, search_from)
        if start == -1:
            return first
        body_start = start + len(STATIC_LIBS_START)
        body_end = text.find(STATIC_LIBS_END, body_start)
        if body_end == -1:
            return first
        region = TextRegion(body_start, body_end)
        if marker in text[body_start:body_end]:
            return region
        if first is None:
            first = region
        search_from = body_end


def render_generated_section(names: Sequence[str], marker: str = GENERATED_SECTION_MARKER) -> str:
    """Render the list body: marker line, one entry per line, closing indent."""
    lines = [f"{INDENT * 2}{marker}"]
    if names:
        lines.append(render_list_entries(names))
    return "\n" + "\n".join(lines) + f"\n{INDENT}"


def patch_text(text: str, names: Sequence[str], target_sdk: int, file_path: str = "") -> str:
    """Apply both substitutions to the file content.

    Args:
        text: Current Android.bp content.
        names: Canonical module names for the generated list, sorted.
        target_sdk: Value for every ``sdk_version`` field.
        file_path: Used in error messages only.

    Returns:
        The patched content.

    Raises:
        ConfigurationShapeError: If the list or the version field is missing.
    """
    region = find_static_libs_region(text)
    if region is None:
        raise ConfigurationShapeError(
            message="No terminated static_libs list found",
            file_path=file_path,
            region="static_libs",
        )
    if SDK_VERSION_PATTERN.search(text) is None:
        raise ConfigurationShapeError(
            message='No sdk_version: "<digits>" field found',
            file_path=file_path,
            region="sdk_version",
        )

    patched = region.splice(text, render_generated_section(names))
    return SDK_VERSION_PATTERN.sub(f'sdk_version: "{target_sdk}"', patched)


class PatchOutput(BaseModel):
    """Output of patching the hand-maintained build file."""

    file_path: str = Field(description="Patched file")
    dependencies: list[str] = Field(default_factory=list, description="Names written to the list")
    changed: bool = Field(description="Whether the file content changed")


class AndroidBpPatcher:
    """Patches one hand-maintained Android.bp in place."""

    def __init__(self, android_bp: Path, target_sdk: int) -> None:
        """Initialize the patcher.

        Args:
            android_bp: Path of the hand-maintained file.
            target_sdk: Value written to the sdk_version fields.
        """
        self.android_bp = android_bp
        self.target_sdk = target_sdk

    def patch(self, names: Sequence[str]) -> ServiceResult[PatchOutput]:
        """Rewrite the generated dependency list and the SDK version.

        The new content is computed entirely in memory and written only when
        both regions were found.

        Args:
            names: Canonical names of the direct and jar-parented archive
                dependencies, sorted and deduplicated.

        Raises:
            ConfigurationShapeError: If the file is missing or has drifted.
            ArtifactIOError: If the file cannot be read or written.
        """
        file_path = str(self.android_bp)
        if not self.android_bp.is_file():
            raise ConfigurationShapeError(
                message="Hand-maintained build file does not exist",
                file_path=file_path,
                region="file",
            )

        try:
            original = self.android_bp.read_text(encoding="utf-8")
        except OSError as e:
            raise ArtifactIOError(
                message="Cannot read build file", path=file_path, operation="read", cause=e
            ) from e

        patched = patch_text(original, names, self.target_sdk, file_path)
        changed = patched != original
        if changed:
            try:
                self.android_bp.write_text(patched, encoding="utf-8")
            except OSError as e:
                raise ArtifactIOError(
                    message="Cannot write build file", path=file_path, operation="write", cause=e
                ) from e

        logger.info("Patched build file", file=file_path, dependencies=len(names), changed=changed)
        return ServiceResult.ok(PatchOutput(file_path=file_path, dependencies=list(names), changed=changed))
