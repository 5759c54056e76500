"""Hand-maintained build file patching service."""

from .service import (
    GENERATED_SECTION_MARKER,
    AndroidBpPatcher,
    PatchOutput,
    TextRegion,
    find_static_libs_region,
    patch_text,
    render_generated_section,
)

__all__ = [
    "GENERATED_SECTION_MARKER",
    "AndroidBpPatcher",
    "PatchOutput",
    "TextRegion",
    "find_static_libs_region",
    "patch_text",
    "render_generated_section",
]
