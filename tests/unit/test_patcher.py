"""Unit tests for the hand-maintained Android.bp patcher."""

import pytest

from bpgen.core.exceptions import ConfigurationShapeError
from bpgen.services.patcher import (
    GENERATED_SECTION_MARKER,
    AndroidBpPatcher,
    find_static_libs_region,
    patch_text,
    render_generated_section,
)

PATCHED = """\
android_app {
    name: "Sample",

    srcs: ["src/main/java/**/*.kt"],
    resource_dirs: ["src/main/res"],
    manifest: "src/main/AndroidManifest.xml",

    sdk_version: "34",
    min_sdk_version: "29",
    product_specific: true,

    static_libs: [
        // DO NOT EDIT THIS SECTION MANUALLY
        "Sample_com.example_lib",
        "androidx.core_core",
    ],
}
"""

NAMES = ["Sample_com.example_lib", "androidx.core_core"]


class TestPatchText:
    """Tests for the in-memory substitutions."""

    def test_patch_sample(self, project_dir):
        """The list body and sdk_version are rewritten, nothing else."""
        original = (project_dir / "Android.bp").read_text(encoding="utf-8")
        assert patch_text(original, NAMES, 34) == PATCHED

    def test_patch_is_idempotent(self):
        """Patching patched content with the same inputs changes nothing."""
        assert patch_text(PATCHED, NAMES, 34) == PATCHED

    def test_min_sdk_version_untouched(self):
        """Only the bare sdk_version field is replaced."""
        text = 'a {\n    sdk_version: "30",\n    min_sdk_version: "21",\n    static_libs: [],\n}\n'
        patched = patch_text(text, [], 34)
        assert 'min_sdk_version: "21"' in patched
        assert 'sdk_version: "34"' in patched

    def test_every_sdk_version_replaced(self):
        """Test multiple modules in one file all get the new SDK."""
        text = (
            'a {\n    sdk_version: "30",\n    static_libs: [],\n}\n'
            'b {\n    sdk_version: "31",\n}\n'
        )
        patched = patch_text(text, [], 35)
        assert patched.count('sdk_version: "35"') == 2

    def test_empty_names(self):
        """An empty dependency set leaves just the marker."""
        assert render_generated_section([]) == f"\n        {GENERATED_SECTION_MARKER}\n    "

    def test_marked_list_is_preferred(self):
        """A later list carrying the marker wins over the first list."""
        text = (
            'java_defaults {\n    sdk_version: "30",\n    static_libs: ["keep-me"],\n}\n'
            'android_app {\n    static_libs: [\n'
            f"        {GENERATED_SECTION_MARKER}\n"
            '        "old",\n    ],\n}\n'
        )
        patched = patch_text(text, ["new"], 34)
        assert 'static_libs: ["keep-me"]' in patched
        assert '"old"' not in patched
        assert '        "new",\n' in patched

    def test_first_list_without_marker(self):
        """Without a marker the first list is regenerated."""
        text = 'a {\n    sdk_version: "30",\n    static_libs: ["x"],\n    other: { static_libs: ["y"] },\n}\n'
        region = find_static_libs_region(text)
        assert text[region.start:region.end] == '"x"'

    @pytest.mark.parametrize(
        "text, region",
        [
            ('a {\n    sdk_version: "30",\n}\n', "static_libs"),
            ('a {\n    sdk_version: "30",\n    static_libs: [\n', "static_libs"),
            ('a {\n    min_sdk_version: "21",\n    static_libs: [],\n}\n', "sdk_version"),
            ('a {\n    sdk_version: "current",\n    static_libs: [],\n}\n', "sdk_version"),
        ],
    )
    def test_shape_errors(self, text, region):
        """Missing regions raise ConfigurationShapeError naming the region."""
        with pytest.raises(ConfigurationShapeError) as exc_info:
            patch_text(text, ["x"], 34, "Android.bp")
        assert exc_info.value.region == region


class TestAndroidBpPatcher:
    """Tests for patching the file on disk."""

    def test_patch_file(self, project_dir):
        """Test the file is rewritten in place."""
        android_bp = project_dir / "Android.bp"

        output = AndroidBpPatcher(android_bp, 34).patch(NAMES).data

        assert output.changed
        assert output.dependencies == NAMES
        assert android_bp.read_text(encoding="utf-8") == PATCHED

    def test_second_patch_reports_unchanged(self, project_dir):
        """Running twice leaves the file as the first run wrote it."""
        patcher = AndroidBpPatcher(project_dir / "Android.bp", 34)
        patcher.patch(NAMES)

        output = patcher.patch(NAMES).data

        assert not output.changed
        assert (project_dir / "Android.bp").read_text(encoding="utf-8") == PATCHED

    def test_drifted_file_is_untouched(self, project_dir):
        """A file without a static_libs list is not modified at all."""
        android_bp = project_dir / "Android.bp"
        drifted = 'android_app {\n    sdk_version: "33",\n}\n'
        android_bp.write_text(drifted, encoding="utf-8")

        with pytest.raises(ConfigurationShapeError):
            AndroidBpPatcher(android_bp, 34).patch(NAMES)

        assert android_bp.read_text(encoding="utf-8") == drifted

    def test_missing_file(self, temp_dir):
        """Test a missing build file is a shape error."""
        with pytest.raises(ConfigurationShapeError) as exc_info:
            AndroidBpPatcher(temp_dir / "Android.bp", 34).patch(NAMES)
        assert exc_info.value.region == "file"
