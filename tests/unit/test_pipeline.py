"""Unit tests for the generation pipeline."""

import pytest

from bpgen.core.exceptions import ConfigurationShapeError
from bpgen.models.graph import ResolvedGraph
from bpgen.orchestration import GenerateBpPipeline, run_generation


def platform_androidx(module):
    return module.group.startswith("androidx.")


@pytest.fixture
def graph(make_node, sample_jar, make_aar):
    """A small graph with vendored, platform and jar-parented modules."""
    widget = make_aar("widget-1.0.aar", native=True)
    return ResolvedGraph(first_level=[
        make_node("org.jetbrains.kotlin:kotlin-bom:1.9.0"),
        make_node("com.example:lib:1.0", [
            make_node("com.example:core:1.0"),
            make_node("androidx.core:core:1.12.0"),
            make_node("com.example:widget:1.0", artifact=widget),
        ], artifact=sample_jar, license_text="SPDX-License-Identifier: Apache-2.0\n"),
        make_node("androidx.appcompat:appcompat:1.6.1"),
    ])


class TestGenerateBpPipeline:
    """Tests for GenerateBpPipeline."""

    def test_run(self, config, graph):
        """A full run patches Android.bp and writes libs/."""
        result = GenerateBpPipeline(config, platform_androidx).run(graph)

        assert result.direct_dependencies == 2
        assert result.closure_size == 6
        assert result.project_dependencies == [
            "Sample_com.example_lib",
            "Sample_com.example_widget",
            "androidx.appcompat_appcompat",
        ]
        assert result.vendored == [
            "Sample_com.example_core",
            "Sample_com.example_lib",
            "Sample_com.example_widget",
        ]
        assert result.platform_provided == ["androidx.appcompat_appcompat", "androidx.core_core"]
        assert result.declarations == 5
        assert result.android_bp_patched and result.android_bp_changed
        assert result.libs_build_file_hash is not None

        android_bp = (config.project_dir / "Android.bp").read_text(encoding="utf-8")
        assert '"some_old_dependency"' not in android_bp
        assert '        "Sample_com.example_widget",\n' in android_bp
        assert 'sdk_version: "34"' in android_bp

        libs = config.libs_path
        assert (libs / "Android.bp").is_file()
        assert (libs / "Sample_com.example_lib" / "lib-1.0.jar.license").is_file()
        assert (libs / "Sample_com.example_widget" / "AndroidManifest.xml").is_file()
        assert "extract_jni: true," in (libs / "Android.bp").read_text(encoding="utf-8")

    def test_runs_are_reproducible(self, config, graph):
        """Two runs over the same graph produce identical output."""
        first = GenerateBpPipeline(config, platform_androidx).run(graph)
        android_bp = (config.project_dir / "Android.bp").read_text(encoding="utf-8")

        second = GenerateBpPipeline(config, platform_androidx).run(graph)

        assert first.libs_build_file_hash == second.libs_build_file_hash
        assert first.written_files == second.written_files
        assert not second.android_bp_changed
        assert (config.project_dir / "Android.bp").read_text(encoding="utf-8") == android_bp

    def test_removed_module_leaves_nothing_behind(self, config, graph, make_node, sample_jar):
        """Files of a module dropped from the graph disappear on the next run."""
        GenerateBpPipeline(config, platform_androidx).run(graph)
        assert (config.libs_path / "Sample_com.example_widget").is_dir()

        smaller = ResolvedGraph(first_level=[make_node("com.example:lib:1.0", artifact=sample_jar)])
        GenerateBpPipeline(config, platform_androidx).run(smaller)

        assert sorted(p.name for p in config.libs_path.iterdir()) == ["Android.bp", "Sample_com.example_lib"]
        assert "widget" not in (config.libs_path / "Android.bp").read_text(encoding="utf-8")

    def test_nothing_vendored_clears_libs(self, config, graph, make_node):
        """When the platform provides everything, libs/ is left empty."""
        GenerateBpPipeline(config, platform_androidx).run(graph)

        platform_only = ResolvedGraph(first_level=[make_node("androidx.core:core:1.12.0")])
        result = GenerateBpPipeline(config, platform_androidx).run(platform_only)

        assert result.vendored == []
        assert result.libs_build_file_hash is None
        assert not config.libs_path.exists()

    def test_no_patch(self, config, graph):
        """Test the hand-maintained file is left alone when patching is disabled."""
        original = (config.project_dir / "Android.bp").read_text(encoding="utf-8")
        no_patch = config.model_copy(update={"patch_android_bp": False})

        result = GenerateBpPipeline(no_patch, platform_androidx).run(graph)

        assert not result.android_bp_patched
        assert (config.project_dir / "Android.bp").read_text(encoding="utf-8") == original
        assert (config.libs_path / "Android.bp").is_file()

    def test_patterns_from_config(self, config, graph):
        """Without a predicate, platform patterns come from the configuration."""
        patterned = config.model_copy(update={"platform_modules": ["androidx.*"]})

        result = GenerateBpPipeline(patterned).run(graph)

        assert result.platform_provided == ["androidx.appcompat_appcompat", "androidx.core_core"]

    def test_drifted_android_bp_aborts(self, config, graph):
        """A shape error aborts the run before anything is vendored."""
        (config.project_dir / "Android.bp").write_text("android_app {}\n", encoding="utf-8")

        with pytest.raises(ConfigurationShapeError):
            run_generation(config, graph, is_provided_by_platform=platform_androidx)

        assert not (config.libs_path / "Android.bp").exists()
