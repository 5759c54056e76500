"""Test configuration for bpgen."""

import io
import tempfile
import zipfile
from pathlib import Path

import pytest

from bpgen.core.config import Config
from bpgen.models.graph import ResolvedArtifactDescriptor, ResolvedDependency

ANDROID_BP = """\
android_app {
    name: "Sample",

    srcs: ["src/main/java/**/*.kt"],
    resource_dirs: ["src/main/res"],
    manifest: "src/main/AndroidManifest.xml",

    sdk_version: "33",
    min_sdk_version: "29",
    product_specific: true,

    static_libs: [
        "some_old_dependency",
    ],
}
"""


def build_aar_bytes(min_sdk="21", target_sdk="33", native=False, manifest=True):
    """Build a minimal AAR-like zip archive.

    Args:
        min_sdk: Value of android:minSdkVersion, or None to omit it.
        target_sdk: Value of android:targetSdkVersion, or None to omit it.
        native: Whether to include a jni/ library.
        manifest: Whether to include AndroidManifest.xml at all.

    Returns:
        bytes: The raw archive bytes.
    """
    attrs = ""
    if min_sdk is not None:
        attrs += f' android:minSdkVersion="{min_sdk}"'
    if target_sdk is not None:
        attrs += f' android:targetSdkVersion="{target_sdk}"'

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        if manifest:
            zf.writestr(
                "AndroidManifest.xml",
                '<?xml version="1.0" encoding="utf-8"?>\n'
                '<manifest xmlns:android="http://schemas.android.com/apk/res/android" '
                'package="com.example.lib">\n'
                f"    <uses-sdk{attrs} />\n"
                "</manifest>\n",
            )
        zf.writestr("classes.jar", b"PK\x05\x06" + b"\x00" * 18)
        if native:
            zf.writestr("jni/arm64-v8a/libnative.so", b"\x7fELF")
    return buffer.getvalue()


def build_jar_bytes():
    """Build a minimal jar archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
        zf.writestr("com/example/Lib.class", b"\xca\xfe\xba\xbe")
    return buffer.getvalue()


def node(coordinate, children=(), artifact=None, license_text=""):
    """Create a ResolvedDependency from ``group:name:version``.

    Args:
        coordinate: ``group:name:version`` string.
        children: Child nodes.
        artifact: Optional artifact file path.
        license_text: License text for the artifact descriptor.

    Returns:
        ResolvedDependency: The node.
    """
    group, name, version = coordinate.split(":")
    descriptor = None
    if artifact is not None:
        descriptor = ResolvedArtifactDescriptor(file=Path(artifact), license_text=license_text)
    return ResolvedDependency(
        group=group,
        name=name,
        version=version,
        children=list(children),
        artifact=descriptor,
    )


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A Path object pointing to the temporary directory.
            The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def artifacts_dir(temp_dir):
    """Directory holding downloaded artifacts, outside the project."""
    path = temp_dir / "downloads"
    path.mkdir()
    return path


@pytest.fixture
def sample_aar(artifacts_dir):
    """Create a sample AAR without native code.

    Returns:
        Path: Path of lib-1.0.aar.
    """
    path = artifacts_dir / "lib-1.0.aar"
    path.write_bytes(build_aar_bytes())
    return path


@pytest.fixture
def native_aar(artifacts_dir):
    """Create a sample AAR that bundles a jni/ library."""
    path = artifacts_dir / "native-2.0.aar"
    path.write_bytes(build_aar_bytes(min_sdk="24", target_sdk="34", native=True))
    return path


@pytest.fixture
def sample_jar(artifacts_dir):
    """Create a sample jar.

    Returns:
        Path: Path of lib-1.0.jar.
    """
    path = artifacts_dir / "lib-1.0.jar"
    path.write_bytes(build_jar_bytes())
    return path


@pytest.fixture
def project_dir(temp_dir):
    """Create a project directory with a hand-maintained Android.bp."""
    path = temp_dir / "project"
    path.mkdir()
    (path / "Android.bp").write_text(ANDROID_BP, encoding="utf-8")
    return path


@pytest.fixture
def config(project_dir):
    """Create a configuration pointing at the sample project."""
    return Config(project_name="Sample", target_sdk=34, project_dir=project_dir)


@pytest.fixture
def make_node():
    """Factory for resolved graph nodes (see ``node``)."""
    return node


@pytest.fixture
def make_aar(artifacts_dir):
    """Factory writing AAR archives into the downloads directory.

    Returns:
        Callable: ``make_aar(file_name, **build_aar_bytes kwargs) -> Path``.
    """
    def _make(file_name, **kwargs):
        path = artifacts_dir / file_name
        path.write_bytes(build_aar_bytes(**kwargs))
        return path

    return _make


@pytest.fixture
def make_jar(artifacts_dir):
    """Factory writing jar archives into the downloads directory."""
    def _make(file_name):
        path = artifacts_dir / file_name
        path.write_bytes(build_jar_bytes())
        return path

    return _make
