"""Unit tests for the output tree."""

import pytest

from bpgen.core.exceptions import ArtifactIOError
from bpgen.storage import LocalOutputTree


class TestLocalOutputTree:
    """Tests for local filesystem output trees."""

    def test_write_and_read_text(self, temp_dir):
        """Test writing and reading text."""
        tree = LocalOutputTree(temp_dir / "libs")

        key = tree.write_text("Android.bp", "// header\n")
        assert key == "Android.bp"
        assert tree.read_text(key) == "// header\n"

    def test_append_text(self, temp_dir):
        """Appending creates the file and keeps existing content."""
        tree = LocalOutputTree(temp_dir / "libs")

        tree.append_text("Android.bp", "a\n")
        tree.append_text("Android.bp", "b\n")

        assert tree.read_text("Android.bp") == "a\nb\n"

    def test_copy_file(self, temp_dir, sample_jar):
        """Test copying an artifact into a module directory."""
        tree = LocalOutputTree(temp_dir / "libs")

        key = tree.copy_file(sample_jar, "Sample_com.example_lib/lib-1.0.jar")

        assert tree.get_local_path(key).read_bytes() == sample_jar.read_bytes()

    def test_copy_missing_file(self, temp_dir):
        """Test copying a missing source raises ArtifactIOError."""
        tree = LocalOutputTree(temp_dir / "libs")
        with pytest.raises(ArtifactIOError) as exc_info:
            tree.copy_file(temp_dir / "missing.jar", "x/missing.jar")
        assert exc_info.value.operation == "copy"

    def test_extract_member(self, temp_dir, sample_aar):
        """Test extracting the manifest next to the archive."""
        tree = LocalOutputTree(temp_dir / "libs")
        archive_key = tree.copy_file(sample_aar, "m/lib-1.0.aar")

        key = tree.extract_member(archive_key, "AndroidManifest.xml", "m")

        assert key == "m/AndroidManifest.xml"
        assert 'android:minSdkVersion="21"' in tree.read_text(key)

    def test_extract_missing_member(self, temp_dir, sample_jar):
        """Test a missing entry raises ArtifactIOError."""
        tree = LocalOutputTree(temp_dir / "libs")
        archive_key = tree.copy_file(sample_jar, "m/lib-1.0.jar")

        with pytest.raises(ArtifactIOError):
            tree.extract_member(archive_key, "AndroidManifest.xml", "m")

    def test_wipe(self, temp_dir):
        """Wiping removes every file, and a missing tree is fine."""
        tree = LocalOutputTree(temp_dir / "libs")
        tree.write_text("old/stale.jar.license", "x")

        tree.wipe()
        assert tree.list_keys() == []
        assert not (temp_dir / "libs").exists()

        tree.wipe()

    def test_exists(self, temp_dir):
        """Test checking if a key exists."""
        tree = LocalOutputTree(temp_dir / "libs")

        assert not tree.exists("Android.bp")
        tree.write_text("Android.bp", "")
        assert tree.exists("Android.bp")

    def test_ensure_dir(self, temp_dir):
        """Test directories are created with their parents."""
        tree = LocalOutputTree(temp_dir / "libs")

        tree.ensure_dir("a/b")

        assert (temp_dir / "libs" / "a" / "b").is_dir()

    def test_list_keys(self, temp_dir):
        """Test listing keys."""
        tree = LocalOutputTree(temp_dir / "libs")

        tree.write_text("dir1/file1.txt", "content1")
        tree.write_text("dir1/file2.txt", "content2")
        tree.write_text("dir2/file3.txt", "content3")

        assert tree.list_keys() == ["dir1/file1.txt", "dir1/file2.txt", "dir2/file3.txt"]
        assert len(tree.list_keys("dir1")) == 2

    def test_get_local_path(self, temp_dir):
        """Test getting local path."""
        tree = LocalOutputTree(temp_dir / "libs")

        tree.write_text("test/path.txt", "content")
        path = tree.get_local_path("test/path.txt")
        assert path is not None
        assert path.exists()

        assert tree.get_local_path("nonexistent") is None

    def test_compute_hash(self):
        """Test hash computation."""
        hash1 = LocalOutputTree.compute_hash(b"test data")
        hash2 = LocalOutputTree.compute_hash(b"test data")

        assert hash1 == hash2
        assert len(hash1) == 64  # SHA-256 hex length

    def test_path_traversal_prevention(self, temp_dir):
        """Test that path traversal is prevented."""
        tree = LocalOutputTree(temp_dir / "libs")

        tree.write_text("../../../etc/passwd", "content")

        path = tree.get_local_path("../../../etc/passwd")
        assert path is not None
        assert path.is_relative_to((temp_dir / "libs").resolve())
