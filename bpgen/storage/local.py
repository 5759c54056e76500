"""
Local filesystem output tree.

Every operation is an immediate blocking call; failures surface as
ArtifactIOError so that a run aborts on the first I/O problem.
"""

from __future__ import annotations

import shutil
import zipfile
from pathlib import Path, PurePosixPath

from ..core.exceptions import ArtifactIOError
from ..core.logging import get_logger
from .interface import OutputTree

logger = get_logger(__name__)


class LocalOutputTree(OutputTree):
    """Output tree rooted at a local directory."""

    def __init__(self, base_path: Path) -> None:
        """Initialize the tree.

        Args:
            base_path: Root directory (typically <project>/libs)
        """
        self.base_path = base_path.resolve()

    def _get_full_path(self, key: str) -> Path:
        """Get full filesystem path for a key.

        Normalizes the key to prevent path traversal and ensures the resulting
        path stays within the tree root.

        Args:
            key: The key to convert to a filesystem path.

        Returns:
            The resolved absolute path within the tree root.
        """
        # Drop leading slashes and any parent directory references
        parts = [p for p in PurePosixPath(key.replace("\\", "/")).parts if p not in ("/", "..", ".")]
        full_path = self.base_path.joinpath(*parts).resolve() if parts else self.base_path

        try:
            full_path.relative_to(self.base_path)
        except ValueError:
            # Symlink escape - flatten into the root
            full_path = self.base_path / "_".join(parts)

        return full_path

    def _ensure_parent(self, path: Path) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactIOError(
                message="Cannot create directory",
                path=str(path.parent),
                operation="mkdir",
                cause=e,
            ) from e

    def wipe(self) -> None:
        """Delete the tree root recursively."""
        if not self.base_path.exists():
            return
        try:
            shutil.rmtree(self.base_path)
        except OSError as e:
            raise ArtifactIOError(
                message="Cannot delete output tree",
                path=str(self.base_path),
                operation="wipe",
                cause=e,
            ) from e
        logger.debug("Wiped output tree", path=str(self.base_path))

    def ensure_dir(self, key: str) -> str:
        """Create a directory inside the tree."""
        full_path = self._get_full_path(key)
        try:
            full_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactIOError(
                message="Cannot create directory",
                path=str(full_path),
                operation="mkdir",
                cause=e,
            ) from e
        return key

    def copy_file(self, source: Path, key: str) -> str:
        """Copy an external file into the tree.

        Raises:
            ArtifactIOError: If the source is missing or the copy fails.
        """
        if not source.is_file():
            raise ArtifactIOError(
                message="Artifact file not found",
                path=str(source),
                operation="copy",
            )
        full_path = self._get_full_path(key)
        self._ensure_parent(full_path)
        try:
            shutil.copyfile(source, full_path)
        except OSError as e:
            raise ArtifactIOError(
                message="Cannot copy artifact",
                path=str(source),
                operation="copy",
                cause=e,
            ) from e
        return key

    def extract_member(self, archive_key: str, member: str, dest_dir_key: str) -> str:
        """Extract exactly one entry of a zip archive stored in the tree.

        Leading slashes are ignored when matching entry names.

        Raises:
            ArtifactIOError: If the archive is unreadable or the entry does not
                match exactly once.
        """
        archive_path = self._get_full_path(archive_key)
        wanted = member.lstrip("/")
        try:
            with zipfile.ZipFile(archive_path, "r") as zf:
                matches = [info for info in zf.infolist() if info.filename.lstrip("/") == wanted]
                if len(matches) != 1:
                    raise ArtifactIOError(
                        message=f"Expected exactly one '{wanted}' entry, found {len(matches)}",
                        path=str(archive_path),
                        operation="extract",
                    )
                data = zf.read(matches[0])
        except (OSError, zipfile.BadZipFile) as e:
            raise ArtifactIOError(
                message="Cannot read archive",
                path=str(archive_path),
                operation="extract",
                cause=e,
            ) from e

        dest_key = f"{dest_dir_key}/{PurePosixPath(wanted).name}" if dest_dir_key else PurePosixPath(wanted).name
        full_path = self._get_full_path(dest_key)
        self._ensure_parent(full_path)
        try:
            full_path.write_bytes(data)
        except OSError as e:
            raise ArtifactIOError(
                message="Cannot write extracted entry",
                path=str(full_path),
                operation="extract",
                cause=e,
            ) from e
        return dest_key

    def write_text(self, key: str, content: str) -> str:
        """Create or overwrite a text file."""
        full_path = self._get_full_path(key)
        self._ensure_parent(full_path)
        try:
            full_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ArtifactIOError(
                message="Cannot write file",
                path=str(full_path),
                operation="write",
                cause=e,
            ) from e
        return key

    def append_text(self, key: str, content: str) -> str:
        """Append to a text file, creating it if needed."""
        full_path = self._get_full_path(key)
        self._ensure_parent(full_path)
        try:
            with open(full_path, "a", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise ArtifactIOError(
                message="Cannot append to file",
                path=str(full_path),
                operation="append",
                cause=e,
            ) from e
        return key

    def read_text(self, key: str) -> str:
        """Read a text file.

        Raises:
            ArtifactIOError: If the key does not exist or cannot be read.
        """
        full_path = self._get_full_path(key)
        try:
            return full_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ArtifactIOError(
                message="Cannot read file",
                path=str(full_path),
                operation="read",
                cause=e,
            ) from e

    def exists(self, key: str) -> bool:
        return self._get_full_path(key).exists()

    def list_keys(self, prefix: str = "") -> list[str]:
        """List all file keys below a prefix.

        Returns:
            A sorted list of keys.
        """
        search_path = self._get_full_path(prefix) if prefix else self.base_path
        if not search_path.exists():
            return []

        return sorted(
            path.relative_to(self.base_path).as_posix()
            for path in search_path.rglob("*")
            if path.is_file()
        )

    def get_local_path(self, key: str) -> Path | None:
        full_path = self._get_full_path(key)
        if full_path.exists():
            return full_path
        return None
