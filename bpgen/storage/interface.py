"""
Output tree interface.

Defines the abstract interface for the directory that receives vendored
artifacts and the generated libs/Android.bp. Keys are POSIX paths relative to
the tree root.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from pathlib import Path


class OutputTree(ABC):
    """Abstract vendored-output tree."""

    @abstractmethod
    def wipe(self) -> None:
        """Delete the whole tree, including every previously vendored file.

        A missing tree is not an error.
        """
        ...

    @abstractmethod
    def ensure_dir(self, key: str) -> str:
        """Create a directory (and its parents) inside the tree.

        Args:
            key: Directory key; an empty key denotes the tree root.

        Returns:
            The directory key.
        """
        ...

    @abstractmethod
    def copy_file(self, source: Path, key: str) -> str:
        """Copy an external file into the tree.

        Args:
            source: File to copy.
            key: Destination key.

        Returns:
            The destination key.
        """
        ...

    @abstractmethod
    def extract_member(self, archive_key: str, member: str, dest_dir_key: str) -> str:
        """Extract exactly one named entry of a zip archive stored in the tree.

        Args:
            archive_key: Key of the archive inside the tree.
            member: Entry name inside the archive.
            dest_dir_key: Directory key receiving the entry.

        Returns:
            Key of the extracted file.
        """
        ...

    @abstractmethod
    def write_text(self, key: str, content: str) -> str:
        """Create or overwrite a text file."""
        ...

    @abstractmethod
    def append_text(self, key: str, content: str) -> str:
        """Append to a text file, creating it if needed."""
        ...

    @abstractmethod
    def read_text(self, key: str) -> str:
        """Read a text file from the tree."""
        ...

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check whether a key exists."""
        ...

    @abstractmethod
    def list_keys(self, prefix: str = "") -> list[str]:
        """List all file keys below a prefix, sorted."""
        ...

    @abstractmethod
    def get_local_path(self, key: str) -> Path | None:
        """Get the filesystem path of an existing key, or None."""
        ...

    @staticmethod
    def compute_hash(data: bytes) -> str:
        """Compute SHA-256 hash of data.

        Args:
            data: Raw bytes to hash.

        Returns:
            Hexadecimal string representation of the SHA-256 hash.
        """
        return hashlib.sha256(data).hexdigest()
