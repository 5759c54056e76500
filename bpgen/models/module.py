"""
Module data models.

A Module is one deduplicated node of the resolved dependency graph. Its identity
is the (group, name, version) triple: equality, hashing and ordering only look
at those three fields so that the same coordinates reached through different
paths collapse into a single entry of a set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MIN_SDK_VERSION = 14


class ArtifactFileType(str, Enum):
    """Packaging kind of a downloaded artifact."""

    AAR = "aar"  # archive with an AndroidManifest.xml
    JAR = "jar"  # plain archive

    @classmethod
    def from_path(cls, path: Path) -> ArtifactFileType:
        """Pick the packaging kind from a file extension.

        Returns:
            ArtifactFileType: AAR for ``.aar`` files, JAR for anything else.
        """
        return cls.AAR if path.suffix.lower() == ".aar" else cls.JAR


class Artifact(BaseModel):
    """The packaged file backing a Module."""

    model_config = ConfigDict(frozen=True)

    file: Path = Field(description="Path to the downloaded archive")
    file_type: ArtifactFileType = Field(description="Selects the declaration template")
    min_sdk_version: int = Field(default=DEFAULT_MIN_SDK_VERSION, ge=1)
    target_sdk_version: int = Field(ge=1)
    has_native_code: bool = Field(
        default=False, description="Archive ships jni/ libraries (AAR only)"
    )
    license_text: str = Field(default="", description="Sidecar license content, may be empty")

    @property
    def file_name(self) -> str:
        """Base name of the archive file."""
        return self.file.name

    @property
    def extracts_native_code(self) -> bool:
        """Whether the import rule must extract embedded native libraries."""
        return self.file_type == ArtifactFileType.AAR and self.has_native_code


@dataclass(frozen=True, order=True)
class Module:
    """One canonical, deduplicated dependency."""

    group: str
    name: str
    version: str
    target_sdk: int = field(default=0, compare=False)
    dependencies: frozenset[Module] = field(default_factory=frozenset, compare=False, repr=False)
    artifact: Artifact | None = field(default=None, compare=False, repr=False)

    @property
    def coordinate(self) -> str:
        """``group:name`` without the version."""
        return f"{self.group}:{self.name}"

    @property
    def identity(self) -> tuple[str, str, str]:
        return (self.group, self.name, self.version)

    def __str__(self) -> str:
        return f"{self.group}:{self.name}:{self.version}"
