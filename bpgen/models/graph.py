"""
Resolved dependency graph models.

These models describe the output of the upstream dependency resolver: the
first-level dependencies of a build configuration, each carrying its already
resolved children and, for download-backed nodes, an artifact descriptor.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ArtifactIOError, ValidationError


class ResolvedArtifactDescriptor(BaseModel):
    """Artifact metadata as reported by the resolver.

    Values left unset are filled in by inspecting the archive itself.
    """

    file: Path = Field(description="Downloaded archive path")
    min_sdk_version: int | None = Field(default=None, ge=1)
    target_sdk_version: int | None = Field(default=None, ge=1)
    has_native_code: bool | None = Field(default=None)
    license_text: str = Field(default="")


class ResolvedDependency(BaseModel):
    """One node of the resolved graph.

    A (group, name, version) that occurs several times must carry the same
    children and artifact every time. Repeated subtrees therefore have to be
    written out in full; a coordinate-only repeat (Gradle's ``(*)`` marker)
    reads as a node without children and is rejected as inconsistent.
    """

    group: str = Field(min_length=1)
    name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    children: list[ResolvedDependency] = Field(default_factory=list)
    artifact: ResolvedArtifactDescriptor | None = Field(default=None)

    @property
    def coordinate(self) -> str:
        """``group:name`` without the version."""
        return f"{self.group}:{self.name}"

    @property
    def identity(self) -> tuple[str, str, str]:
        """Deduplication key of the node."""
        return (self.group, self.name, self.version)

    def __str__(self) -> str:
        return f"{self.group}:{self.name}:{self.version}"


class ResolvedGraph(BaseModel):
    """The full resolver output for one build configuration."""

    first_level: list[ResolvedDependency] = Field(default_factory=list)

    @classmethod
    def from_file(cls, path: Path) -> ResolvedGraph:
        """Load a resolver JSON document.

        Relative artifact paths are resolved against the document's directory.

        Args:
            path: JSON file written by the resolver.

        Returns:
            ResolvedGraph: The parsed graph.

        Raises:
            ArtifactIOError: If the file cannot be read.
            ValidationError: If the document does not match the schema.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ArtifactIOError(
                message="Cannot read resolved graph",
                path=str(path),
                operation="read",
                cause=e,
            ) from e

        try:
            graph = cls.model_validate_json(content)
        except PydanticValidationError as e:
            raise ValidationError(
                message=f"Invalid resolved graph document: {e.error_count()} error(s)",
                field_name=str(path),
                cause=e,
            ) from e

        graph._resolve_artifact_paths(path.parent)
        return graph

    def _resolve_artifact_paths(self, base: Path) -> None:
        stack = list(self.first_level)
        seen: set[int] = set()
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            if node.artifact is not None and not node.artifact.file.is_absolute():
                node.artifact.file = base / node.artifact.file
            stack.extend(node.children)
