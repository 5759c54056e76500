"""Artifact inspection service."""

from .service import ArchiveFacts, ArtifactInspector, read_archive_facts

__all__ = ["ArchiveFacts", "ArtifactInspector", "read_archive_facts"]
