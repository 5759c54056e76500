"""Data models for bpgen."""

from .graph import ResolvedArtifactDescriptor, ResolvedDependency, ResolvedGraph
from .module import DEFAULT_MIN_SDK_VERSION, Artifact, ArtifactFileType, Module

__all__ = [
    "DEFAULT_MIN_SDK_VERSION",
    "Artifact",
    "ArtifactFileType",
    "Module",
    "ResolvedArtifactDescriptor",
    "ResolvedDependency",
    "ResolvedGraph",
]
