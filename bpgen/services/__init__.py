"""Services package for bpgen."""

from .availability import AvailabilityClassifier
from .canonicalizer import NameCanonicalizer
from .flattener import FlattenedGraph, GraphFlattener
from .inspector import ArtifactInspector
from .patcher import AndroidBpPatcher
from .synthesizer import BuildFileSynthesizer

__all__ = [
    "AvailabilityClassifier",
    "NameCanonicalizer",
    "FlattenedGraph",
    "GraphFlattener",
    "ArtifactInspector",
    "AndroidBpPatcher",
    "BuildFileSynthesizer",
]
