"""Soong build file synthesis service."""

from .service import BuildFileSynthesizer, SynthesisOutput, dependency_names

__all__ = ["BuildFileSynthesizer", "SynthesisOutput", "dependency_names"]
