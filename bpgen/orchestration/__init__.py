"""Orchestration module for bpgen."""

from .pipeline import GenerateBpPipeline, GenerationResult, run_generation

__all__ = ["GenerateBpPipeline", "GenerationResult", "run_generation"]
