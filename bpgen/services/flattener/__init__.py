"""Dependency graph flattening service."""

from .service import FlattenedGraph, GraphFlattener

__all__ = ["FlattenedGraph", "GraphFlattener"]
