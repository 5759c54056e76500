"""Output tree abstraction for bpgen."""

from .interface import OutputTree
from .local import LocalOutputTree

__all__ = ["OutputTree", "LocalOutputTree"]
