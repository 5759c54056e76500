"""Name canonicalization service."""

from .names import DEFAULT_MODULE_NAMES, build_name_table, load_name_table
from .service import NameCanonicalizer

__all__ = ["DEFAULT_MODULE_NAMES", "NameCanonicalizer", "build_name_table", "load_name_table"]
