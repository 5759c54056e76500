"""
bpgen: Soong build module generation from resolved dependency graphs.

This system flattens a resolved third-party dependency graph into a canonical,
deterministically ordered set of Android.bp module declarations, vendors the
backing artifacts, and keeps a hand-maintained Android.bp in sync with them.
"""

__version__ = "1.0.0"
__author__ = "bpgen Team"
