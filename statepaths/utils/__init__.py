"""Utilities."""

from statepaths.utils.cross_merge import cross_merge, cross_merge_iter

__all__ = [
    "cross_merge",
    "cross_merge_iter",
]
