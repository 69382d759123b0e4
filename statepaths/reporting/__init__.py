"""Reporting helpers for generated paths."""

from statepaths.reporting.tree import (
    build_tree,
    group_by_target,
    recursively_describe,
    render_paths,
)

__all__ = [
    "build_tree",
    "group_by_target",
    "recursively_describe",
    "render_paths",
]
