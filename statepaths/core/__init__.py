"""Core module exports."""

from statepaths.core.dedup import deduplicate
from statepaths.core.describe import describe_event, describe_state, describe_value
from statepaths.core.events import EventSource, EventSourceEntry, EventSourceMap
from statepaths.core.path import (
    DEFAULT_MAX_LENGTH,
    MakePathOptions,
    Path,
    PathFilter,
    SegmentFilter,
    default_path_filter,
    default_segment_filter,
    generate_paths,
    make_paths,
)
from statepaths.core.segment import Segment

__all__ = [
    "DEFAULT_MAX_LENGTH",
    "EventSource",
    "EventSourceEntry",
    "EventSourceMap",
    "MakePathOptions",
    "Path",
    "PathFilter",
    "Segment",
    "SegmentFilter",
    "deduplicate",
    "default_path_filter",
    "default_segment_filter",
    "describe_event",
    "describe_state",
    "describe_value",
    "generate_paths",
    "make_paths",
]
