"""Path runners - execute generated paths against the machine."""

from statepaths.runner.event_map import EventMap
from statepaths.runner.path_runner import (
    ExecutorRunner,
    PathRunner,
    PathRunResult,
    RunSummary,
    TestRunner,
    TransitionCallback,
    TransitionCallbackMap,
    run_paths,
)

__all__ = [
    "EventMap",
    "ExecutorRunner",
    "PathRunResult",
    "PathRunner",
    "RunSummary",
    "TestRunner",
    "TransitionCallback",
    "TransitionCallbackMap",
    "run_paths",
]
