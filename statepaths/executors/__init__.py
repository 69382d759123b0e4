"""Executors run callbacks on every transition while a path executes."""

from statepaths.executors.base import Executor, ExecutorChain, run_callback, with_executors
from statepaths.executors.event import EventExecFn, EventExecutor
from statepaths.executors.state import StateExecFn, StateExecutor

__all__ = [
    "EventExecFn",
    "EventExecutor",
    "Executor",
    "ExecutorChain",
    "StateExecFn",
    "StateExecutor",
    "run_callback",
    "with_executors",
]
