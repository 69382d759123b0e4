"""Executor dispatching on the event that caused a transition."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Awaitable, Callable, Union

from statepaths.executors.base import run_callback
from statepaths.machine.types import StateLike

EventExecFn = Callable[[str, StateLike], Union[None, Awaitable[None]]]


class EventExecutor:
    """Runs the callback registered for the event type that produced a state.

    Callbacks are called as ``fn(event_type, state)``. Event types without
    a callback are ignored.

    Example:
        >>> executor = EventExecutor({
        ...     "INPUT": lambda event_type, state: page.fill("#name", state.event["value"]),
        ... })
    """

    def __init__(self, execs: Mapping[str, EventExecFn] | None = None) -> None:
        self.execs: dict[str, EventExecFn] = dict(execs or {})

    async def exec(self, state: StateLike) -> None:
        event_type = state.event["type"]
        callback = self.execs.get(event_type)
        if callback is not None:
            await run_callback(callback, event_type, state)
