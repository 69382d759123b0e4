"""Path runners - replay generated paths against the machine.

A runner walks a path from the machine's initial state, replaying each
segment (which verifies the machine still reaches the recorded state) and
calling hooks before each segment and after each transition. Subclasses
decide what the hooks do:

- TestRunner: event callbacks, state callbacks, event-map exec hooks and
  per-state ``test`` callbacks declared in state meta
- ExecutorRunner: a chain of executors

Segments of one path always run strictly in order; every segment starts
from the state the previous one produced.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Union

from statepaths.core.path import Path
from statepaths.core.segment import Segment
from statepaths.errors import ErrorContext, PathExecutionError, StatePathsError
from statepaths.executors.base import Executor, ExecutorChain, run_callback
from statepaths.machine.types import INIT_EVENT_TYPE, StateLike
from statepaths.observability.logging import log_context
from statepaths.runner.event_map import EventMap

logger = logging.getLogger(__name__)

TransitionCallback = Callable[..., Union[None, Awaitable[None]]]
TransitionCallbackMap = Mapping[str, TransitionCallback]


@dataclass
class PathRunResult:
    """Result of running one path."""

    path: Path
    success: bool
    final_state: StateLike | None = None
    error: StatePathsError | None = None
    duration_ms: float = 0.0

    @property
    def description(self) -> str:
        return self.path.description


@dataclass
class RunSummary:
    """Results of running a set of paths."""

    results: list[PathRunResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(result.success for result in self.results)

    @property
    def total_paths(self) -> int:
        return len(self.results)

    @property
    def failed_paths(self) -> int:
        return sum(1 for result in self.results if not result.success)

    def failures(self) -> list[PathRunResult]:
        return [result for result in self.results if not result.success]


class PathRunner(ABC):
    """Base class for replaying paths with per-transition hooks."""

    async def run(self, path: Path, *context: Any) -> StateLike:
        """Run ``path`` and return the final state.

        ``context`` is passed through to every hook, e.g. a browser page
        or an API client.
        """
        with log_context(path=path.description):
            logger.info(f"Running path with {len(path)} segments")
            state = path.machine.initial_state
            await self.on_transition(state, *context)

            for segment in path.segments[1:]:
                logger.debug(f"Running segment {segment.description}")
                await self.before_segment(segment, *context)
                state = await segment.run(state)
                await self.on_transition(state, *context)

            logger.info(f"Path finished in {_state_label(state)}")
            return state

    async def before_segment(self, segment: Segment, *context: Any) -> None:
        """Called before a segment's event is applied. Does nothing by default."""

    @abstractmethod
    async def on_transition(self, state: StateLike, *context: Any) -> None:
        """Called with the initial state and after every segment."""


def _state_label(state: StateLike) -> str:
    return ", ".join(state.to_strings()) or str(state.value)


class TestRunner(PathRunner):
    """Runs paths as tests.

    Args:
        event_callbacks: ``{event_type: fn(state, *context)}``, called after
            the transition caused by that event type
        state_callbacks: ``{state_string: fn(state, *context)}``, called for
            every state string the reached state is in
        event_map: Exec hooks called as ``exec(event, *context)`` before a
            segment's event is applied
        run_state_tests: Also call ``test(state, *context)`` callbacks
            found in the reached state's meta

    Example:
        >>> runner = TestRunner(
        ...     event_callbacks={"SUBMIT": lambda state, page: page.click("#submit")},
        ...     state_callbacks={"done": lambda state, page: page.expect_text("Thanks")},
        ... )
        >>> for path in make_paths(machine):
        ...     await runner.run(path, page)
    """

    __test__ = False

    def __init__(
        self,
        event_callbacks: TransitionCallbackMap | None = None,
        state_callbacks: TransitionCallbackMap | None = None,
        event_map: EventMap | None = None,
        run_state_tests: bool = True,
    ) -> None:
        self.event_callbacks = dict(event_callbacks or {})
        self.state_callbacks = dict(state_callbacks or {})
        self.event_map = event_map
        self.run_state_tests = run_state_tests

    async def before_segment(self, segment: Segment, *context: Any) -> None:
        if self.event_map is None or segment.event["type"] == INIT_EVENT_TYPE:
            return
        await run_callback(self.event_map.get_exec(segment.event["type"]), segment.event, *context)

    async def on_transition(self, state: StateLike, *context: Any) -> None:
        await self._run_event_callbacks(state, *context)
        await self._run_state_callbacks(state, *context)
        if self.run_state_tests:
            await self._run_state_tests(state, *context)

    async def _run_event_callbacks(self, state: StateLike, *context: Any) -> None:
        callback = self.event_callbacks.get(state.event["type"])
        if callback is not None:
            await run_callback(callback, state, *context)

    async def _run_state_callbacks(self, state: StateLike, *context: Any) -> None:
        for state_string in state.to_strings():
            callback = self.state_callbacks.get(state_string)
            if callback is not None:
                await run_callback(callback, state, *context)

    async def _run_state_tests(self, state: StateLike, *context: Any) -> None:
        for meta in state.meta.values():
            test = meta.get("test") if isinstance(meta, Mapping) else None
            if callable(test):
                await run_callback(test, state, *context)


class ExecutorRunner(PathRunner):
    """Runs a chain of executors on every transition.

    Context arguments are not passed to executors; bind them when building
    the executors instead.
    """

    def __init__(self, *executors: Executor) -> None:
        self.chain = ExecutorChain(*executors)

    async def on_transition(self, state: StateLike, *context: Any) -> None:
        await self.chain.exec(state)


async def run_paths(
    runner: PathRunner,
    paths: Iterable[Path],
    *context: Any,
    fail_fast: bool = False,
) -> RunSummary:
    """Run every path in order and collect the results.

    Args:
        runner: Runner used for every path
        paths: Paths to run, e.g. the output of ``make_paths``
        *context: Passed to the runner's hooks
        fail_fast: Re-raise the first failure instead of recording it

    Returns:
        RunSummary with one PathRunResult per path run.
    """
    summary = RunSummary()

    for path in paths:
        start = time.perf_counter()
        try:
            final_state = await runner.run(path, *context)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            if fail_fast:
                raise
            error = e if isinstance(e, StatePathsError) else PathExecutionError(
                f"Path failed: {e}",
                context=ErrorContext(path_description=path.description),
                cause=e,
            )
            logger.error(f"Path failed: {path.description}: {e}")
            summary.results.append(PathRunResult(
                path=path,
                success=False,
                error=error,
                duration_ms=duration_ms,
            ))
            continue

        summary.results.append(PathRunResult(
            path=path,
            success=True,
            final_state=final_state,
            duration_ms=(time.perf_counter() - start) * 1000,
        ))

    logger.info(f"Ran {summary.total_paths} paths, {summary.failed_paths} failed")
    return summary
