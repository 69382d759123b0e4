"""Segment: one event applied to a state, together with the resulting state."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterator, Mapping
from functools import cached_property
from typing import Any, Callable

from statepaths.core.describe import describe_event, describe_state, describe_value
from statepaths.core.events import EventSource
from statepaths.errors import ErrorContext, ReplayMismatchError
from statepaths.machine.types import Event, MachineLike, StateLike

logger = logging.getLogger(__name__)


class Segment:
    """A segment of a test path.

    A segment wraps a target state produced by the machine. The event that
    produced it is the state's own ``event``, so a segment never holds an
    event and a state that disagree.

    Attributes:
        machine: The machine used to ``transition`` between states
        state: The target state (defaults to the machine's initial state)
        event_source: Source of candidate events for the next segments
    """

    def __init__(
        self,
        machine: MachineLike,
        state: StateLike | None = None,
        event_source: EventSource | None = None,
    ) -> None:
        self.machine = machine
        self.state = state if state is not None else machine.initial_state
        self.event_source = event_source or EventSource()

    def generate_next_segments(self, event_source: EventSource | None = None) -> Iterator[Segment]:
        """Yield a segment for every candidate event from this segment's target.

        Nothing is yielded from a final state. Each call recomputes the
        transitions, so the sequence can be restarted.

        Args:
            event_source: Source of candidate events; defaults to the
                segment's own source.
        """
        if self.is_final():
            return

        source = event_source or self.event_source
        for event in source.generate_next_events(self.state):
            next_state = self.machine.transition(self.state, event)
            yield Segment(self.machine, next_state, source)

    async def run(self, state: StateLike) -> StateLike:
        """Replay this segment's event against ``state``.

        The event is applied with the machine, the result is checked
        against the recorded target, and then the new state's actions run
        in order, each awaited before the next.

        Args:
            state: The state to apply the event to; usually the result of
                running the previous segment.

        Returns:
            The resulting state.

        Raises:
            ReplayMismatchError: If the machine reaches a different state
                than the one recorded when this segment was generated.
        """
        next_state = self.machine.transition(state, self.event)

        if not self.reaches_state(next_state):
            raise ReplayMismatchError(
                expected=self.target,
                actual=next_state.value,
                context=ErrorContext(
                    segment_description=self.description,
                    state_value=next_state.value,
                ),
            )

        await self._run_actions(next_state)
        return next_state

    async def _run_actions(self, state: StateLike) -> None:
        for action in state.actions:
            exec_fn: Callable[..., Any] | None = getattr(action, "exec", None)
            if not callable(exec_fn):
                continue
            logger.debug(f"Running action {getattr(action, 'type', exec_fn)!r}")
            result = exec_fn(state.context, state.event, state.meta)
            if inspect.isawaitable(result):
                await result

    # Properties

    @cached_property
    def description(self) -> str:
        """Event and state descriptions joined by ``" -> "``."""
        return f"{self.event_description} -> {self.state_description}"

    @cached_property
    def event_description(self) -> str:
        return describe_event(self.event)

    @cached_property
    def state_description(self) -> str:
        return describe_state(self.state)

    @property
    def target(self) -> Any:
        """The target state's value."""
        return self.state.value

    @property
    def event(self) -> Event:
        """The event that produced the target state."""
        return self.state.event

    @property
    def tests(self) -> list[Callable[..., Any]]:
        """Assertion callbacks declared as ``test`` in the target state's meta."""
        return [
            meta["test"]
            for meta in self.state.meta.values()
            if isinstance(meta, Mapping) and callable(meta.get("test"))
        ]

    # Comparisons

    def matches(self, other: Segment) -> bool:
        """True if both the events (with payloads) and the target states are equal."""
        return self.description == other.description

    def is_similar(self, other: Segment) -> bool:
        """True if the event types and target states are equal; payloads are ignored."""
        return self.has_similar_event(other) and self.has_same_target(other)

    def has_same_target(self, other: Segment) -> bool:
        return describe_value(self.target) == describe_value(other.target)

    def has_similar_event(self, other: Segment) -> bool:
        return self.event["type"] == other.event["type"]

    def reaches_state(self, state: StateLike) -> bool:
        """True if this segment's target has the same value as ``state``."""
        return describe_value(self.target) == describe_value(state.value)

    def is_final(self) -> bool:
        """True if the target state is done or has no enabled events."""
        return bool(self.state.done) or len(self.state.next_events) == 0

    def __repr__(self) -> str:
        return f"Segment({self.description!r})"
