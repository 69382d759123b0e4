"""Contract between the path engine and a state machine.

The engine never implements transition semantics itself. Anything that
provides an ``initial_state`` and a pure ``transition`` function returning
objects shaped like ``StateLike`` can be explored.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Awaitable, Callable, Protocol, Union, runtime_checkable

Event = dict[str, Any]
EventLike = Union[str, Mapping[str, Any]]

# Type of the synthetic event that produces a machine's initial state.
INIT_EVENT_TYPE = "xstate.init"


class ActionExec(Protocol):
    """Protocol for side effects attached to a state."""

    def __call__(
        self, context: Any, event: Event, meta: Mapping[str, Any]
    ) -> None | Awaitable[None]:
        """Run the side effect."""
        ...


class ActionLike(Protocol):
    """A pending action reported by a state. ``exec`` may be None."""

    exec: ActionExec | None


@runtime_checkable
class StateLike(Protocol):
    """Protocol for an immutable state snapshot."""

    value: Any
    event: Event
    done: bool
    next_events: Sequence[str]
    actions: Sequence[ActionLike]
    context: Any
    meta: Mapping[str, Mapping[str, Any]]

    def to_strings(self) -> list[str]:
        """Return dotted paths for every active state node."""
        ...

    def matches(self, value: Any) -> bool:
        """Return True if this state has the given value."""
        ...


@runtime_checkable
class MachineLike(Protocol):
    """Protocol for a machine the engine can explore."""

    @property
    def initial_state(self) -> StateLike:
        ...

    def transition(self, state: StateLike, event: EventLike) -> StateLike:
        """Return the state reached by applying ``event`` to ``state``."""
        ...


StateCallback = Callable[[StateLike], Union[None, Awaitable[None]]]


def to_event(event: EventLike) -> Event:
    """Normalize a bare event type or an event mapping to an event dict."""
    if isinstance(event, str):
        return {"type": event}
    if not isinstance(event, Mapping) or "type" not in event:
        raise TypeError(f"Event must be a string or a mapping with a 'type' key, got {event!r}")
    return dict(event)
