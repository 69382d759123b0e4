"""Event sources: candidate events for every enabled event type.

An ``EventSource`` maps event types to the concrete events (with payloads)
that should be tried whenever that type is enabled. Each entry can be:

- a list of events
- a function returning a list of events
- a generator function (or any function returning an iterator of events)

Entries are normalized once, at construction, into a factory that returns
a fresh iterator on every call, so the same state can be expanded again
from a different parent path with identical results.

Example:
    >>> source = EventSource({
    ...     "INPUT": [
    ...         {"type": "INPUT", "value": "foo"},
    ...         {"type": "INPUT", "value": "bar"},
    ...     ],
    ...     "OTHER": lambda: ({"type": "OTHER", "n": n} for n in range(2)),
    ... })
    >>> [e["value"] for e in source.generate_events("INPUT")]
    ['foo', 'bar']
    >>> list(source.generate_events("SUBMIT"))
    [{'type': 'SUBMIT'}]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Callable, Union

from statepaths.errors import EventSourceConfigError
from statepaths.machine.types import Event, EventLike, StateLike, to_event

logger = logging.getLogger(__name__)

EventFactory = Callable[[], Union[Iterable[EventLike], Iterator[EventLike]]]
EventSourceEntry = Union[list[EventLike], tuple[EventLike, ...], EventFactory]
EventSourceMap = Mapping[str, EventSourceEntry]


class EventSource:
    """Produces candidate events for the event types a state enables.

    Args:
        sources: Mapping of event type to an event source entry.

    Raises:
        EventSourceConfigError: If an entry is neither a list of events
            nor a callable.
    """

    def __init__(self, sources: EventSourceMap | None = None) -> None:
        self.sources: dict[str, Callable[[], Iterator[Event]]] = {}

        for event_type, entry in (sources or {}).items():
            self.sources[event_type] = self._normalize(event_type, entry)

    @classmethod
    def from_event_map(cls, event_map: Any) -> EventSource:
        """Create an EventSource from an ``EventMap``'s payload data."""
        return cls({
            event_type: event_map.get_events(event_type)
            for event_type in event_map.types
        })

    @property
    def types(self) -> list[str]:
        """Event types with a registered source."""
        return list(self.sources)

    def __contains__(self, event_type: object) -> bool:
        return event_type in self.sources

    def generate_events(self, event_type: str) -> Iterator[Event]:
        """Yield the candidate events for ``event_type``.

        Types without a registered source yield a single payload-free event.
        """
        factory = self.sources.get(event_type)

        if factory is None:
            yield {"type": event_type}
            return

        yield from factory()

    def generate_next_events(self, state: StateLike) -> Iterator[Event]:
        """Yield candidate events for every event type enabled in ``state``.

        Types are visited in the order the state reports them.
        """
        for event_type in state.next_events:
            yield from self.generate_events(event_type)

    @staticmethod
    def _normalize(event_type: str, entry: Any) -> Callable[[], Iterator[Event]]:
        if isinstance(entry, (list, tuple)):
            events = tuple(_checked_event(event_type, event) for event in entry)
            return lambda: iter(events)

        if callable(entry):
            def factory() -> Iterator[Event]:
                produced = entry()
                if isinstance(produced, (list, tuple)):
                    produced = iter(produced)
                elif not isinstance(produced, Iterator):
                    raise EventSourceConfigError(
                        f"Event source for '{event_type}' returned "
                        f"{type(produced).__name__}, expected a list or an iterator",
                        event_type=event_type,
                    )
                return (_checked_event(event_type, event) for event in produced)

            return factory

        raise EventSourceConfigError(
            f"Event source for '{event_type}' must be a list of events or a callable, "
            f"got {type(entry).__name__}",
            event_type=event_type,
        )

    def __repr__(self) -> str:
        return f"EventSource(types={self.types})"


def _checked_event(event_type: str, event: Any) -> Event:
    try:
        return to_event(event)
    except TypeError as e:
        raise EventSourceConfigError(
            f"Event source for '{event_type}' produced an invalid event: {event!r}",
            event_type=event_type,
            cause=e,
        ) from e
