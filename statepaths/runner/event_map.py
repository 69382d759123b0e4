"""Per-event payload data and exec hooks."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Union

from statepaths.core.events import EventSource
from statepaths.machine.types import Event, StateLike

EventHookFn = Callable[..., Union[None, Awaitable[None]]]


async def _noop_exec(*args: Any) -> None:
    return None


class EventMap:
    """Configuration of how each event type is produced and performed.

    Each entry maps an event type to optional ``data`` (a list of payloads;
    one event is generated per payload) and an optional ``exec`` hook
    called as ``exec(event, *context)`` before the event is applied during
    path execution. The hook is where a test drives the system under test,
    e.g. by clicking a button.

    Example:
        >>> events = EventMap({
        ...     "INPUT": {"data": [{"value": ""}, {"value": "alice"}], "exec": type_name},
        ...     "SUBMIT": {"exec": click_submit},
        ... })
        >>> paths = make_paths(machine, MakePathOptions(event_source=events.to_event_source()))
    """

    def __init__(self, options: Mapping[str, Mapping[str, Any] | None] | None = None) -> None:
        self.options = dict(options or {})
        self._data: dict[str, list[dict[str, Any]]] = {}
        self._exec: dict[str, EventHookFn] = {}

        for event_type, entry in self.options.items():
            entry = entry or {}
            self._data[event_type] = [dict(payload) for payload in entry.get("data") or []]
            self._exec[event_type] = entry.get("exec") or _noop_exec

    @property
    def types(self) -> list[str]:
        return list(self.options)

    def get_events(self, event_type: str) -> list[Event]:
        """Events of ``event_type``; a single payload-free event if no data is configured."""
        data = self._data.get(event_type)
        if not data:
            return [{"type": event_type}]
        return [{"type": event_type, **payload} for payload in data]

    def get_next_events(self, state: StateLike) -> list[Event]:
        return [event for event_type in state.next_events for event in self.get_events(event_type)]

    def get_exec(self, event_type: str) -> EventHookFn:
        """The exec hook for ``event_type``; a no-op coroutine when none is set."""
        return self._exec.get(event_type, _noop_exec)

    def to_event_source(self) -> EventSource:
        return EventSource.from_event_map(self)
