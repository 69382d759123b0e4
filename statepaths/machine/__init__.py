"""Machine contract and the reference statechart implementation."""

from statepaths.machine.loader import load_definition, load_machine
from statepaths.machine.statechart import (
    Action,
    MachineState,
    StateNode,
    Statechart,
    matches_state,
)
from statepaths.machine.types import (
    INIT_EVENT_TYPE,
    Event,
    EventLike,
    MachineLike,
    StateCallback,
    StateLike,
    to_event,
)

__all__ = [
    "Action",
    "Event",
    "EventLike",
    "INIT_EVENT_TYPE",
    "MachineLike",
    "MachineState",
    "StateCallback",
    "StateLike",
    "StateNode",
    "Statechart",
    "load_definition",
    "load_machine",
    "matches_state",
    "to_event",
]
