"""Pytest fixtures for statepaths tests."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from statepaths.machine import Statechart

NESTED_DEFINITION: dict[str, Any] = {
    "id": "test-machine",
    "initial": "start",
    "states": {
        "start": {"on": {"NEXT": "middle"}},
        "middle": {
            "initial": "a",
            "states": {
                "a": {"on": {"B": "b"}},
                "b": {"on": {"A": "a"}},
            },
            "on": {"NEXT": "end"},
        },
        "end": {"type": "final"},
    },
}

LINEAR_DEFINITION: dict[str, Any] = {
    "id": "linear",
    "initial": "start",
    "states": {
        "start": {"on": {"NEXT": "middle"}},
        "middle": {"on": {"NEXT": "end"}},
        "end": {"type": "final"},
    },
}

TOGGLE_DEFINITION: dict[str, Any] = {
    "id": "toggle",
    "initial": "on",
    "states": {
        "on": {"on": {"TOGGLE": "on", "STOP": "stopped"}},
        "stopped": {"type": "final"},
    },
}

PARALLEL_DEFINITION: dict[str, Any] = {
    "id": "simple-machine",
    "initial": "one",
    "states": {
        "one": {
            "type": "parallel",
            "states": {
                "left": {
                    "initial": "a",
                    "states": {
                        "a": {"on": {"A_TO_B": "b"}},
                        "b": {"on": {"B_TO_A": "a"}},
                    },
                },
                "right": {
                    "initial": "a",
                    "states": {
                        "a": {"on": {"A_TO_B": "b"}},
                        "b": {"on": {"B_TO_A": "a"}},
                    },
                },
            },
            "on": {"ONE_TO_TWO": "two"},
        },
        "two": {"on": {"BACK": "one", "TO_THREE": "three"}},
        "three": {"type": "final"},
    },
}


@pytest.fixture
def nested_machine() -> Statechart:
    """start -> middle (a <-> b) -> end."""
    return Statechart(NESTED_DEFINITION)


@pytest.fixture
def linear_machine() -> Statechart:
    """start --NEXT--> middle --NEXT--> end."""
    return Statechart(LINEAR_DEFINITION)


@pytest.fixture
def toggle_machine() -> Statechart:
    """A self-looping TOGGLE on 'on' and a STOP into a final state."""
    return Statechart(TOGGLE_DEFINITION)


@pytest.fixture
def parallel_machine() -> Statechart:
    return Statechart(PARALLEL_DEFINITION)


@pytest.fixture
def input_machine() -> Statechart:
    """'empty' accepts only INPUT, which leads to the final 'filled'."""
    return Statechart({
        "id": "input",
        "initial": "empty",
        "states": {
            "empty": {"on": {"INPUT": "filled"}},
            "filled": {"type": "final"},
        },
    })


def fake_state(
    event_type: str = "EVENT",
    strings: list[str] | None = None,
    meta: dict[str, Any] | None = None,
    next_events: list[str] | None = None,
) -> SimpleNamespace:
    """A minimal object satisfying the parts of the state contract executors use."""
    strings = strings or []
    return SimpleNamespace(
        value=strings[-1] if strings else None,
        event={"type": event_type},
        done=False,
        next_events=next_events or [],
        actions=[],
        context=None,
        meta=meta or {},
        to_strings=lambda: list(strings),
    )


def descriptions(paths: list[Any]) -> list[str]:
    return [path.description for path in paths]
