"""Canonical text for events, states and state values.

These strings are the identity used for segment matching and path
containment, so they must be deterministic for equal inputs.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from statepaths.machine.types import StateLike


def _canonical_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def describe_event(event: Mapping[str, Any]) -> str:
    """Describe an event as its type, followed by its payload as JSON if it has one.

    Example:
        >>> describe_event({"type": "INPUT", "value": "foo"})
        'INPUT {"value":"foo"}'
    """
    payload = {key: value for key, value in event.items() if key != "type"}
    if payload:
        return f"{event['type']} {_canonical_json(payload)}"
    return str(event["type"])


def describe_state(state: StateLike) -> str:
    """Describe a state by its leaf state strings.

    Example:
        >>> describe_state(parallel_state)
        'one.left.a, one.right.a'
    """
    strings = state.to_strings()
    leaves = [s for s in strings if not any(other.startswith(s + ".") for other in strings)]
    return ", ".join(leaves)


def describe_value(value: Any) -> str:
    """Canonical JSON for a state value."""
    return _canonical_json(value)
