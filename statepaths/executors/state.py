"""Executor dispatching on the states a transition reaches."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Awaitable, Callable, Union

from statepaths.executors.base import run_callback
from statepaths.machine.types import StateLike

StateExecFn = Callable[[StateLike], Union[None, Awaitable[None]]]


class StateExecutor:
    """Runs every callback keyed by a state string the state is in.

    Keys are dotted state strings as reported by ``state.to_strings()``,
    so both ``"form"`` and ``"form.invalid"`` match a state inside
    ``form.invalid``. Callbacks run in ``to_strings()`` order.

    Example:
        >>> executor = StateExecutor({
        ...     "form.invalid": lambda state: assert_error_visible(),
        ... })
    """

    def __init__(self, execs: Mapping[str, StateExecFn] | None = None) -> None:
        self.execs: dict[str, StateExecFn] = dict(execs or {})

    async def exec(self, state: StateLike) -> None:
        for state_string in state.to_strings():
            callback = self.execs.get(state_string)
            if callback is not None:
                await run_callback(callback, state)
