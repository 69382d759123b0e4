"""Executor protocol and chaining.

An executor is anything with an ``exec(state)`` method returning None or
an awaitable. Executors are combined into a single transition callback
that runs them one after another, in registration order.

Example:
    >>> on_transition = with_executors(
    ...     EventExecutor({"SUBMIT": submit_form}),
    ...     StateExecutor({"form.invalid": assert_error_shown}),
    ... )
    >>> await path.run(on_transition)
"""

from __future__ import annotations

import inspect
from typing import Awaitable, Callable, Protocol, runtime_checkable

from statepaths.machine.types import StateLike


@runtime_checkable
class Executor(Protocol):
    """Protocol for callbacks run on every transition during path execution."""

    def exec(self, state: StateLike) -> None | Awaitable[None]:
        """Handle the state reached by a transition."""
        ...


async def run_callback(callback: Callable[..., object], *args: object) -> None:
    """Call ``callback`` and await its result if it is awaitable."""
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class ExecutorChain:
    """Runs several executors sequentially; itself an executor."""

    def __init__(self, *executors: Executor) -> None:
        self.executors: list[Executor] = list(executors)

    def add(self, executor: Executor) -> ExecutorChain:
        self.executors.append(executor)
        return self

    async def exec(self, state: StateLike) -> None:
        for executor in self.executors:
            await run_callback(executor.exec, state)

    async def __call__(self, state: StateLike) -> None:
        await self.exec(state)

    def __len__(self) -> int:
        return len(self.executors)


def with_executors(*executors: Executor) -> Callable[[StateLike], Awaitable[None]]:
    """Return a transition callback that runs ``executors`` in order."""
    chain = ExecutorChain(*executors)

    async def on_transition(state: StateLike) -> None:
        await chain.exec(state)

    return on_transition
