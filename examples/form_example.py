"""Example: Generating and running test paths for a signup form.

This example models a small form as a statechart, generates every test
path through it, prints them as a tree and replays each one with a
TestRunner. The "page" passed to the runner stands in for whatever drives
the system under test (a browser page, an API client, ...).

Usage:
    python examples/form_example.py

    # With debug logging:
    STATEPATHS_LOG_LEVEL=DEBUG python examples/form_example.py
"""

from __future__ import annotations

import asyncio

from statepaths import (
    EventMap,
    MakePathOptions,
    Statechart,
    TestRunner,
    configure_logging,
    cross_merge,
    load_config,
    make_paths,
    render_paths,
    run_paths,
)

FORM = {
    "id": "signup",
    "initial": "editing",
    "states": {
        "editing": {
            "on": {
                "SUBMIT": [
                    {"target": "submitted", "cond": "is_valid"},
                    {"target": "invalid"},
                ],
            },
        },
        "invalid": {
            "on": {"SUBMIT": [{"target": "submitted", "cond": "is_valid"}]},
            "meta": {"test": lambda state, page: page.expect("error shown")},
        },
        "submitted": {"type": "final"},
    },
}


class FakePage:
    """Records what a test would do against a real page."""

    def __init__(self) -> None:
        self.log: list[str] = []

    async def fill(self, name: str, age: int) -> None:
        self.log.append(f"fill name={name!r} age={age}")

    def expect(self, text: str) -> None:
        self.log.append(f"expect {text}")


def is_valid(context, event) -> bool:
    return bool(event.get("name")) and event.get("age", 0) >= 18


async def main() -> None:
    config = load_config()
    configure_logging(level=config.log_level)

    machine = Statechart(FORM, guards={"is_valid": is_valid})

    payloads = cross_merge([{"name": ""}, {"name": "alice"}], [{"age": 12}, {"age": 30}])
    events = EventMap({
        "SUBMIT": {
            "data": payloads,
            "exec": lambda event, page: page.fill(event["name"], event["age"]),
        },
    })

    paths = make_paths(
        machine,
        MakePathOptions.from_config(config, event_source=events.to_event_source()),
    )
    render_paths(paths, label="signup")

    page = FakePage()
    runner = TestRunner(
        state_callbacks={"submitted": lambda state, page: page.expect("thank you")},
        event_map=events,
    )
    summary = await run_paths(runner, paths, page)

    print(f"\n{summary.total_paths} paths, {summary.failed_paths} failed")
    for line in page.log:
        print(f"  {line}")


if __name__ == "__main__":
    asyncio.run(main())
