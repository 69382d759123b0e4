"""Group generated paths into nested describe blocks and trees.

Paths are grouped by the state they reach, then nested by the events they
send, so paths that share a prefix of events share the outer blocks. This
mirrors how test frameworks with ``describe`` blocks lay out a suite.

Example:
    >>> def describe(name, block):
    ...     print(name)
    ...     block()
    >>> recursively_describe(paths, describe, lambda path: run(path))
    reaches "end"
    NEXT
    NEXT
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Callable

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from statepaths.core.path import Path
from statepaths.machine.types import INIT_EVENT_TYPE

DescribeFn = Callable[[str, Callable[[], None]], None]
EachFn = Callable[[Path], None]


def group_by_target(paths: Sequence[Path]) -> dict[str, list[Path]]:
    """Group paths by target description, keeping first-seen order."""
    groups: dict[str, list[Path]] = {}
    for path in paths:
        groups.setdefault(path.target_description, []).append(path)
    return groups


def _events(path: Path) -> list[str]:
    return [
        segment.event_description
        for segment in path.segments
        if segment.event["type"] != INIT_EVENT_TYPE
    ]


def recursively_describe(paths: Sequence[Path], describe: DescribeFn, each: EachFn) -> None:
    """Call ``describe`` for each target group and each event of every path.

    ``each(path)`` is called inside the innermost block of its path. A path
    with no events beyond the initial one gets a single ``xstate.init``
    block instead.
    """
    for target, group in group_by_target(paths).items():
        def target_block(group: list[Path] = group) -> None:
            for path in group:
                _describe_path(path, describe, each)

        describe(f"reaches {target}", target_block)


def _describe_path(path: Path, describe: DescribeFn, each: EachFn) -> None:
    events = _events(path)
    if not events:
        describe(INIT_EVENT_TYPE, lambda: each(path))
    else:
        _describe_events(path, events, describe, each)


def _describe_events(path: Path, events: list[str], describe: DescribeFn, each: EachFn) -> None:
    if not events:
        each(path)
        return

    head, tail = events[0], events[1:]
    describe(head, lambda: _describe_events(path, tail, describe, each))


def build_tree(paths: Sequence[Path], label: str = "paths") -> Tree:
    """Build a rich Tree of target groups with shared event prefixes merged."""
    root = Tree(f"[bold]{label}[/bold] ({len(paths)})")

    for target, group in group_by_target(paths).items():
        target_node = root.add(Text.assemble("reaches ", (target, "cyan")))
        children: dict[tuple[str, ...], Tree] = {}

        for path in group:
            node = target_node
            prefix: tuple[str, ...] = ()
            for event in _events(path):
                prefix += (event,)
                if prefix not in children:
                    children[prefix] = node.add(Text(event))
                node = children[prefix]

    return root


def render_paths(paths: Sequence[Path], console: Console | None = None, label: str = "paths") -> None:
    """Print the path tree to ``console`` (stdout by default)."""
    (console or Console()).print(build_tree(paths, label=label))
