"""Path: a walk through a state machine, and the exploration that builds it.

A path is an ordered sequence of segments starting at the machine's
initial state. Paths are immutable: extending one produces a new path.

Exploration is a depth-first, pre-order walk. For every candidate segment
(in the order the event source produces them) the extended path is
yielded if it passes the path filter, and then its own extensions are
explored before the next candidate. The walk uses an explicit stack of
(path, candidate iterator) pairs, so long bounds do not hit the interpreter
recursion limit, and production stays lazy.

Example:
    >>> paths = Path.make_paths(machine, MakePathOptions(max_length=6))
    >>> for path in paths:
    ...     print(path.description)
    >>>
    >>> # Or stop early while streaming
    >>> for path in Path.generate_paths(machine):
    ...     if "ERROR" in path.description:
    ...         break
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional

from statepaths.core.dedup import deduplicate
from statepaths.core.describe import describe_value
from statepaths.core.events import EventSource
from statepaths.core.segment import Segment
from statepaths.errors import ConfigurationError
from statepaths.machine.types import MachineLike, StateCallback, StateLike

if TYPE_CHECKING:
    from statepaths.config.settings import PathConfig

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 10
SIMILAR_SEGMENT_LIMIT = 2

SegmentFilter = Callable[[Segment, "Path"], bool]
PathFilter = Callable[["Path"], bool]


def default_segment_filter(segment: Segment, path: Path) -> bool:
    """Reject a segment once the path holds two similar segments.

    Allows a transition to be repeated once (toggling a value back and
    forth, for example) while bounding every cycle.
    """
    return path.count_similar_segments(segment) < SIMILAR_SEGMENT_LIMIT


def default_path_filter(path: Path) -> bool:
    """Accept only paths that end in a final segment."""
    return path.is_final()


@dataclass
class MakePathOptions:
    """Options for path generation.

    Attributes:
        event_source: Produces candidate events at every state
        max_length: Maximum number of segments per path, initial segment included
        filter_segment: Returning False drops a candidate segment and every
            path through it
        filter_path: Returning False leaves a path out of the results
            (its extensions are still explored)
        deduplicate: Remove paths contained in longer paths (make_paths only)
    """

    event_source: EventSource = field(default_factory=EventSource)
    max_length: int = DEFAULT_MAX_LENGTH
    filter_segment: SegmentFilter = default_segment_filter
    filter_path: PathFilter = default_path_filter
    deduplicate: bool = False

    def __post_init__(self) -> None:
        if self.event_source is None:
            self.event_source = EventSource()
        if self.filter_segment is None:
            self.filter_segment = default_segment_filter
        if self.filter_path is None:
            self.filter_path = default_path_filter
        if not isinstance(self.max_length, int) or self.max_length < 1:
            raise ConfigurationError(
                f"max_length must be a positive integer, got {self.max_length!r}",
                max_length=self.max_length,
            )

    @classmethod
    def from_config(cls, config: PathConfig, **overrides: Any) -> MakePathOptions:
        """Build options from a loaded ``PathConfig``; keyword arguments win."""
        values: dict[str, Any] = {
            "event_source": config.event_source(),
            "max_length": config.max_length,
            "deduplicate": config.deduplicate,
        }
        values.update(overrides)
        return cls(**values)


class Path:
    """A path through a state machine.

    Args:
        machine: The machine the path walks through
        segments: Segments of the path; when empty, the path starts with a
            segment for the machine's initial state
        event_source: Event source for the initial segment
    """

    def __init__(
        self,
        machine: MachineLike,
        segments: Sequence[Segment] = (),
        event_source: EventSource | None = None,
    ) -> None:
        self.machine = machine
        if not segments:
            segments = (Segment(machine, machine.initial_state, event_source),)
        self.segments: tuple[Segment, ...] = tuple(segments)
        self._description: Optional[str] = None

    # Generation

    @classmethod
    def make_paths(cls, machine: MachineLike, options: MakePathOptions | None = None) -> list[Path]:
        """Generate every path for ``machine`` into a list.

        Deduplicates the result when ``options.deduplicate`` is set.
        """
        options = options or MakePathOptions()
        paths = list(cls.generate_paths(machine, options))
        logger.info(f"Generated {len(paths)} paths (max_length={options.max_length})")

        if options.deduplicate:
            return cls.deduplicate(paths)
        return paths

    @classmethod
    def generate_paths(
        cls, machine: MachineLike, options: MakePathOptions | None = None
    ) -> Iterator[Path]:
        """Lazily yield every path for ``machine``.

        The path holding only the initial segment comes first (if the path
        filter accepts it), followed by everything ``generate_next_paths``
        produces from it.
        """
        options = options or MakePathOptions()
        initial_path = cls(machine, event_source=options.event_source)

        if options.filter_path(initial_path):
            yield initial_path

        yield from initial_path.generate_next_paths(options)

    @staticmethod
    def deduplicate(paths: Sequence[Path]) -> list[Path]:
        """Remove paths whose description is contained in a longer path's."""
        return deduplicate(paths)

    def generate_next_paths(self, options: MakePathOptions | None = None) -> Iterator[Path]:
        """Lazily yield every extension of this path, depth-first and pre-order."""
        options = options or MakePathOptions()
        if len(self) >= options.max_length:
            return

        stack: list[tuple[Path, Iterator[Segment]]] = [
            (self, self.last_segment.generate_next_segments(options.event_source))
        ]

        while stack:
            path, candidates = stack[-1]
            segment = next(candidates, None)
            if segment is None:
                stack.pop()
                continue

            if not options.filter_segment(segment, path):
                continue

            next_path = path.extend(segment)

            if options.filter_path(next_path):
                yield next_path

            if not next_path.is_final() and len(next_path) < options.max_length:
                stack.append(
                    (next_path, segment.generate_next_segments(options.event_source))
                )

    def extend(self, segment: Segment) -> Path:
        """Return a new path with ``segment`` appended."""
        return Path(self.machine, self.segments + (segment,))

    # Execution

    async def run(self, on_transition: StateCallback | None = None) -> StateLike:
        """Replay the path from the machine's initial state.

        ``on_transition`` is called with the initial state and with the
        state reached by every following segment; awaitable results are
        awaited before the next segment runs.

        Returns:
            The final state.
        """
        state = self.machine.initial_state
        await _notify(on_transition, state)

        for segment in self.segments[1:]:
            state = await segment.run(state)
            await _notify(on_transition, state)

        return state

    # Properties

    @property
    def description(self) -> str:
        """Descriptions of every segment joined by ``" -> "``.

        Completely identifies the path; used for matching and containment.
        """
        if self._description is None:
            self._description = " -> ".join(segment.description for segment in self.segments)
        return self._description

    @property
    def event_descriptions(self) -> list[str]:
        return [segment.event_description for segment in self.segments]

    @property
    def target(self) -> Any:
        """Value of the path's final state."""
        return self.last_segment.target

    @property
    def target_description(self) -> str:
        return describe_value(self.target)

    @property
    def first_segment(self) -> Segment:
        return self.segments[0]

    @property
    def last_segment(self) -> Segment:
        return self.segments[-1]

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    # Checks and comparisons

    def already_has_segment(self, segment: Segment) -> bool:
        """True if the path contains a segment matching ``segment``."""
        return any(s.matches(segment) for s in self.segments)

    def already_has_similar_segment(self, segment: Segment) -> bool:
        """True if the path contains a segment with the same event type and target."""
        return any(s.is_similar(segment) for s in self.segments)

    def already_reaches_state(self, state: StateLike) -> bool:
        return any(s.reaches_state(state) for s in self.segments)

    def count_matching_segments(self, segment: Segment) -> int:
        return sum(1 for s in self.segments if s.matches(segment))

    def count_similar_segments(self, segment: Segment) -> int:
        return sum(1 for s in self.segments if s.is_similar(segment))

    def matches(self, other: Path) -> bool:
        """True if both paths have identical segments."""
        return self.description == other.description

    def includes(self, other: Path) -> bool:
        """True if ``other``'s walk appears verbatim within this path."""
        return other.description in self.description

    def is_final(self) -> bool:
        """True if the path ends in a final segment."""
        return self.last_segment.is_final()

    def __repr__(self) -> str:
        return f"Path(length={len(self)}, description={self.description!r})"

    default_segment_filter = staticmethod(default_segment_filter)
    default_path_filter = staticmethod(default_path_filter)


async def _notify(callback: StateCallback | None, state: StateLike) -> None:
    if callback is None:
        return
    result = callback(state)
    if inspect.isawaitable(result):
        await result


def make_paths(machine: MachineLike, options: MakePathOptions | None = None) -> list[Path]:
    """Generate every path for ``machine``; see ``Path.make_paths``."""
    return Path.make_paths(machine, options)


def generate_paths(machine: MachineLike, options: MakePathOptions | None = None) -> Iterator[Path]:
    """Lazily generate paths for ``machine``; see ``Path.generate_paths``."""
    return Path.generate_paths(machine, options)
