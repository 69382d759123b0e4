"""statepaths - test path generation for state machines.

statepaths explores the reachable behavior of a state machine and produces
test paths: walks of (event, resulting state) pairs from the initial state.
Each path exercises one behaviorally distinct route through the model and
can be replayed against the machine while callbacks drive the system under
test.

Key Features:
    - Lazy, depth-first path generation with bounded length
    - Pluggable event sources for payload variants
    - Cycle guard allowing a transition to repeat once per path
    - Deduplication down to maximal paths
    - Replay with event, state and executor callbacks

Example:
    >>> from statepaths import EventSource, MakePathOptions, Statechart, TestRunner, make_paths
    >>>
    >>> machine = Statechart({
    ...     "id": "form",
    ...     "initial": "editing",
    ...     "states": {
    ...         "editing": {"on": {"INPUT": "editing", "SUBMIT": "submitted"}},
    ...         "submitted": {"type": "final"},
    ...     },
    ... })
    >>> options = MakePathOptions(
    ...     event_source=EventSource({"INPUT": [{"type": "INPUT", "value": "alice"}]}),
    ...     deduplicate=True,
    ... )
    >>> for path in make_paths(machine, options):
    ...     print(path.description)
    >>>
    >>> runner = TestRunner(event_callbacks={"SUBMIT": click_submit})
    >>> await runner.run(path, page)

Core Models:
    Segment: An event plus the state it produced
    Path: An ordered walk of segments from the initial state
    EventSource: Candidate events per event type

Execution:
    TestRunner: Replays paths with event/state callbacks
    ExecutorRunner: Replays paths through an executor chain
    EventExecutor, StateExecutor: Executors keyed by event type or state

Error Handling:
    StatePathsError: Base exception for all statepaths errors
    ReplayMismatchError: Replay reached a different state than generation
"""

from statepaths.config import PathConfig, load_config
from statepaths.core import (
    EventSource,
    MakePathOptions,
    Path,
    Segment,
    deduplicate,
    default_path_filter,
    default_segment_filter,
    describe_event,
    describe_state,
    generate_paths,
    make_paths,
)
from statepaths.errors import (
    ConfigurationError,
    ErrorCode,
    EventSourceConfigError,
    MachineDefinitionError,
    PathExecutionError,
    ReplayMismatchError,
    StatePathsError,
)
from statepaths.executors import (
    EventExecutor,
    Executor,
    ExecutorChain,
    StateExecutor,
    with_executors,
)
from statepaths.machine import (
    INIT_EVENT_TYPE,
    MachineLike,
    MachineState,
    StateLike,
    Statechart,
    load_machine,
)
from statepaths.observability import configure_logging, log_context
from statepaths.reporting import build_tree, recursively_describe, render_paths
from statepaths.runner import (
    EventMap,
    ExecutorRunner,
    PathRunner,
    PathRunResult,
    RunSummary,
    TestRunner,
    run_paths,
)
from statepaths.utils import cross_merge

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ErrorCode",
    "EventExecutor",
    "EventMap",
    "EventSource",
    "EventSourceConfigError",
    "Executor",
    "ExecutorChain",
    "ExecutorRunner",
    "INIT_EVENT_TYPE",
    "MachineDefinitionError",
    "MachineLike",
    "MachineState",
    "MakePathOptions",
    "Path",
    "PathConfig",
    "PathExecutionError",
    "PathRunResult",
    "PathRunner",
    "ReplayMismatchError",
    "RunSummary",
    "Segment",
    "StateExecutor",
    "StateLike",
    "StatePathsError",
    "Statechart",
    "TestRunner",
    "__version__",
    "build_tree",
    "configure_logging",
    "cross_merge",
    "deduplicate",
    "default_path_filter",
    "default_segment_filter",
    "describe_event",
    "describe_state",
    "generate_paths",
    "load_config",
    "load_machine",
    "log_context",
    "make_paths",
    "recursively_describe",
    "render_paths",
    "run_paths",
    "with_executors",
]
