"""Statechart: a reference machine implementation for path generation.

The path engine only depends on the contract in ``statepaths.machine.types``.
This module provides one implementation of that contract, built from an
xstate-style definition mapping, so machines can be described in Python or
YAML without a third-party statechart runtime.

Supported:
- Atomic, compound, parallel and final state nodes
- Transitions declared under ``on`` as a target string, a mapping
  ``{target, actions, cond}``, or a list of those (first passing guard wins)
- Targets naming a sibling (``"b"``), a child (``".child"``), a dotted
  sibling path (``"parent.child"``) or an absolute id (``"#my-id"``)
- Entry/exit/transition actions given as callables or registry names
- ``meta`` per node, exposed on every state where the node is active

Example:
    >>> machine = Statechart({
    ...     "id": "light",
    ...     "initial": "off",
    ...     "states": {
    ...         "off": {"on": {"TOGGLE": "on"}},
    ...         "on": {"on": {"TOGGLE": "off", "BREAK": "broken"}},
    ...         "broken": {"type": "final"},
    ...     },
    ... })
    >>> state = machine.transition(machine.initial_state, "TOGGLE")
    >>> state.value
    'on'
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from statepaths.errors import MachineDefinitionError
from statepaths.machine.types import INIT_EVENT_TYPE, Event, EventLike, to_event

logger = logging.getLogger(__name__)

NodePath = tuple[str, ...]

ATOMIC = "atomic"
COMPOUND = "compound"
PARALLEL = "parallel"
FINAL = "final"

_NODE_TYPES = {ATOMIC, COMPOUND, PARALLEL, FINAL}


@dataclass(frozen=True)
class Action:
    """A side effect reported by a state.

    Attributes:
        type: Action name (registry key or callable name)
        exec: Callable invoked as ``exec(context, event, meta)``, or None
    """

    type: str
    exec: Optional[Callable[..., Any]] = None


@dataclass(eq=False)
class TransitionDefinition:
    """A resolved transition declared on a state node."""

    source: StateNode
    event_type: str
    targets: list[NodePath]
    actions: list[Action] = field(default_factory=list)
    cond: Optional[Callable[[Any, Event], bool]] = None

    def is_enabled(self, context: Any, event: Event) -> bool:
        if self.cond is None:
            return True
        return bool(self.cond(context, event))


@dataclass(eq=False)
class StateNode:
    """A node of the statechart definition tree."""

    key: str
    path: NodePath
    node_id: str
    type: str
    parent: Optional[StateNode] = None
    initial: Optional[str] = None
    children: dict[str, StateNode] = field(default_factory=dict)
    transitions: dict[str, list[TransitionDefinition]] = field(default_factory=dict)
    entry: list[Action] = field(default_factory=list)
    exit: list[Action] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_atomic(self) -> bool:
        return self.type in (ATOMIC, FINAL)

    def ancestors(self) -> list[StateNode]:
        """Proper ancestors, nearest first."""
        nodes = []
        node = self.parent
        while node is not None:
            nodes.append(node)
            node = node.parent
        return nodes

    def is_descendant_of(self, other: StateNode) -> bool:
        return self.path[: len(other.path)] == other.path and self.path != other.path


@dataclass(frozen=True)
class MachineState:
    """Immutable snapshot of a Statechart.

    Attributes:
        value: State value; a string for a top-level atomic state, otherwise
            a nested dict (``{"middle": "a"}``)
        event: Event that produced this state
        done: True once a top-level final state is active
        next_events: Event types handled by the active configuration
        actions: Actions to execute for the transition into this state
        context: Machine context
        meta: Meta of active nodes, keyed by node id
        configuration: Active node paths in document order
    """

    value: Any
    event: Event
    done: bool
    next_events: tuple[str, ...]
    actions: tuple[Action, ...]
    context: Any
    meta: dict[str, dict[str, Any]]
    configuration: tuple[NodePath, ...]

    def to_strings(self) -> list[str]:
        """Dotted paths of every active node, in document order."""
        return [".".join(path) for path in self.configuration if path]

    def matches(self, value: Any) -> bool:
        """Return True if ``value`` matches this state (parent values match too)."""
        return matches_state(value, self.value)


def _value_from_string(value: str) -> Any:
    parts = value.split(".")
    result: Any = parts[-1]
    for part in reversed(parts[:-1]):
        result = {part: result}
    return result


def matches_state(parent: Any, child: Any) -> bool:
    """Return True if ``parent`` value is the same as or an ancestor of ``child``.

    Dotted strings are expanded first, so ``"middle.a"`` matches
    ``{"middle": "a"}`` and ``"middle"`` matches it too.
    """
    if isinstance(parent, str):
        parent = _value_from_string(parent)
    if isinstance(child, str):
        child = _value_from_string(child)

    if isinstance(parent, str):
        if isinstance(child, str):
            return parent == child
        return parent in child

    if isinstance(child, str):
        return False

    return all(key in child and matches_state(sub, child[key]) for key, sub in parent.items())


class Statechart:
    """A hierarchical state machine built from a definition mapping.

    Args:
        definition: xstate-style machine definition
        context: Initial (static) context passed to actions and guards
        actions: Registry resolving action names used in the definition
        guards: Registry resolving guard names used as ``cond``
    """

    def __init__(
        self,
        definition: Mapping[str, Any],
        context: Any = None,
        actions: Mapping[str, Callable[..., Any]] | None = None,
        guards: Mapping[str, Callable[[Any, Event], bool]] | None = None,
    ) -> None:
        if not isinstance(definition, Mapping):
            raise MachineDefinitionError(
                f"Machine definition must be a mapping, got {type(definition).__name__}"
            )
        if not definition.get("states"):
            raise MachineDefinitionError("Machine definition has no 'states'")

        self.id: str = str(definition.get("id", "machine"))
        self.definition = definition
        self.context = context if context is not None else definition.get("context")
        self._action_registry = dict(actions or {})
        self._guard_registry = dict(guards or {})
        self._nodes: dict[NodePath, StateNode] = {}
        self._ids: dict[str, StateNode] = {}
        self._order: dict[NodePath, int] = {}

        self.root = self._build_node(self.id, (), definition, None)
        self._resolve_transitions(self.root, definition)
        self._initial_state: MachineState | None = None

        logger.debug(f"Built statechart '{self.id}' with {len(self._nodes)} nodes")

    # Definition building

    def _build_node(
        self,
        key: str,
        path: NodePath,
        config: Mapping[str, Any],
        parent: StateNode | None,
    ) -> StateNode:
        if config is None:
            config = {}
        if not isinstance(config, Mapping):
            raise MachineDefinitionError(f"State '{key}' must be a mapping")

        children_config = config.get("states") or {}
        node_type = config.get("type")
        if node_type is None:
            node_type = COMPOUND if children_config else ATOMIC
        if node_type not in _NODE_TYPES:
            raise MachineDefinitionError(f"State '{key}' has unknown type '{node_type}'")
        if node_type in (COMPOUND, PARALLEL) and not children_config:
            raise MachineDefinitionError(f"State '{key}' of type '{node_type}' has no child states")

        node_id = config.get("id") or ".".join((self.id,) + path)
        node = StateNode(
            key=key,
            path=path,
            node_id=node_id,
            type=node_type,
            parent=parent,
            initial=config.get("initial"),
            entry=self._resolve_actions(config.get("entry"), key),
            exit=self._resolve_actions(config.get("exit"), key),
            meta=dict(config.get("meta") or {}),
        )
        if node_id in self._ids:
            raise MachineDefinitionError(f"Duplicate state id '{node_id}'")

        self._nodes[path] = node
        self._ids[node_id] = node
        self._order[path] = len(self._order)

        for child_key, child_config in children_config.items():
            node.children[child_key] = self._build_node(
                str(child_key), path + (str(child_key),), child_config, node
            )

        if node.type == COMPOUND:
            if node.initial is None:
                raise MachineDefinitionError(f"Compound state '{node_id}' has no 'initial'")
            if node.initial not in node.children:
                raise MachineDefinitionError(
                    f"Initial state '{node.initial}' of '{node_id}' is not a child state"
                )

        return node

    def _resolve_actions(self, refs: Any, owner: str) -> list[Action]:
        if refs is None:
            return []
        if not isinstance(refs, (list, tuple)):
            refs = [refs]

        resolved = []
        for ref in refs:
            if callable(ref):
                resolved.append(Action(type=getattr(ref, "__name__", "anonymous"), exec=ref))
            elif isinstance(ref, str):
                if ref not in self._action_registry:
                    raise MachineDefinitionError(f"Unknown action '{ref}' in state '{owner}'")
                resolved.append(Action(type=ref, exec=self._action_registry[ref]))
            else:
                raise MachineDefinitionError(f"Unsupported action {ref!r} in state '{owner}'")
        return resolved

    def _resolve_guard(self, ref: Any, owner: str) -> Callable[[Any, Event], bool] | None:
        if ref is None or callable(ref):
            return ref
        if isinstance(ref, str) and ref in self._guard_registry:
            return self._guard_registry[ref]
        raise MachineDefinitionError(f"Unknown guard {ref!r} in state '{owner}'")

    def _resolve_transitions(self, node: StateNode, config: Mapping[str, Any]) -> None:
        for event_type, config_entry in (config.get("on") or {}).items():
            entries = config_entry if isinstance(config_entry, list) else [config_entry]
            definitions = []
            for item in entries:
                if item is None or isinstance(item, str):
                    item = {"target": item}
                if not isinstance(item, Mapping):
                    raise MachineDefinitionError(
                        f"Transition '{event_type}' of '{node.node_id}' must be a string or mapping"
                    )
                target = item.get("target")
                targets = target if isinstance(target, list) else [target] if target else []
                definitions.append(TransitionDefinition(
                    source=node,
                    event_type=str(event_type),
                    targets=[self._resolve_target(node, t) for t in targets],
                    actions=self._resolve_actions(item.get("actions"), node.node_id),
                    cond=self._resolve_guard(item.get("cond"), node.node_id),
                ))
            node.transitions[str(event_type)] = definitions

        for child_key, child in node.children.items():
            self._resolve_transitions(child, (config.get("states") or {})[child_key] or {})

    def _resolve_target(self, source: StateNode, target: str) -> NodePath:
        if target.startswith("#"):
            node = self._ids.get(target[1:])
            if node is None:
                raise MachineDefinitionError(f"Unknown target '{target}' from '{source.node_id}'")
            return node.path

        if target.startswith("."):
            path = source.path + tuple(target[1:].split("."))
        else:
            base = source.parent.path if source.parent is not None else source.path
            path = base + tuple(target.split("."))

        if path not in self._nodes:
            raise MachineDefinitionError(f"Unknown target '{target}' from '{source.node_id}'")
        return path

    # State computation

    def _complete(self, node: StateNode, into: list[StateNode]) -> None:
        into.append(node)
        if node.type == COMPOUND:
            self._complete(node.children[node.initial], into)
        elif node.type == PARALLEL:
            for child in node.children.values():
                self._complete(child, into)

    def _sorted(self, paths: set[NodePath]) -> tuple[NodePath, ...]:
        return tuple(sorted(paths, key=self._order.__getitem__))

    def _value(self, node: StateNode, active: set[NodePath]) -> Any:
        if node.type == PARALLEL:
            return {
                key: self._value(child, active) if not child.is_atomic else {}
                for key, child in node.children.items()
            }
        child = next(c for c in node.children.values() if c.path in active)
        if child.is_atomic:
            return child.key
        return {child.key: self._value(child, active)}

    def _next_events(self, node: StateNode, active: set[NodePath], into: list[str]) -> None:
        for child in node.children.values():
            if child.path in active:
                self._next_events(child, active, into)
        for event_type in node.transitions:
            if event_type and event_type not in into:
                into.append(event_type)

    def _make_state(
        self,
        active: set[NodePath],
        event: Event,
        actions: list[Action],
    ) -> MachineState:
        configuration = self._sorted(active)
        top = next(c for c in self.root.children.values() if c.path in active)
        next_events: list[str] = []
        self._next_events(self.root, active, next_events)
        meta = {
            self._nodes[path].node_id: self._nodes[path].meta
            for path in configuration
            if self._nodes[path].meta
        }
        return MachineState(
            value=self._value(self.root, active),
            event=event,
            done=top.type == FINAL,
            next_events=tuple(next_events),
            actions=tuple(actions),
            context=self.context,
            meta=meta,
            configuration=configuration,
        )

    @property
    def initial_state(self) -> MachineState:
        """The machine's initial state, produced by a synthetic init event."""
        if self._initial_state is None:
            entered: list[StateNode] = []
            self._complete(self.root, entered)
            actions = [action for node in entered for action in node.entry]
            self._initial_state = self._make_state(
                {node.path for node in entered},
                {"type": INIT_EVENT_TYPE},
                actions,
            )
        return self._initial_state

    def _select_transitions(self, state: MachineState, event: Event) -> list[TransitionDefinition]:
        leaves = [
            self._nodes[path] for path in state.configuration
            if self._nodes[path].is_atomic
        ]

        selected: list[TransitionDefinition] = []
        for leaf in leaves:
            for node in [leaf, *leaf.ancestors()]:
                candidate = next(
                    (
                        t for t in node.transitions.get(event["type"], [])
                        if t.is_enabled(state.context, event)
                    ),
                    None,
                )
                if candidate is not None:
                    if candidate not in selected:
                        selected.append(candidate)
                    break

        # Drop transitions whose exit domain overlaps one already chosen
        chosen: list[TransitionDefinition] = []
        domains: list[StateNode] = []
        for transition in selected:
            if not transition.targets:
                chosen.append(transition)
                continue
            domain = self._domain(transition)
            overlaps = any(
                domain is other or domain.is_descendant_of(other) or other.is_descendant_of(domain)
                for other in domains
            )
            if not overlaps:
                chosen.append(transition)
                domains.append(domain)

        return chosen

    def _domain(self, transition: TransitionDefinition) -> StateNode:
        """Nearest proper ancestor of the source that contains every target."""
        for ancestor in transition.source.ancestors():
            if all(
                self._nodes[target].is_descendant_of(ancestor)
                for target in transition.targets
            ):
                return ancestor
        return self.root

    def transition(self, state: MachineState, event: EventLike) -> MachineState:
        """Return the state reached by applying ``event`` to ``state``.

        Pure and deterministic: ``state`` is never modified. Unhandled
        events produce a state with the same value and no actions.
        """
        event = to_event(event)
        active = set(state.configuration)

        if state.done:
            return self._make_state(active, event, [])

        exit_actions: list[Action] = []
        transition_actions: list[Action] = []
        entry_actions: list[Action] = []

        for definition in self._select_transitions(state, event):
            transition_actions.extend(definition.actions)
            if not definition.targets:
                continue

            domain = self._domain(definition)
            exited = [
                self._nodes[path] for path in self._sorted(active)
                if self._nodes[path].is_descendant_of(domain)
            ]
            for node in reversed(exited):
                exit_actions.extend(node.exit)
                active.discard(node.path)

            entered: list[StateNode] = []
            for target in definition.targets:
                self._enter_path(domain, self._nodes[target], entered)
            for node in entered:
                if node.path not in active:
                    active.add(node.path)
                    entry_actions.extend(node.entry)

        return self._make_state(active, event, exit_actions + transition_actions + entry_actions)

    def _enter_path(self, domain: StateNode, target: StateNode, into: list[StateNode]) -> None:
        chain = [node for node in reversed(target.ancestors()) if node.is_descendant_of(domain)]
        on_chain = {node.path for node in chain} | {target.path}
        for node in chain:
            into.append(node)
            if node.type == PARALLEL:
                for child in node.children.values():
                    if child.path not in on_chain:
                        self._complete(child, into)
        self._complete(target, into)

    def __repr__(self) -> str:
        return f"Statechart(id='{self.id}', nodes={len(self._nodes)})"
