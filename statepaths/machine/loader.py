"""Load statechart definitions from YAML."""

from __future__ import annotations

import re
from pathlib import Path
from typing import IO, Any, Callable, Mapping

import yaml

from statepaths.errors import MachineDefinitionError
from statepaths.machine.statechart import Statechart

_BOOL_TAG = "tag:yaml.org,2002:bool"


class DefinitionLoader(yaml.SafeLoader):
    """SafeLoader that only reads true/false as booleans.

    YAML 1.1 also resolves ``on``, ``off``, ``yes`` and ``no`` to booleans,
    which would turn every ``on:`` transition block (and states named
    ``on`` / ``off``) into ``True`` / ``False`` keys.
    """


DefinitionLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
DefinitionLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def load_definition(source: str | Path | IO[str]) -> dict[str, Any]:
    """Read a machine definition mapping from a YAML file or stream."""
    try:
        if isinstance(source, (str, Path)):
            with open(source, encoding="utf-8") as f:
                data = yaml.load(f, Loader=DefinitionLoader)
        else:
            data = yaml.load(source, Loader=DefinitionLoader)
    except yaml.YAMLError as e:
        raise MachineDefinitionError(f"Invalid YAML in machine definition: {e}", cause=e) from e

    if not isinstance(data, dict):
        raise MachineDefinitionError("Machine definition file must contain a mapping")
    # Allow the definition to be nested under a top-level "machine" key
    if "machine" in data and isinstance(data["machine"], dict):
        data = data["machine"]
    return data


def load_machine(
    source: str | Path | IO[str],
    actions: Mapping[str, Callable[..., Any]] | None = None,
    guards: Mapping[str, Callable[..., bool]] | None = None,
    context: Any = None,
) -> Statechart:
    """Build a Statechart from a YAML definition.

    Named actions and guards referenced in the file are resolved against
    ``actions`` and ``guards``.

    Example:
        >>> machine = load_machine("machines/checkout.yaml", actions={"log": log_entry})
    """
    return Statechart(load_definition(source), context=context, actions=actions, guards=guards)
