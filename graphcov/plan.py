"""Tree configuration and the graph build plan derived from it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

from .buildstore import BuildDataFS, EmptyJSONFileError, read_json_file

TREE_CONFIG_FILENAME = "config.json"


class PlanError(RuntimeError):
    """Raised when the tree configuration cannot be read or planned."""


@dataclass(frozen=True)
class SourceUnit:
    """An independently analyzed part of the tree."""

    name: str
    type: str
    dir: str = ""
    files: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TreeConfig:
    source_units: Tuple[SourceUnit, ...] = ()


@dataclass(frozen=True)
class GraphUnitRule:
    """Graphs a single unit into one artifact."""

    target: str
    unit: SourceUnit


@dataclass(frozen=True)
class GraphMultiUnitsRule:
    """Graphs several units at once; maps each artifact to its owning unit."""

    targets: Mapping[str, SourceUnit] = field(default_factory=dict)


@dataclass(frozen=True)
class DepResolveRule:
    target: str
    unit: SourceUnit


Rule = Union[GraphUnitRule, GraphMultiUnitsRule, DepResolveRule]


def graph_target(unit: SourceUnit) -> str:
    """Return the build data path of a unit's graph artifact."""
    return f"{unit.name}/{unit.type}.graph.json"


def depresolve_target(unit: SourceUnit) -> str:
    return f"{unit.name}/{unit.type}.depresolve.json"


def read_tree_config(fs: BuildDataFS) -> TreeConfig:
    """Load the cached tree configuration stored beside the graph artifacts."""
    try:
        payload = read_json_file(fs, TREE_CONFIG_FILENAME)
    except (OSError, EmptyJSONFileError, ValueError) as exc:
        raise PlanError(f"error reading tree config from {fs!r}: {exc}") from exc
    return parse_tree_config(payload)


def parse_tree_config(payload: Any) -> TreeConfig:
    if not isinstance(payload, dict):
        raise PlanError("tree config must contain a mapping at the root")

    raw_units = payload.get("SourceUnits") or []
    if not isinstance(raw_units, list):
        raise PlanError("tree config SourceUnits must be a list")

    units: List[SourceUnit] = []
    for index, raw in enumerate(raw_units):
        if not isinstance(raw, dict):
            raise PlanError(f"tree config SourceUnits[{index}] must be a mapping")
        name = raw.get("Name")
        unit_type = raw.get("Type")
        if not isinstance(name, str) or not name or not isinstance(unit_type, str) or not unit_type:
            raise PlanError(f"tree config SourceUnits[{index}] needs a Name and a Type")
        files = raw.get("Files") or []
        units.append(
            SourceUnit(
                name=name,
                type=unit_type,
                dir=str(raw.get("Dir") or ""),
                files=tuple(str(item) for item in files if isinstance(item, str)),
            )
        )
    return TreeConfig(source_units=tuple(units))


def create_plan(tree_config: TreeConfig, multi_unit_types: Sequence[str] = ()) -> List[Rule]:
    """Return the build rules for every unit in ``tree_config``.

    Units whose type appears in ``multi_unit_types`` are graphed together, one
    multi-unit rule per type, in order of first appearance.
    """
    grouped_types = set(multi_unit_types)
    rules: List[Rule] = []
    multi: Dict[str, Dict[str, SourceUnit]] = {}

    for unit in tree_config.source_units:
        rules.append(DepResolveRule(target=depresolve_target(unit), unit=unit))
        target = graph_target(unit)
        if unit.type in grouped_types:
            targets = multi.setdefault(unit.type, {})
            if target in targets:
                raise PlanError(f"duplicate source unit {unit.type} {unit.name}")
            targets[target] = unit
        else:
            rules.append(GraphUnitRule(target=target, unit=unit))

    for targets in multi.values():
        rules.append(GraphMultiUnitsRule(targets=targets))
    return rules


__all__ = [
    "DepResolveRule",
    "GraphMultiUnitsRule",
    "GraphUnitRule",
    "PlanError",
    "Rule",
    "SourceUnit",
    "TreeConfig",
    "create_plan",
    "graph_target",
    "read_tree_config",
]
