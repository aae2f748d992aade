"""Loading and merging per-unit graph artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, List, Set

from pydantic import ValidationError

from .buildstore import BuildDataFS, EmptyJSONFileError, read_json_file
from .graph import DefKey, GraphOutput, Ref
from .logging import get_logger
from .plan import GraphMultiUnitsRule, GraphUnitRule, Rule, SourceUnit

logger = get_logger("loader")


class GraphDataError(RuntimeError):
    """Raised when a graph artifact exists but cannot be decoded."""


@dataclass
class GraphData:
    """Definition keys and outputs merged across every loaded unit."""

    def_keys: Set[DefKey] = field(default_factory=set)
    outputs: List[GraphOutput] = field(default_factory=list)


def normalize_def_key(key: DefKey, unit: SourceUnit) -> DefKey:
    """Return ``key`` comparable across units.

    The repository is dropped and an empty unit type or name is taken from
    the unit that emitted the key.
    """
    return replace(
        key,
        repo="",
        unit_type=key.unit_type or unit.type,
        unit=key.unit or unit.name,
    )


def is_valid_ref(ref: Ref, def_keys: Set[DefKey]) -> bool:
    """A reference resolves through an explicit defining repository or a known local key."""
    if ref.def_repo:
        return True
    return replace(ref.def_key(), repo="") in def_keys


def _read_graph_output(fs: BuildDataFS, target: str, unit: SourceUnit) -> GraphOutput | None:
    try:
        payload = read_json_file(fs, target)
        return GraphOutput.model_validate(payload)
    except EmptyJSONFileError:
        logger.warning("the JSON file is empty for unit %s %s", unit.type, unit.name)
    except FileNotFoundError:
        logger.warning("no build data for unit %s %s", unit.type, unit.name)
    except (OSError, ValueError, ValidationError) as exc:
        raise GraphDataError(
            f"error reading JSON file {target} for unit {unit.type} {unit.name}: {exc}"
        ) from exc
    return None


def _load_unit(data: GraphData, fs: BuildDataFS, target: str, unit: SourceUnit) -> None:
    output = _read_graph_output(fs, target, unit)
    if output is None:
        return

    for definition in output.defs:
        data.def_keys.add(normalize_def_key(definition.def_key(), unit))
    output.refs = [ref.with_def_key(normalize_def_key(ref.def_key(), unit)) for ref in output.refs]
    data.outputs.append(output)
    logger.debug(
        "Loaded %d defs and %d refs for unit %s %s",
        len(output.defs),
        len(output.refs),
        unit.type,
        unit.name,
    )


def load_graph_data(fs: BuildDataFS, rules: Iterable[Rule]) -> GraphData:
    """Read the graph artifact of every graph rule; other rule kinds are ignored."""
    data = GraphData()
    for rule in rules:
        if isinstance(rule, GraphUnitRule):
            _load_unit(data, fs, rule.target, rule.unit)
        elif isinstance(rule, GraphMultiUnitsRule):
            for target, unit in rule.targets.items():
                _load_unit(data, fs, target, unit)
    return data


__all__ = ["GraphData", "GraphDataError", "is_valid_ref", "load_graph_data", "normalize_def_key"]
