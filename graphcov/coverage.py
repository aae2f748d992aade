"""Per-language coverage computed from the inventory and merged graph data."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .buildstore import get_build_data_fs
from .config import GraphCovConfig
from .inventory import build_inventory
from .loader import GraphData, is_valid_ref, load_graph_data
from .logging import get_logger
from .models import LanguageCoverage, SourceFile
from .plan import create_plan, read_tree_config
from .repo import Repo

FILE_TOKEN_THRESHOLD = 0.7
SENTINEL = -1.0

logger = get_logger("coverage")


def divide_sentinel(x: float, y: float, sentinel: float = SENTINEL) -> float:
    """Return ``x / y``, or ``sentinel`` when the quotient is undefined."""
    if y == 0:
        return sentinel
    return x / y


def is_file_covered(source_file: SourceFile) -> bool:
    """Files without lines of code are never covered."""
    if source_file.loc == 0:
        return False
    ratio = (source_file.num_defs + source_file.num_refs_valid) / source_file.loc
    return ratio > FILE_TOKEN_THRESHOLD


def fold_graph_data(inventory: Mapping[str, SourceFile], graph_data: GraphData) -> None:
    """Accumulate ref and def counts onto the tracked files they occur in."""
    for output in graph_data.outputs:
        for ref in output.refs:
            source_file = inventory.get(ref.file)
            if source_file is None:
                continue
            source_file.num_refs += 1
            if is_valid_ref(ref, graph_data.def_keys):
                source_file.num_refs_valid += 1

        for definition in output.defs:
            source_file = inventory.get(definition.file)
            if source_file is not None:
                source_file.num_defs += 1


@dataclass
class LanguageStats:
    num_files: int = 0
    num_covered_files: int = 0
    num_defs: int = 0
    num_refs: int = 0
    num_refs_valid: int = 0
    loc: int = 0
    uncovered_files: List[str] = field(default_factory=list)

    def add(self, source_file: SourceFile) -> None:
        self.num_files += 1
        self.loc += source_file.loc
        self.num_defs += source_file.num_defs
        self.num_refs += source_file.num_refs
        self.num_refs_valid += source_file.num_refs_valid
        if is_file_covered(source_file):
            self.num_covered_files += 1
        else:
            self.uncovered_files.append(source_file.path)

    def to_coverage(self) -> LanguageCoverage:
        return LanguageCoverage(
            file_score=divide_sentinel(self.num_covered_files, self.num_files),
            ref_score=divide_sentinel(self.num_refs_valid, self.num_refs),
            tok_density=divide_sentinel(self.num_defs + self.num_refs, self.loc),
            uncovered_files=list(self.uncovered_files),
        )


def summarize(inventory: Mapping[str, SourceFile]) -> Dict[str, LanguageCoverage]:
    """Reduce per-file data to one coverage record per language."""
    stats: Dict[str, LanguageStats] = {}
    for source_file in inventory.values():
        stats.setdefault(source_file.language, LanguageStats()).add(source_file)
    return {language: language_stats.to_coverage() for language, language_stats in stats.items()}


@dataclass
class CoverageContext:
    """Everything one coverage computation needs; nothing is shared between runs."""

    repo: Repo
    config: GraphCovConfig
    root: Optional[Path] = None

    @property
    def tree_root(self) -> Path:
        return self.root if self.root is not None else Path(self.repo.root_dir)


def compute_coverage(context: CoverageContext) -> Dict[str, LanguageCoverage]:
    """Compute per-language coverage for the context's tree and build data."""
    inventory = build_inventory(context.tree_root)

    fs = get_build_data_fs(context.repo, context.config.build_data_dir)
    logger.debug("Reading build data from %r", fs)
    tree_config = read_tree_config(fs)
    rules = create_plan(tree_config, context.config.multi_unit_types)
    graph_data = load_graph_data(fs, rules)
    logger.debug(
        "Merged %d outputs holding %d distinct definition keys",
        len(graph_data.outputs),
        len(graph_data.def_keys),
    )

    fold_graph_data(inventory, graph_data)
    return summarize(inventory)


def coverage_to_dict(report: Mapping[str, LanguageCoverage]) -> Dict[str, Dict[str, Any]]:
    """Return a JSON-ready view of ``report`` ordered by language name."""
    return {language: report[language].to_dict() for language in sorted(report)}


__all__ = [
    "FILE_TOKEN_THRESHOLD",
    "SENTINEL",
    "CoverageContext",
    "LanguageStats",
    "compute_coverage",
    "coverage_to_dict",
    "divide_sentinel",
    "fold_graph_data",
    "is_file_covered",
    "summarize",
]
