"""Core data models shared across graphcov components."""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class SourceFile:
    """A classified code file and the graph data folded into it."""

    path: str
    language: str
    loc: int
    num_refs: int = 0
    num_refs_valid: int = 0
    num_defs: int = 0


@dataclass
class LanguageCoverage:
    """Coverage scores for one language; scores may hold the sentinel value."""

    file_score: float
    ref_score: float
    tok_density: float
    uncovered_files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "FileScore": self.file_score,
            "RefScore": self.ref_score,
            "TokDensity": self.tok_density,
            "UncoveredFiles": list(self.uncovered_files),
        }
