"""Pipeline orchestration shared by the CLI and service mode."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Dict, Optional

from .config import GraphCovConfig, as_dict, load_config
from .coverage import CoverageContext, compute_coverage
from .logging import get_logger
from .models import LanguageCoverage
from .repo import RepoOpener


class CoverageRunner:
    """Resolves the repository and configuration, then computes coverage."""

    def __init__(self, opener: RepoOpener | None = None) -> None:
        self._opener = opener
        self.logger = get_logger("orchestrator")

    def build_context(
        self,
        path: str,
        *,
        commit_id: Optional[str] = None,
        build_data_dir: Optional[str] = None,
    ) -> CoverageContext:
        repo_path = Path(path).expanduser().resolve()
        if not repo_path.exists():
            raise FileNotFoundError(f"Repository path not found: {path}")

        config = load_config(repo_path)
        # The cache switch lives in the root config, which is only known once
        # the repository has been opened.
        opener = self._opener or RepoOpener(cache=False)
        repo = opener.open(repo_path)
        if repo.root_dir and Path(repo.root_dir).resolve() != config.root:
            config = load_config(Path(repo.root_dir))
        self._resolve_opener(config)
        if build_data_dir:
            config.build_data_dir = build_data_dir
        if commit_id:
            repo = replace(repo, commit_id=commit_id)

        self.logger.debug("Effective configuration: %s", as_dict(config))
        return CoverageContext(repo=repo, config=config)

    def run(
        self,
        path: str,
        *,
        commit_id: Optional[str] = None,
        build_data_dir: Optional[str] = None,
    ) -> Dict[str, LanguageCoverage]:
        """Compute coverage for the repository containing ``path``."""
        context = self.build_context(path, commit_id=commit_id, build_data_dir=build_data_dir)
        repo = context.repo
        self.logger.info(
            "Computing coverage for %s at %s",
            repo.uri or repo.root_dir,
            repo.commit_id or "(no commit)",
        )
        report = compute_coverage(context)
        self.logger.debug("Computed coverage for %d languages", len(report))
        return report

    def _resolve_opener(self, config: GraphCovConfig) -> RepoOpener:
        if self._opener is None:
            self._opener = RepoOpener(cache=config.cache_repo)
        return self._opener


__all__ = ["CoverageRunner"]
