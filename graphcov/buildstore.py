"""Read-only access to build data produced for a commit."""

from __future__ import annotations

import json
from pathlib import Path, PurePosixPath
from typing import Any, BinaryIO

from .repo import Repo


class EmptyJSONFileError(ValueError):
    """Raised when a build data file exists but holds no JSON document."""


class BuildDataFS:
    """Named artifact blobs rooted at one build data directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def _resolve(self, name: str) -> Path:
        relative = PurePosixPath(name.replace("\\", "/"))
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"build data path escapes the store: {name}")
        return self.root.joinpath(*relative.parts)

    def open(self, name: str) -> BinaryIO:
        """Open ``name`` for reading; missing files raise FileNotFoundError."""
        return self._resolve(name).open("rb")

    def __repr__(self) -> str:
        return f"BuildDataFS({str(self.root)!r})"


def get_build_data_fs(repo: Repo, build_data_dir: str) -> BuildDataFS:
    """Return the build data store for the repository's current commit."""
    base = Path(build_data_dir).expanduser()
    if not base.is_absolute():
        base = Path(repo.root_dir) / base
    return BuildDataFS(base / repo.commit_id if repo.commit_id else base)


def read_json_file(fs: BuildDataFS, name: str) -> Any:
    """Decode the JSON document stored under ``name``."""
    with fs.open(name) as handle:
        raw = handle.read()
    if not raw.strip():
        raise EmptyJSONFileError(f"{name} is empty")
    return json.loads(raw)


__all__ = ["BuildDataFS", "EmptyJSONFileError", "get_build_data_fs", "read_json_file"]
