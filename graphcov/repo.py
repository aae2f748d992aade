"""Local repository discovery and clone URL canonicalization."""

from __future__ import annotations

import posixpath
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, Union
from urllib.parse import urlsplit

from .logging import get_logger

Runner = Callable[..., str]

logger = get_logger("repo")


class RepoError(RuntimeError):
    """Raised when the repository or its current commit cannot be resolved."""


@dataclass(frozen=True)
class Repo:
    """A local working tree checked out at ``commit_id``."""

    root_dir: str
    commit_id: str
    clone_url: str = ""
    uri: str = ""


def make_uri(clone_url: str) -> str:
    """Convert a clone URL such as ``git://github.com/user/repo.git`` to ``github.com/user/repo``.

    The result is a fixed point: ``make_uri("github.com/user/repo")`` returns its
    input. Raises ValueError for empty or malformed URLs.
    """
    if not clone_url:
        raise ValueError("make_uri: empty clone URL")

    parts = urlsplit(clone_url)
    host = parts.hostname or ""
    if parts.port is not None:
        host = f"{host}:{parts.port}"
    path = parts.path

    if not parts.netloc and ":" in path.split("/", 1)[0]:
        raise ValueError(f"first path segment in URL cannot contain colon ({clone_url!r})")
    if path in ("", "/"):
        raise ValueError(
            f"determining URI from repo clone URL failed: missing path from URL ({clone_url!r})"
        )
    if not host and (path.startswith("/") or "/" not in path.strip("/")):
        raise ValueError(
            f"determining URI from repo clone URL failed: missing host from URL ({clone_url!r})"
        )

    if path.endswith(".git"):
        path = path[: -len(".git")]
    path = posixpath.normpath(path).rstrip("/")
    return host.lower() + path


def open_repo(path: str | Path, *, runner: Runner | None = None) -> Repo:
    """Open the git working tree containing ``path``."""
    run = runner or _default_runner
    start = Path(path).expanduser().resolve()
    if not start.is_dir():
        raise RepoError(f"Repository path is not a directory: {path}")

    try:
        root_dir = run(
            ["git", "rev-parse", "--show-toplevel"], cwd=start, capture_output=True
        ).strip()
        commit_id = run(["git", "rev-parse", "HEAD"], cwd=start, capture_output=True).strip()
    except (OSError, subprocess.CalledProcessError) as exc:
        raise RepoError(f"Failed to open repository at {start}: {exc}") from exc

    try:
        clone_url = run(
            ["git", "config", "--get", "remote.origin.url"], cwd=start, capture_output=True
        ).strip()
    except subprocess.CalledProcessError:
        # git exits non-zero when no origin remote is configured.
        clone_url = ""

    uri = ""
    if clone_url:
        try:
            uri = make_uri(clone_url)
        except ValueError as exc:
            logger.warning("Ignoring origin URL for %s: %s", root_dir, exc)

    return Repo(root_dir=root_dir, commit_id=commit_id, clone_url=clone_url, uri=uri)


class RepoOpener:
    """Opens repositories, optionally reusing the first result per path.

    With ``cache`` enabled, repeated calls for the same path return the same
    Repo (or raise the same error) even if the working tree has moved on.
    """

    def __init__(self, *, cache: bool = True, runner: Runner | None = None) -> None:
        self.cache = cache
        self._runner = runner
        self._results: Dict[Path, Union[Repo, RepoError]] = {}

    def open(self, path: str | Path) -> Repo:
        key = Path(path).expanduser().resolve()
        if not self.cache:
            return open_repo(key, runner=self._runner)

        if key not in self._results:
            try:
                self._results[key] = open_repo(key, runner=self._runner)
            except RepoError as exc:
                self._results[key] = exc

        result = self._results[key]
        if isinstance(result, RepoError):
            raise result
        return result


def _default_runner(
    args: Iterable[str],
    *,
    cwd: Path,
    capture_output: bool = False,
) -> str:
    completed = subprocess.run(
        list(args),
        cwd=str(cwd),
        check=True,
        text=True,
        capture_output=capture_output,
    )
    return completed.stdout if capture_output else ""


__all__ = ["Repo", "RepoError", "RepoOpener", "make_uri", "open_repo"]
