"""Source tree walking and per-file line counting."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterator, Optional

from .logging import get_logger
from .models import SourceFile
from .tokenizer import strip_comments

_LANGUAGE_BY_SUFFIX = {
    ".go": "Go",
    ".java": "Java",
    ".py": "Python",
    ".rb": "Ruby",
    ".cpp": "C++",
    ".ts": "TypeScript",
    ".cs": "C#",
    ".js": "JavaScript",
    ".php": "PHP",
    ".m": "Objective-C",
}

logger = get_logger("inventory")

# ASCII whitespace plus NEL and NBSP, read as single Latin-1 bytes.
_BLANK_BYTES = b" \t\n\v\f\r\x85\xa0"


class InventoryError(RuntimeError):
    """Raised when a source file cannot be read during the walk."""


def detect_language(path: str) -> Optional[str]:
    """Return the language for ``path`` or None when the suffix is not tracked."""
    _, suffix = os.path.splitext(path)
    return _LANGUAGE_BY_SUFFIX.get(suffix)


def count_lines(data: bytes, *, source: str = "<data>") -> int:
    """Count lines that are neither blank nor comment-only."""

    def _on_error(offset: int, message: str) -> None:
        logger.debug("Tokenizer error in %s at offset %d: %s", source, offset, message)

    stripped = strip_comments(data, _on_error)
    if not stripped:
        return 0

    count = 0
    start = 0
    end = stripped.find(b"\n")
    while end != -1:
        if stripped[start:end].strip(_BLANK_BYTES):
            count += 1
        start = end + 1
        end = stripped.find(b"\n", start)

    # Final segment has no trailing newline.
    if stripped[start:].strip(_BLANK_BYTES):
        count += 1
    return count


def _iter_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        dirnames[:] = sorted(name for name in dirnames if not name.startswith("."))
        for filename in sorted(filenames):
            yield current_dir / filename


def _read_source(path: Path) -> bytes:
    return path.read_bytes()


def build_inventory(root: str | Path) -> Dict[str, SourceFile]:
    """Walk ``root`` and return classified code files keyed by relative path.

    Hidden directories are skipped with their subtrees. Any unreadable code
    file aborts the walk with :class:`InventoryError`.
    """
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"Repository path not found: {root}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Repository path is not a directory: {root}")

    inventory: Dict[str, SourceFile] = {}
    for path in _iter_files(root_path):
        rel_path = path.relative_to(root_path).as_posix()
        language = detect_language(rel_path)
        if language is None:
            continue
        try:
            data = _read_source(path)
        except OSError as exc:
            raise InventoryError(f"error reading source file {rel_path}: {exc}") from exc
        inventory[rel_path] = SourceFile(
            path=rel_path,
            language=language,
            loc=count_lines(data, source=rel_path),
        )

    logger.debug("Inventory holds %d code files under %s", len(inventory), root_path)
    return inventory


__all__ = ["InventoryError", "build_inventory", "count_lines", "detect_language"]
