"""Configuration loading for graphcov (.graphcov.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".graphcov.yml"
DEFAULT_BUILD_DATA_DIR = ".srclib-cache"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class GraphCovConfig:
    """Represents the settings defined in .graphcov.yml."""

    root: Path
    build_data_dir: str = DEFAULT_BUILD_DATA_DIR
    cache_repo: bool = True
    multi_unit_types: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> GraphCovConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GraphCovConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    build_data_dir = _as_str(data.get("build_data_dir")) or DEFAULT_BUILD_DATA_DIR
    cache_repo = _as_bool(data.get("cache_repo"))

    return GraphCovConfig(
        root=root,
        build_data_dir=build_data_dir,
        cache_repo=True if cache_repo is None else cache_repo,
        multi_unit_types=_as_str_list(data.get("multi_unit_types")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


def as_dict(config: GraphCovConfig) -> Dict[str, Any]:
    """Return a loggable view of the effective configuration."""
    return {
        "root": str(config.root),
        "build_data_dir": config.build_data_dir,
        "cache_repo": config.cache_repo,
        "multi_unit_types": list(config.multi_unit_types),
    }
