"""Tests for graphcov.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from graphcov.config import ConfigError, GraphCovConfig, as_dict, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, GraphCovConfig)
    assert config.root == tmp_path.resolve()
    assert config.build_data_dir == ".srclib-cache"
    assert config.cache_repo is True
    assert config.multi_unit_types == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".graphcov.yml"
    config_file.write_text(
        """
build_data_dir: build/graph-data
cache_repo: "no"
multi_unit_types: [JavaArtifact, ScalaArtifact]
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.build_data_dir == "build/graph-data"
    assert config.cache_repo is False
    assert config.multi_unit_types == ["JavaArtifact", "ScalaArtifact"]
    assert as_dict(config)["multi_unit_types"] == ["JavaArtifact", "ScalaArtifact"]


def test_load_config_accepts_single_multi_unit_type(tmp_path: Path) -> None:
    (tmp_path / ".graphcov.yml").write_text("multi_unit_types: JavaArtifact\n", encoding="utf-8")

    assert load_config(tmp_path).multi_unit_types == ["JavaArtifact"]


def test_load_config_treats_empty_file_as_defaults(tmp_path: Path) -> None:
    (tmp_path / ".graphcov.yml").write_text("\n# nothing\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.build_data_dir == ".srclib-cache"


@pytest.mark.parametrize("content", ["- a\n- b\n", "build_data_dir: [unclosed\n"])
def test_load_config_rejects_invalid_documents(tmp_path: Path, content: str) -> None:
    (tmp_path / ".graphcov.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
