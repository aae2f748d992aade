"""Tests for tree config parsing, plan creation and the build data store."""

from __future__ import annotations

import pytest

from graphcov.buildstore import BuildDataFS, EmptyJSONFileError, get_build_data_fs, read_json_file
from graphcov.plan import (
    DepResolveRule,
    GraphMultiUnitsRule,
    GraphUnitRule,
    PlanError,
    SourceUnit,
    create_plan,
    parse_tree_config,
    read_tree_config,
)
from graphcov.repo import Repo
from tests._fixtures.repo_builder import RepoBuilder


def test_parse_tree_config_reads_units() -> None:
    config = parse_tree_config(
        {"SourceUnits": [{"Name": "a", "Type": "GoPackage", "Dir": "a", "Files": ["a/a.go", 3]}]}
    )

    assert config.source_units == (
        SourceUnit(name="a", type="GoPackage", dir="a", files=("a/a.go",)),
    )


@pytest.mark.parametrize(
    "payload",
    [[], {"SourceUnits": {"a": 1}}, {"SourceUnits": ["a"]}, {"SourceUnits": [{"Name": "a"}]}],
)
def test_parse_tree_config_rejects_malformed(payload: object) -> None:
    with pytest.raises(PlanError):
        parse_tree_config(payload)


def test_create_plan_emits_single_and_multi_unit_rules() -> None:
    go = SourceUnit(name="cmd", type="GoPackage")
    jar_a = SourceUnit(name="a", type="JavaArtifact")
    jar_b = SourceUnit(name="b", type="JavaArtifact")
    config = parse_tree_config(
        {
            "SourceUnits": [
                {"Name": "cmd", "Type": "GoPackage"},
                {"Name": "a", "Type": "JavaArtifact"},
                {"Name": "b", "Type": "JavaArtifact"},
            ]
        }
    )

    rules = create_plan(config, multi_unit_types=["JavaArtifact"])

    graph_rules = [rule for rule in rules if not isinstance(rule, DepResolveRule)]
    assert graph_rules == [
        GraphUnitRule(target="cmd/GoPackage.graph.json", unit=go),
        GraphMultiUnitsRule(
            targets={"a/JavaArtifact.graph.json": jar_a, "b/JavaArtifact.graph.json": jar_b}
        ),
    ]
    assert sum(isinstance(rule, DepResolveRule) for rule in rules) == 3


def test_create_plan_rejects_duplicate_multi_units() -> None:
    config = parse_tree_config(
        {
            "SourceUnits": [
                {"Name": "a", "Type": "JavaArtifact"},
                {"Name": "a", "Type": "JavaArtifact"},
            ]
        }
    )

    with pytest.raises(PlanError):
        create_plan(config, multi_unit_types=["JavaArtifact"])


def test_read_tree_config_missing_is_fatal(repo_builder: RepoBuilder) -> None:
    with pytest.raises(PlanError, match="tree config"):
        read_tree_config(BuildDataFS(repo_builder.build_data_dir()))


def test_read_json_file_flags_empty_files(repo_builder: RepoBuilder) -> None:
    repo_builder.write_build_data("empty.json", "  \n")
    fs = BuildDataFS(repo_builder.build_data_dir())

    with pytest.raises(EmptyJSONFileError):
        read_json_file(fs, "empty.json")
    with pytest.raises(FileNotFoundError):
        read_json_file(fs, "missing.json")


def test_build_data_fs_rejects_escaping_paths(repo_builder: RepoBuilder) -> None:
    fs = BuildDataFS(repo_builder.build_data_dir())

    with pytest.raises(ValueError):
        fs.open("../config.json")


def test_get_build_data_fs_is_scoped_to_commit(repo_builder: RepoBuilder) -> None:
    fs = get_build_data_fs(repo_builder.repo(), ".srclib-cache")
    assert fs.root == repo_builder.build_data_dir()

    no_commit = get_build_data_fs(Repo(root_dir=str(repo_builder.path()), commit_id=""), "data")
    assert no_commit.root == repo_builder.path() / "data"
