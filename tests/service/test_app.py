"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from graphcov.loader import GraphDataError
from graphcov.models import LanguageCoverage
from graphcov.service import create_app


class _StubRunner:
    def __init__(self) -> None:
        self.calls: list[dict[str, object]] = []

    def run(
        self,
        path: str,
        *,
        commit_id: Optional[str] = None,
        build_data_dir: Optional[str] = None,
    ) -> Dict[str, LanguageCoverage]:
        self.calls.append({"path": path, "commit_id": commit_id, "build_data_dir": build_data_dir})
        if path.endswith("missing"):
            raise FileNotFoundError(f"Repository path not found: {path}")
        if path.endswith("broken"):
            raise GraphDataError(
                "error reading JSON file a/GoPackage.graph.json for unit GoPackage a"
            )
        return {
            "Go": LanguageCoverage(
                file_score=0.5, ref_score=-1.0, tok_density=0.25, uncovered_files=["b.go"]
            )
        }


@pytest.fixture
def runner() -> _StubRunner:
    return _StubRunner()


@pytest.fixture
def client(runner: _StubRunner) -> TestClient:
    app = create_app(lambda: runner)  # type: ignore[arg-type, return-value]
    return TestClient(app)


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_coverage_endpoint(client: TestClient, runner: _StubRunner, tmp_path: Path) -> None:
    response = client.post("/coverage", json={"path": str(tmp_path), "commit_id": "abc"})

    assert response.status_code == 200
    assert response.json() == {
        "languages": {
            "Go": {
                "FileScore": 0.5,
                "RefScore": -1.0,
                "TokDensity": 0.25,
                "UncoveredFiles": ["b.go"],
            }
        }
    }
    assert runner.calls == [{"path": str(tmp_path), "commit_id": "abc", "build_data_dir": None}]


def test_coverage_endpoint_maps_missing_path_to_404(client: TestClient) -> None:
    response = client.post("/coverage", json={"path": "/nowhere/missing"})
    assert response.status_code == 404


def test_coverage_endpoint_maps_fatal_errors_to_400(client: TestClient) -> None:
    response = client.post("/coverage", json={"path": "/repo/broken"})
    assert response.status_code == 400
    assert "GoPackage a" in response.json()["detail"]


def test_runner_is_shared_across_requests(runner: _StubRunner, tmp_path: Path) -> None:
    built: list[_StubRunner] = []

    def _factory() -> _StubRunner:
        built.append(runner)
        return runner

    client = TestClient(create_app(_factory))  # type: ignore[arg-type]

    for commit in ("abc", "def"):
        response = client.post("/coverage", json={"path": str(tmp_path), "commit_id": commit})
        assert response.status_code == 200

    assert len(built) == 1
    assert [call["commit_id"] for call in runner.calls] == ["abc", "def"]
