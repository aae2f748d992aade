"""FastAPI application entrypoint for graphcov service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..models import LanguageCoverage
from ..orchestrator import CoverageRunner


class CoverageRequest(BaseModel):
    path: str
    commit_id: Optional[str] = None
    build_data_dir: Optional[str] = None


class LanguageCoverageModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_score: float = Field(alias="FileScore")
    ref_score: float = Field(alias="RefScore")
    tok_density: float = Field(alias="TokDensity")
    uncovered_files: List[str] = Field(default_factory=list, alias="UncoveredFiles")


class CoverageResponse(BaseModel):
    languages: Dict[str, LanguageCoverageModel]


class HealthResponse(BaseModel):
    status: str


def _default_runner() -> CoverageRunner:
    return CoverageRunner()


def _to_model(coverage: LanguageCoverage) -> LanguageCoverageModel:
    return LanguageCoverageModel(
        file_score=coverage.file_score,
        ref_score=coverage.ref_score,
        tok_density=coverage.tok_density,
        uncovered_files=list(coverage.uncovered_files),
    )


def create_app(
    runner_factory: Callable[[], CoverageRunner] = _default_runner,
) -> FastAPI:
    """Create the FastAPI application exposing coverage computation."""

    app = FastAPI(title="graphcov service", version="0.1.0")
    # One runner per app; its repository cache spans requests.
    runners: List[CoverageRunner] = []

    async def get_runner() -> CoverageRunner:
        if not runners:
            runners.append(runner_factory())
        return runners[0]

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/coverage", response_model=CoverageResponse, response_model_by_alias=True)
    async def coverage(
        payload: CoverageRequest,
        runner: CoverageRunner = Depends(get_runner),
    ) -> CoverageResponse:
        def _run() -> Dict[str, LanguageCoverage]:
            return runner.run(
                payload.path,
                commit_id=payload.commit_id,
                build_data_dir=payload.build_data_dir,
            )

        loop = asyncio.get_running_loop()
        report = await loop.run_in_executor(None, _run)
        return CoverageResponse(
            languages={language: _to_model(report[language]) for language in sorted(report)}
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover
    """Serve the application with uvicorn."""
    app = create_app()
    uvicorn.run(app, host=host, port=port)
