"""FastAPI application entrypoint for techscan service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import TechScanConfig, load_config
from ..github import NetworkError
from ..logging import get_logger
from ..orchestrator import (
    DEFAULT_DEPTH,
    AnalysisOrchestrator,
    InvalidRepositoryURL,
    OrchestrationError,
)

OrchestratorFactory = Callable[..., AnalysisOrchestrator]

logger = get_logger("service")


class AnalyzeRequest(BaseModel):
    repository_url: str
    github_token: str
    user_id: str
    analysis_depth: Literal["basic", "standard", "comprehensive"] = DEFAULT_DEPTH
    focus_areas: List[str] = Field(default_factory=list)


class ExploreRequest(BaseModel):
    repository_url: str
    github_token: str


class HealthResponse(BaseModel):
    status: str


def _config_factory(config: TechScanConfig) -> OrchestratorFactory:
    def factory(**kwargs: Any) -> AnalysisOrchestrator:
        return AnalysisOrchestrator(**kwargs, **config.orchestrator_options())

    return factory


def _status_for(exc: OrchestrationError) -> int:
    cause = exc.__cause__
    if isinstance(cause, InvalidRepositoryURL):
        return 400
    if isinstance(cause, NetworkError):
        return 502
    return 500


async def _run_blocking(func: Callable[[], Any]) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(
    orchestrator_factory: Optional[OrchestratorFactory] = None,
    *,
    config: TechScanConfig | None = None,
) -> FastAPI:
    """Create the FastAPI application exposing the analysis pipeline.

    ``orchestrator_factory`` is called with the keyword arguments of
    ``AnalysisOrchestrator`` for each request; by default it applies the
    settings from ``.techscan.yml`` in the working directory.
    """
    if orchestrator_factory is None:
        orchestrator_factory = _config_factory(config or load_config(Path.cwd()))
    factory = orchestrator_factory

    app = FastAPI(title="TechScan Service", version="1.0.0")

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze")
    async def analyze(payload: AnalyzeRequest) -> Dict[str, Any]:
        orchestrator = factory(
            github_token=payload.github_token,
            repository_url=payload.repository_url,
            user_id=payload.user_id,
            analysis_depth=payload.analysis_depth,
            focus_areas=list(payload.focus_areas),
        )
        return await _run_blocking(orchestrator.orchestrate)

    @app.post("/explore")
    async def explore(payload: ExploreRequest) -> Dict[str, Any]:
        orchestrator = factory(
            github_token=payload.github_token,
            repository_url=payload.repository_url,
            user_id="",
        )
        exploration = await _run_blocking(orchestrator.explore_only)
        return exploration.to_dict()

    @app.exception_handler(OrchestrationError)
    async def orchestration_error_handler(_: Any, exc: OrchestrationError) -> JSONResponse:
        status = _status_for(exc)
        logger.warning("Request failed with %d: %s", status, exc)
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)


__all__ = ["AnalyzeRequest", "ExploreRequest", "HealthResponse", "create_app", "run_service"]
