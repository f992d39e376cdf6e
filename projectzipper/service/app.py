"""FastAPI application entrypoint for projectzipper service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import ProjectZipperConfig
from ..models import PipelineResult, StepType, WorkflowStepConfig
from ..orchestrator import Orchestrator, PipelineError
from ..prompting.constants import CODE_REFACTORING_PROMPT, step_definition
from ..refactor import RefactorError, refactor_code


class StepModel(BaseModel):
    id: str
    type: StepType
    name: str
    prompt: str
    enabled: bool = True


class FileModel(BaseModel):
    path: str
    content: str = ""


class ProcessRequest(BaseModel):
    text: str
    steps: Optional[List[StepModel]] = None
    api_key: Optional[str] = None


class ProcessResponse(BaseModel):
    files: List[FileModel]
    notes: str = ""


class RefactorRequest(BaseModel):
    code: str
    prompt: Optional[str] = None
    api_key: Optional[str] = None


class RefactorResponse(BaseModel):
    code: str


class StepsResponse(BaseModel):
    steps: List[StepModel] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def _to_step_config(step: StepModel) -> WorkflowStepConfig:
    prompt = step.prompt or step_definition(step.type).prompt
    return WorkflowStepConfig(
        id=step.id, type=step.type, name=step.name, prompt=prompt, enabled=step.enabled
    )


def _to_response(result: PipelineResult) -> ProcessResponse:
    return ProcessResponse(
        files=[FileModel(path=item.path, content=item.content) for item in result.files],
        notes=result.notes,
    )


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing the extraction pipeline."""

    app = FastAPI(title="ProjectZipper Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # One orchestrator per request so no pipeline state crosses runs.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/steps", response_model=StepsResponse)
    async def list_steps(
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> StepsResponse:
        return StepsResponse(
            steps=[
                StepModel(
                    id=step.id,
                    type=step.type,
                    name=step.name,
                    prompt=step.prompt,
                    enabled=step.enabled,
                )
                for step in orchestrator.default_steps()
            ]
        )

    @app.post("/process", response_model=ProcessResponse)
    async def process(
        payload: ProcessRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> ProcessResponse:
        steps = (
            [_to_step_config(step) for step in payload.steps]
            if payload.steps is not None
            else None
        )

        def _run() -> PipelineResult:
            return orchestrator.run(payload.text, steps, credential=payload.api_key)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run)
        return _to_response(result)

    @app.post("/refactor", response_model=RefactorResponse)
    async def refactor(
        payload: RefactorRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> RefactorResponse:
        def _run() -> str:
            return refactor_code(
                payload.code,
                payload.prompt or CODE_REFACTORING_PROMPT,
                payload.api_key,
                gateway_factory=orchestrator.gateway_factory,
            )

        loop = asyncio.get_running_loop()
        code = await loop.run_in_executor(None, _run)
        return RefactorResponse(code=code)

    @app.exception_handler(PipelineError)
    async def pipeline_error_handler(
        _: Any, exc: PipelineError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(RefactorError)
    async def refactor_error_handler(
        _: Any, exc: RefactorError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1",
    port: int = 8000,
    *,
    config: ProjectZipperConfig | None = None,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(lambda: Orchestrator(config=config))
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
