"""Pipeline orchestration: extract files, then run the enabled workflow steps."""

from __future__ import annotations

import functools
from typing import Callable, Dict, List, Optional, Sequence

from .config import ProjectZipperConfig
from .extractor import extract
from .ingest import InputFile, ingest
from .llm.gateway import AssistGateway, GatewayFactory, get_gateway
from .logging import get_logger
from .models import (
    PipelineResult,
    PipelineState,
    PipelineStatus,
    ProjectFile,
    StepType,
    WorkflowStepConfig,
)
from .prompting.constants import default_workflow_steps
from .steps import (
    extract_documentation_notes,
    find_additional_files,
    generate_readme,
    upsert_readme,
)

EMPTY_PROJECT_MESSAGE = "Unable to parse any files. Check the input format."

PipelineInput = str | Sequence[InputFile]
ProgressCallback = Callable[[str], None]
StepHandler = Callable[
    [PipelineState, WorkflowStepConfig, Optional[str], GatewayFactory], PipelineState
]


class PipelineError(RuntimeError):
    """Raised when a run is abandoned; no partial state is returned."""


class Orchestrator:
    """Coordinates one extraction pipeline run at a time.

    Steps run strictly in the configured order, each taking ownership of the
    state produced by its predecessor. AI failures are absorbed inside the
    steps; only ingest failures, unexpected errors and an empty file set end a
    run with :class:`PipelineError`.
    """

    def __init__(
        self,
        gateway_factory: GatewayFactory | None = None,
        *,
        config: ProjectZipperConfig | None = None,
        progress: ProgressCallback | None = None,
    ) -> None:
        self.config = config
        if gateway_factory is None:
            gateway_factory = functools.partial(
                get_gateway, config=config.llm if config is not None else None
            )
        self.gateway_factory = gateway_factory
        self.progress = progress
        self.status = PipelineStatus.IDLE
        self.last_status: PipelineStatus | None = None
        self.logger = get_logger("orchestrator")
        self._handlers: Dict[StepType, StepHandler] = {
            StepType.FIND_FILES: self._run_find_files,
            StepType.EXTRACT_DOCS: self._run_extract_docs,
            StepType.GENERATE_README: self._run_generate_readme,
        }

    def default_steps(self) -> List[WorkflowStepConfig]:
        if self.config is not None:
            return list(self.config.steps)
        return default_workflow_steps()

    def run(
        self,
        source: PipelineInput,
        steps: Sequence[WorkflowStepConfig] | None = None,
        credential: str | None = None,
    ) -> PipelineResult:
        """Run the pipeline and return the final files and notes."""
        configured = list(steps) if steps is not None else self.default_steps()
        active = [step for step in configured if step.enabled]

        try:
            self.status = PipelineStatus.PREPARING
            self._report(f"1/{len(active) + 1}: Preparing input...")
            state = self._prepare(source)

            self.status = PipelineStatus.RUNNING
            gateway_factory = self._warn_once_factory()
            for index, step in enumerate(active):
                self._report(f"{index + 2}/{len(active) + 1}: Running step \"{step.name}\"...")
                self.logger.info("Running step %d/%d: %s", index + 1, len(active), step.name)
                state = self._handlers[step.type](state, step, credential, gateway_factory)

            if not state.files:
                raise PipelineError(EMPTY_PROJECT_MESSAGE)
        except PipelineError as exc:
            self.status = PipelineStatus.FAILURE
            self.logger.error("Pipeline failed: %s", exc)
            raise
        except Exception as exc:
            self.status = PipelineStatus.FAILURE
            self.logger.error("Pipeline failed: %s", exc)
            message = str(exc) or "An unexpected error occurred while processing the input."
            raise PipelineError(message) from exc
        else:
            self.status = PipelineStatus.SUCCESS
            self.logger.info("Pipeline finished with %d file(s)", len(state.files))
            return PipelineResult(
                files=[item.copy() for item in state.files],
                notes=state.documentation_notes,
            )
        finally:
            self.last_status = self.status
            self.status = PipelineStatus.IDLE

    def _prepare(self, source: PipelineInput) -> PipelineState:
        if isinstance(source, str):
            raw_text = source
        else:
            raw_text = ingest(source)
        files = self._dedupe(extract(raw_text))
        self.logger.debug("Extractor produced %d file(s)", len(files))
        return PipelineState(full_project_content=raw_text, files=files, documentation_notes="")

    def _dedupe(self, files: Sequence[ProjectFile]) -> List[ProjectFile]:
        seen: set[str] = set()
        unique: List[ProjectFile] = []
        for item in files:
            if item.path in seen:
                self.logger.debug("Dropping duplicate section for %s", item.path)
                continue
            seen.add(item.path)
            unique.append(item)
        return unique

    def _run_find_files(
        self,
        state: PipelineState,
        step: WorkflowStepConfig,
        credential: str | None,
        gateway_factory: GatewayFactory,
    ) -> PipelineState:
        return find_additional_files(
            state, step.prompt, credential, gateway_factory=gateway_factory
        )

    def _run_extract_docs(
        self,
        state: PipelineState,
        step: WorkflowStepConfig,
        credential: str | None,
        gateway_factory: GatewayFactory,
    ) -> PipelineState:
        return extract_documentation_notes(
            state, step.prompt, credential, gateway_factory=gateway_factory
        )

    def _run_generate_readme(
        self,
        state: PipelineState,
        step: WorkflowStepConfig,
        credential: str | None,
        gateway_factory: GatewayFactory,
    ) -> PipelineState:
        content = generate_readme(
            state, step.prompt, credential, gateway_factory=gateway_factory
        )
        updated = state.clone()
        updated.files = upsert_readme(updated.files, content)
        return updated

    def _warn_once_factory(self) -> GatewayFactory:
        """Wrap the gateway factory so a missing credential is reported once per run."""
        warned = False

        def factory(credential: str | None) -> Optional[AssistGateway]:
            nonlocal warned
            gateway = self.gateway_factory(credential)
            if gateway is None and not warned:
                self.logger.warning("No model API key is configured; AI-assisted steps are disabled.")
                warned = True
            return gateway

        return factory

    def _report(self, message: str) -> None:
        if self.progress is not None:
            self.progress(message)


__all__ = ["EMPTY_PROJECT_MESSAGE", "Orchestrator", "PipelineError"]
