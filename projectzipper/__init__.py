"""Turn pasted project text or archives into a structured file tree."""

from .extractor import extract, serialize
from .models import PipelineResult, PipelineState, ProjectFile, StepType, WorkflowStepConfig
from .orchestrator import Orchestrator, PipelineError

__version__ = "0.1.0"

__all__ = [
    "Orchestrator",
    "PipelineError",
    "PipelineResult",
    "PipelineState",
    "ProjectFile",
    "StepType",
    "WorkflowStepConfig",
    "extract",
    "serialize",
]
