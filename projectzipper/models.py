"""Core data models shared across projectzipper components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List


@dataclass
class ProjectFile:
    """A single logical file recovered from the raw project text."""

    path: str
    content: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.path, str) or not self.path:
            raise ValueError("ProjectFile.path must be a non-empty string")
        if not isinstance(self.content, str):
            raise TypeError("ProjectFile.content must be a string")

    def copy(self) -> "ProjectFile":
        return ProjectFile(path=self.path, content=self.content)

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "content": self.content}


@dataclass
class PipelineState:
    """Accumulating record threaded through the enabled workflow steps.

    ``full_project_content`` is fixed at construction time. ``files`` only
    grows (or has its README replaced) and ``documentation_notes`` is owned by
    the documentation step.
    """

    full_project_content: str
    files: List[ProjectFile] = field(default_factory=list)
    documentation_notes: str = ""

    def __setattr__(self, name: str, value: object) -> None:
        if name == "full_project_content" and "full_project_content" in self.__dict__:
            raise AttributeError("full_project_content is read-only once the pipeline starts")
        super().__setattr__(name, value)

    def paths(self) -> List[str]:
        return [item.path for item in self.files]

    def has_path(self, path: str) -> bool:
        return any(item.path == path for item in self.files)

    def clone(self) -> "PipelineState":
        """Return a copy whose file list shares nothing with this state."""
        return PipelineState(
            full_project_content=self.full_project_content,
            files=[item.copy() for item in self.files],
            documentation_notes=self.documentation_notes,
        )


class StepType(str, Enum):
    """Kinds of AI-assisted workflow steps."""

    FIND_FILES = "FIND_FILES"
    EXTRACT_DOCS = "EXTRACT_DOCS"
    GENERATE_README = "GENERATE_README"


@dataclass
class WorkflowStepConfig:
    """User-editable configuration for one workflow step."""

    id: str
    type: StepType
    name: str
    prompt: str
    enabled: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.type, StepType):
            try:
                self.type = StepType(str(self.type).upper())
            except ValueError as exc:
                raise ValueError(f"Unknown workflow step type: {self.type!r}") from exc


class PipelineStatus(str, Enum):
    """Lifecycle of a single pipeline run."""

    IDLE = "idle"
    PREPARING = "preparing"
    RUNNING = "running"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class PipelineResult:
    """Successful pipeline outcome handed to editors and packagers."""

    files: List[ProjectFile]
    notes: str = ""
