"""Tests for projectzipper.models."""

from __future__ import annotations

import pytest

from projectzipper.models import PipelineState, ProjectFile, StepType, WorkflowStepConfig


def test_project_file_requires_path() -> None:
    with pytest.raises(ValueError):
        ProjectFile("")


def test_full_project_content_is_read_only(sample_state: PipelineState) -> None:
    with pytest.raises(AttributeError):
        sample_state.full_project_content = "changed"

    sample_state.documentation_notes = "allowed"
    assert sample_state.documentation_notes == "allowed"


def test_clone_does_not_share_files(sample_state: PipelineState) -> None:
    copy = sample_state.clone()
    copy.files[0].content = "changed"
    copy.files.append(ProjectFile("b.txt"))

    assert sample_state.files == [ProjectFile("a.txt", "hello")]
    assert copy.has_path("b.txt")
    assert not sample_state.has_path("b.txt")


def test_step_config_accepts_type_name() -> None:
    step = WorkflowStepConfig(id="s1", type="extract_docs", name="Docs", prompt="p")

    assert step.type is StepType.EXTRACT_DOCS

    with pytest.raises(ValueError):
        WorkflowStepConfig(id="s2", type="translate", name="?", prompt="p")
