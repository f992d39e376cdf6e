"""Tests for projectzipper.orchestrator."""

from __future__ import annotations

import io
import json
import logging
import zipfile

import pytest

from projectzipper.config import LLMConfig, ProjectZipperConfig
from projectzipper.failsafe import DOCS_FAILURE_PREFIX
from projectzipper.ingest import InputFile
from projectzipper.llm.gateway import get_gateway
from projectzipper.llm.runner import LLMServiceError
from projectzipper.models import PipelineStatus, StepType, WorkflowStepConfig
from projectzipper.orchestrator import EMPTY_PROJECT_MESSAGE, Orchestrator, PipelineError
from projectzipper.prompting.constants import default_workflow_steps
from tests._fixtures.scripted_llm import ScriptedReplies, gateway_factory

SIMPLE_INPUT = "### `a.txt`\n```\nhello\n```\n---\n### `b.txt`\n```\nworld\n```"


def _steps(*enabled: StepType) -> list[WorkflowStepConfig]:
    steps = default_workflow_steps()
    for step in steps:
        step.enabled = step.type in enabled
    return steps


def _pairs(result) -> list[tuple[str, str]]:
    return [(item.path, item.content) for item in result.files]


def test_run_without_enabled_steps_returns_extracted_files() -> None:
    orchestrator = Orchestrator(gateway_factory(ScriptedReplies()))

    result = orchestrator.run(SIMPLE_INPUT, _steps())

    assert _pairs(result) == [("a.txt", "hello"), ("b.txt", "world")]
    assert result.notes == ""
    assert orchestrator.last_status is PipelineStatus.SUCCESS
    assert orchestrator.status is PipelineStatus.IDLE


def test_empty_input_is_fatal() -> None:
    orchestrator = Orchestrator(gateway_factory(ScriptedReplies()))

    with pytest.raises(PipelineError, match="Unable to parse any files"):
        orchestrator.run("just some prose without headings", _steps())

    assert orchestrator.last_status is PipelineStatus.FAILURE
    assert orchestrator.status is PipelineStatus.IDLE


def test_empty_check_runs_after_steps() -> None:
    script = ScriptedReplies('{"additionalFiles": [{"path": "found.py", "content": "x = 1"}]}')
    orchestrator = Orchestrator(gateway_factory(script))

    result = orchestrator.run("A description mentioning found.py", _steps(StepType.FIND_FILES), credential="key")

    assert _pairs(result) == [("found.py", "x = 1")]


def test_empty_after_failed_discovery_is_fatal() -> None:
    script = ScriptedReplies(LLMServiceError("offline"))
    orchestrator = Orchestrator(gateway_factory(script))

    with pytest.raises(PipelineError) as excinfo:
        orchestrator.run("prose only", _steps(StepType.FIND_FILES), credential="key")

    assert str(excinfo.value) == EMPTY_PROJECT_MESSAGE


def test_full_workflow_runs_steps_in_order() -> None:
    script = ScriptedReplies(
        json.dumps({"additionalFiles": [{"path": "c.txt", "content": "C"}]}),
        json.dumps({"documentationNotes": "Run it with make."}),
        "# Generated README",
    )
    factory = gateway_factory(script)
    orchestrator = Orchestrator(factory)

    result = orchestrator.run(SIMPLE_INPUT, credential="user-key")

    assert _pairs(result) == [
        ("README.md", "# Generated README"),
        ("a.txt", "hello"),
        ("b.txt", "world"),
        ("c.txt", "C"),
    ]
    assert result.notes == "Run it with make."
    assert [r.response_format is not None for r in script.requests] == [True, True, False]
    assert "Run it with make." in script.prompts[2]
    assert factory.credentials == ["user-key", "user-key", "user-key"]


def test_disabled_steps_are_not_called() -> None:
    script = ScriptedReplies("# Only README")
    orchestrator = Orchestrator(gateway_factory(script))

    result = orchestrator.run(SIMPLE_INPUT, _steps(StepType.GENERATE_README), credential="key")

    assert len(script.requests) == 1
    assert result.files[0].path == "README.md"


def test_custom_order_is_honoured() -> None:
    steps = list(reversed(default_workflow_steps()))
    script = ScriptedReplies(
        "# README first",
        json.dumps({"documentationNotes": "late notes"}),
        json.dumps({"additionalFiles": []}),
    )
    orchestrator = Orchestrator(gateway_factory(script))

    result = orchestrator.run(SIMPLE_INPUT, steps, credential="key")

    assert result.files[0].content == "# README first"
    assert result.notes == "late notes"
    assert "No additional documentation notes" in script.prompts[0]


def test_existing_lowercase_readme_is_replaced_in_place() -> None:
    text = SIMPLE_INPUT + "\n---\n### `readme.md`\n```\nold\n```"
    orchestrator = Orchestrator(gateway_factory(ScriptedReplies("# New README")))

    result = orchestrator.run(text, _steps(StepType.GENERATE_README), credential="key")

    assert _pairs(result) == [("a.txt", "hello"), ("b.txt", "world"), ("readme.md", "# New README")]


def test_ai_failures_do_not_abort_the_run() -> None:
    script = ScriptedReplies(
        LLMServiceError("boom"),
        LLMServiceError("boom"),
        LLMServiceError("boom"),
    )
    orchestrator = Orchestrator(gateway_factory(script))

    result = orchestrator.run(SIMPLE_INPUT, credential="key")

    assert [f.path for f in result.files] == ["README.md", "a.txt", "b.txt"]
    assert result.files[0].content.startswith("# Project Documentation")
    assert result.notes.startswith(DOCS_FAILURE_PREFIX)
    assert orchestrator.last_status is PipelineStatus.SUCCESS


def test_unavailable_gateway_skips_ai_steps_but_adds_readme_notice() -> None:
    factory = gateway_factory(available=False)
    orchestrator = Orchestrator(factory)

    result = orchestrator.run(SIMPLE_INPUT)

    assert [f.path for f in result.files] == ["README.md", "a.txt", "b.txt"]
    assert result.files[0].content.startswith("# README Generation Skipped")
    assert result.notes == ""
    assert factory.credentials == [None, None, None]


def test_duplicate_sections_keep_first_occurrence() -> None:
    text = "### `a.txt`\n```\none\n```\n---\n### `a.txt`\n```\ntwo\n```"

    result = Orchestrator(gateway_factory()).run(text, _steps())

    assert _pairs(result) == [("a.txt", "one")]


def test_archive_inputs_are_ingested() -> None:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("src/app.py", "print('hi')")
    inputs = [
        InputFile(name="notes.md", data="### `docs/intro.md`\n```\nHello\n```"),
        InputFile(name="project.zip", data=buffer.getvalue()),
    ]

    result = Orchestrator(gateway_factory()).run(inputs, _steps())

    assert _pairs(result) == [("docs/intro.md", "Hello"), ("src/app.py", "print('hi')")]


def test_ingest_failure_becomes_pipeline_error() -> None:
    orchestrator = Orchestrator(gateway_factory())

    with pytest.raises(PipelineError):
        orchestrator.run([InputFile(name="broken.zip", data=b"nope")], _steps())

    assert orchestrator.last_status is PipelineStatus.FAILURE


def test_progress_messages_are_reported() -> None:
    messages: list[str] = []
    orchestrator = Orchestrator(gateway_factory(ScriptedReplies("# R")), progress=messages.append)

    orchestrator.run(SIMPLE_INPUT, _steps(StepType.GENERATE_README), credential="key")

    assert messages == ["1/2: Preparing input...", '2/2: Running step "Generate README.md"...']


def test_default_steps_come_from_config(tmp_path) -> None:
    steps = _steps(StepType.EXTRACT_DOCS)
    config = ProjectZipperConfig(root=tmp_path, llm=LLMConfig(), steps=steps)

    orchestrator = Orchestrator(gateway_factory(), config=config)

    assert orchestrator.default_steps() == steps
    assert orchestrator.default_steps() is not config.steps


def test_default_gateway_factory_uses_config_key(tmp_path) -> None:
    config = ProjectZipperConfig(root=tmp_path, llm=LLMConfig(api_key="config-key", base_url="https://example.invalid"))

    gateway = Orchestrator(config=config).gateway_factory(None)

    assert gateway is not None
    assert gateway.runner.api_key == "config-key"
    assert gateway.runner.base_url == "https://example.invalid"


def test_missing_credential_is_warned_once_per_run(caplog) -> None:
    orchestrator = Orchestrator(gateway_factory(available=False))

    with caplog.at_level(logging.WARNING, logger="projectzipper"):
        orchestrator.run(SIMPLE_INPUT)

    warnings = [r for r in caplog.records if "No model API key" in r.getMessage()]
    assert len(warnings) == 1


def test_get_gateway_does_not_warn_per_call(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="projectzipper"):
        assert get_gateway(None) is None
        assert get_gateway(None) is None

    assert not [r for r in caplog.records if "No model API key" in r.getMessage()]
