"""Tests for the documentation notes step."""

from __future__ import annotations

from projectzipper.failsafe import DOCS_FAILURE_PREFIX
from projectzipper.llm.runner import LLMServiceError
from projectzipper.models import PipelineState, ProjectFile
from projectzipper.steps.extract_docs import extract_documentation_notes
from tests._fixtures.scripted_llm import ScriptedReplies, gateway_factory

TEMPLATE = "Extract notes from: ORIGINAL_CONTENT_PLACEHOLDER"


def _state(notes: str = "") -> PipelineState:
    return PipelineState(
        full_project_content="Intro prose\n---\n### `a.txt`\n```\nA\n```",
        files=[ProjectFile("a.txt", "A")],
        documentation_notes=notes,
    )


def test_unavailable_gateway_returns_state_unchanged() -> None:
    state = _state("existing")

    result = extract_documentation_notes(state, TEMPLATE, gateway_factory=gateway_factory(available=False))

    assert result is state
    assert result.documentation_notes == "existing"


def test_notes_replace_previous_value() -> None:
    state = _state("stale notes")
    script = ScriptedReplies('{"documentationNotes": "Run npm start to launch."}')

    result = extract_documentation_notes(state, TEMPLATE, "key", gateway_factory=gateway_factory(script))

    assert result.documentation_notes == "Run npm start to launch."
    assert state.documentation_notes == "stale notes"
    assert script.prompts == [f"Extract notes from: {state.full_project_content}"]
    assert script.requests[0].response_format["json_schema"]["name"] == "documentation_notes"


def test_empty_notes_are_accepted() -> None:
    script = ScriptedReplies('{"documentationNotes": ""}')

    result = extract_documentation_notes(_state("old"), TEMPLATE, "key", gateway_factory=gateway_factory(script))

    assert result.documentation_notes == ""


def test_service_failure_appends_diagnostic_to_existing_notes() -> None:
    script = ScriptedReplies(LLMServiceError("Model service failed with status 429: quota"))

    result = extract_documentation_notes(_state("Earlier notes"), TEMPLATE, "key", gateway_factory=gateway_factory(script))

    first, second = result.documentation_notes.split("\n")
    assert first == "Earlier notes"
    assert second.startswith(DOCS_FAILURE_PREFIX)
    assert "status 429" in second
    assert result.files == _state().files


def test_missing_field_is_recorded_as_failure() -> None:
    script = ScriptedReplies('{"summary": "wrong shape"}')

    result = extract_documentation_notes(_state(), TEMPLATE, "key", gateway_factory=gateway_factory(script))

    assert result.documentation_notes.startswith(DOCS_FAILURE_PREFIX)
    assert "documentationNotes" in result.documentation_notes


def test_unterminated_fenced_reply_still_replaces_notes() -> None:
    script = ScriptedReplies('```json\n{"documentationNotes": "new"}')

    result = extract_documentation_notes(_state("old"), TEMPLATE, "key", gateway_factory=gateway_factory(script))

    assert result.documentation_notes == "new"
