"""Tests for the AI assist gateway."""

from __future__ import annotations

from projectzipper.config import LLMConfig
from projectzipper.llm.decoding import Ok, ServiceError, decode_documentation_notes
from projectzipper.llm.gateway import (
    ADDITIONAL_FILES_SCHEMA,
    DOCUMENTATION_NOTES_SCHEMA,
    AssistGateway,
    get_gateway,
)
from projectzipper.llm.runner import LLMRunner, LLMServiceError
from tests._fixtures.scripted_llm import ScriptedReplies


class RecordingRunnerFactory:
    def __init__(self) -> None:
        self.kwargs: list[dict[str, object]] = []

    def __call__(self, **kwargs):
        self.kwargs.append(kwargs)
        kwargs.setdefault("base_url", None)
        return LLMRunner(runner=ScriptedReplies(), **kwargs)


def test_get_gateway_without_credential_is_unavailable() -> None:
    assert get_gateway(None) is None
    assert get_gateway("") is None


def test_get_gateway_explicit_credential_overrides_config() -> None:
    factory = RecordingRunnerFactory()
    config = LLMConfig(model="gemini-2.5-pro", api_key="config-key", temperature=0.0)

    gateway = get_gateway("override-key", config=config, runner_factory=factory)

    assert isinstance(gateway, AssistGateway)
    assert gateway.runner.api_key == "override-key"
    assert factory.kwargs[0]["model"] == "gemini-2.5-pro"
    assert factory.kwargs[0]["temperature"] == 0.0


def test_get_gateway_falls_back_to_config_key() -> None:
    gateway = get_gateway(None, config=LLMConfig(api_key="config-key"), runner_factory=RecordingRunnerFactory())

    assert gateway is not None
    assert gateway.runner.api_key == "config-key"


def test_get_gateway_uses_ambient_key(monkeypatch) -> None:
    monkeypatch.setenv("PROJECTZIPPER_API_KEY", "ambient-key")

    gateway = get_gateway(None)

    assert gateway is not None
    assert gateway.runner.api_key == "ambient-key"


def test_generate_structured_sends_schema_response_format() -> None:
    script = ScriptedReplies('{"additionalFiles": []}')
    gateway = AssistGateway(LLMRunner(api_key="k", base_url=None, runner=script))

    raw = gateway.generate_structured("find files", ADDITIONAL_FILES_SCHEMA)

    assert raw == '{"additionalFiles": []}'
    response_format = script.requests[0].response_format
    assert response_format["type"] == "json_schema"
    assert response_format["json_schema"]["name"] == "additional_files"
    assert response_format["json_schema"]["schema"]["required"] == ["additionalFiles"]


def test_generate_text_sends_no_response_format() -> None:
    script = ScriptedReplies("# README")
    gateway = AssistGateway(LLMRunner(api_key="k", base_url=None, runner=script))

    assert gateway.generate_text("write") == "# README"
    assert script.requests[0].response_format is None


def test_request_structured_wraps_service_failures() -> None:
    script = ScriptedReplies(LLMServiceError("status 503"))
    gateway = AssistGateway(LLMRunner(api_key="k", base_url=None, runner=script))

    result = gateway.request_structured("extract", DOCUMENTATION_NOTES_SCHEMA, decode_documentation_notes)

    assert result == ServiceError(detail="status 503")


def test_request_structured_decodes_reply() -> None:
    script = ScriptedReplies('```json\n{"documentationNotes": "Run npm start"}\n```')
    gateway = AssistGateway(LLMRunner(api_key="k", base_url=None, runner=script))

    result = gateway.request_structured("extract", DOCUMENTATION_NOTES_SCHEMA, decode_documentation_notes)

    assert result == Ok("Run npm start")
