"""Gateway over the model service used by the workflow steps."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from ..logging import get_logger
from .decoding import DecodeResult, ParseError, ServiceError
from .runner import LLMRunner

logger = get_logger("llm.gateway")


@dataclass(frozen=True)
class SchemaDescriptor:
    """Named JSON schema requested from the service in structured mode."""

    name: str
    schema: Dict[str, Any] = field(default_factory=dict)

    def response_format(self) -> Dict[str, Any]:
        return {
            "type": "json_schema",
            "json_schema": {"name": self.name, "schema": self.schema, "strict": True},
        }


ADDITIONAL_FILES_SCHEMA = SchemaDescriptor(
    name="additional_files",
    schema={
        "type": "object",
        "properties": {
            "additionalFiles": {
                "type": "array",
                "description": "Files the initial script may have missed, each with 'path' and 'content'.",
                "items": {
                    "type": "object",
                    "properties": {
                        "path": {"type": "string", "description": "Full path of the missing file."},
                        "content": {"type": "string", "description": "Full content of the missing file."},
                    },
                    "required": ["path", "content"],
                    "additionalProperties": False,
                },
            },
        },
        "required": ["additionalFiles"],
        "additionalProperties": False,
    },
)

DOCUMENTATION_NOTES_SCHEMA = SchemaDescriptor(
    name="documentation_notes",
    schema={
        "type": "object",
        "properties": {
            "documentationNotes": {
                "type": "string",
                "description": (
                    "All descriptive text, goals and relevant instructions found outside code blocks. "
                    "Used to improve the README.md."
                ),
            },
        },
        "required": ["documentationNotes"],
        "additionalProperties": False,
    },
)


class AssistGateway:
    """Free-form and schema-constrained text generation over one runner."""

    def __init__(self, runner: LLMRunner) -> None:
        self.runner = runner

    def generate_text(self, prompt: str) -> str:
        return self.runner.run(prompt)

    def generate_structured(self, prompt: str, schema: SchemaDescriptor) -> str:
        """Return the raw reply text; decoding belongs to the caller."""
        return self.runner.run(prompt, response_format=schema.response_format())

    def request_structured(
        self,
        prompt: str,
        schema: SchemaDescriptor,
        decoder: Callable[[str], DecodeResult],
    ) -> DecodeResult:
        """Call the service in structured mode and decode the reply.

        Service failures are returned as :class:`ServiceError` instead of
        being raised, so callers only branch on the tagged result.
        """
        try:
            raw = self.generate_structured(prompt, schema)
        except Exception as exc:
            return ServiceError(detail=str(exc) or exc.__class__.__name__)
        if not isinstance(raw, str):
            return ParseError(detail="Model reply was not text")
        return decoder(raw)


GatewayFactory = Callable[[Optional[str]], Optional[AssistGateway]]


def get_gateway(
    credential: str | None = None,
    *,
    config: Any = None,
    runner_factory: Callable[..., LLMRunner] | None = None,
) -> AssistGateway | None:
    """Return a gateway, or ``None`` when no credential is available.

    The explicit ``credential`` wins over ``config.api_key``, which wins over
    the ambient environment keys known to :class:`LLMRunner`.
    """
    factory = runner_factory or LLMRunner
    kwargs: Dict[str, Any] = {}
    if config is not None:
        if config.model:
            kwargs["model"] = config.model
        if config.base_url:
            kwargs["base_url"] = config.base_url
        if config.temperature is not None:
            kwargs["temperature"] = config.temperature
        if config.max_tokens is not None:
            kwargs["max_tokens"] = config.max_tokens
        if config.request_timeout is not None:
            kwargs["request_timeout"] = config.request_timeout

    api_key = credential or (config.api_key if config is not None else None)
    if api_key:
        kwargs["api_key"] = api_key

    runner = factory(**kwargs)
    if not getattr(runner, "api_key", None):
        logger.debug("No model API key is configured; returning no gateway")
        return None
    return AssistGateway(runner)


__all__ = [
    "ADDITIONAL_FILES_SCHEMA",
    "AssistGateway",
    "DOCUMENTATION_NOTES_SCHEMA",
    "GatewayFactory",
    "SchemaDescriptor",
    "get_gateway",
]
