"""Workflow step: extract orphan documentation prose from the raw input."""

from __future__ import annotations

from ..failsafe import append_note, documentation_failure_note
from ..llm.decoding import ParseError, ServiceError, decode_documentation_notes
from ..llm.gateway import DOCUMENTATION_NOTES_SCHEMA, GatewayFactory, get_gateway
from ..logging import get_logger
from ..models import PipelineState
from ..prompting.constants import ORIGINAL_CONTENT_PLACEHOLDER
from ..prompting.templates import fill_placeholder

logger = get_logger("steps.extract_docs")


def extract_documentation_notes(
    state: PipelineState,
    prompt_template: str,
    credential: str | None = None,
    *,
    gateway_factory: GatewayFactory = get_gateway,
) -> PipelineState:
    """Replace the notes with the model's extraction.

    Failures are recorded in-band: a marked diagnostic line is appended to
    the existing notes so earlier valid notes survive.
    """
    gateway = gateway_factory(credential)
    if gateway is None:
        logger.info("Skipping documentation extraction: no model credential available")
        return state

    prompt = fill_placeholder(prompt_template, ORIGINAL_CONTENT_PLACEHOLDER, state.full_project_content)
    result = gateway.request_structured(prompt, DOCUMENTATION_NOTES_SCHEMA, decode_documentation_notes)

    updated = state.clone()
    if isinstance(result, (ServiceError, ParseError)):
        logger.warning("Documentation extraction failed: %s", result.detail)
        updated.documentation_notes = append_note(
            updated.documentation_notes,
            documentation_failure_note(result.detail),
        )
        return updated

    updated.documentation_notes = result.value
    logger.info("Extracted %d characters of documentation notes", len(result.value))
    return updated


__all__ = ["extract_documentation_notes"]
