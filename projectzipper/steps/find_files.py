"""Workflow step: ask the model for files the heading parser missed."""

from __future__ import annotations

import json

from ..llm.decoding import ParseError, ServiceError, decode_additional_files
from ..llm.gateway import ADDITIONAL_FILES_SCHEMA, GatewayFactory, get_gateway
from ..logging import get_logger
from ..models import PipelineState, ProjectFile
from ..prompting.constants import (
    NO_PARSED_FILES_MARKER,
    ORIGINAL_CONTENT_PLACEHOLDER,
    PARSED_FILES_PLACEHOLDER,
)
from ..prompting.templates import fill_placeholders

logger = get_logger("steps.find_files")


def build_prompt(state: PipelineState, prompt_template: str) -> str:
    paths = state.paths()
    parsed_files = json.dumps(paths) if paths else NO_PARSED_FILES_MARKER
    return fill_placeholders(
        prompt_template,
        {
            ORIGINAL_CONTENT_PLACEHOLDER: state.full_project_content,
            PARSED_FILES_PLACEHOLDER: parsed_files,
        },
    )


def find_additional_files(
    state: PipelineState,
    prompt_template: str,
    credential: str | None = None,
    *,
    gateway_factory: GatewayFactory = get_gateway,
) -> PipelineState:
    """Append model-discovered files whose paths are not already known.

    Returns ``state`` itself when the gateway is unavailable or the call
    fails; otherwise a new state with the accepted files appended. Existing
    paths always win over the model's version.
    """
    gateway = gateway_factory(credential)
    if gateway is None:
        logger.info("Skipping file discovery: no model credential available")
        return state

    result = gateway.request_structured(
        build_prompt(state, prompt_template),
        ADDITIONAL_FILES_SCHEMA,
        decode_additional_files,
    )
    if isinstance(result, ServiceError):
        logger.warning("File discovery request failed: %s", result.detail)
        return state
    if isinstance(result, ParseError):
        logger.warning("Ignoring unparseable file discovery reply: %s", result.detail)
        return state

    updated = state.clone()
    known = set(updated.paths())
    added = 0
    for candidate in result.value:
        if candidate.path in known:
            logger.debug("Skipping duplicate path from model: %s", candidate.path)
            continue
        updated.files.append(ProjectFile(path=candidate.path, content=candidate.content))
        known.add(candidate.path)
        added += 1
    logger.info("File discovery added %d file(s)", added)
    return updated


__all__ = ["build_prompt", "find_additional_files"]
