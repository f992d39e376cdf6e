"""Prompt templates and workflow step definitions."""

from .constants import (
    CODE_PLACEHOLDER,
    ORIGINAL_CONTENT_PLACEHOLDER,
    PARSED_FILES_PLACEHOLDER,
    default_workflow_steps,
    step_definition,
)
from .templates import fill_placeholder, fill_placeholders

__all__ = [
    "CODE_PLACEHOLDER",
    "ORIGINAL_CONTENT_PLACEHOLDER",
    "PARSED_FILES_PLACEHOLDER",
    "default_workflow_steps",
    "fill_placeholder",
    "fill_placeholders",
    "step_definition",
]
