"""Workflow step: synthesize a README.md and upsert it into the file set."""

from __future__ import annotations

from typing import List, Sequence

from ..failsafe import build_error_readme, build_skipped_readme
from ..llm.gateway import GatewayFactory, get_gateway
from ..logging import get_logger, log_exception
from ..models import PipelineState, ProjectFile
from ..prompting.constants import NO_NOTES_MARKER

README_PATH = "README.md"

logger = get_logger("steps.generate_readme")


def build_readme_context(state: PipelineState) -> str:
    notes = state.documentation_notes or NO_NOTES_MARKER
    return (
        "\n**Original Project Content:**\n"
        f"{state.full_project_content}\n"
        "\n---\n"
        "**Additional Documentation Notes (extracted by the assistant, prioritise these):**\n"
        f"{notes}\n"
    )


def generate_readme(
    state: PipelineState,
    prompt_template: str,
    credential: str | None = None,
    *,
    gateway_factory: GatewayFactory = get_gateway,
) -> str:
    """Return README markdown; never empty, never raises for service errors."""
    gateway = gateway_factory(credential)
    if gateway is None:
        logger.info("Skipping README generation: no model credential available")
        return build_skipped_readme()

    prompt = f"{prompt_template}\n{build_readme_context(state)}"
    try:
        content = gateway.generate_text(prompt)
        if not isinstance(content, str) or not content.strip():
            raise ValueError("Model service returned an empty README")
    except Exception as exc:
        log_exception(logger, "README generation failed", exc)
        return build_error_readme(str(exc))
    return content.strip()


def upsert_readme(files: Sequence[ProjectFile], content: str) -> List[ProjectFile]:
    """Replace the README (matched case-insensitively) or prepend a new one."""
    updated = [item.copy() for item in files]
    for item in updated:
        if item.path.lower() == README_PATH.lower():
            item.content = content
            return updated
    updated.insert(0, ProjectFile(path=README_PATH, content=content))
    return updated


__all__ = ["README_PATH", "build_readme_context", "generate_readme", "upsert_readme"]
