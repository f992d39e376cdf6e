"""Model-assisted refactoring of a single file's content."""

from __future__ import annotations

import re

from .llm.gateway import GatewayFactory, get_gateway
from .logging import get_logger
from .prompting.constants import CODE_PLACEHOLDER, CODE_REFACTORING_PROMPT
from .prompting.templates import fill_placeholder

_CODE_FENCE = re.compile(r"^```(?:\w+\n)?(.+)```$", re.DOTALL)

logger = get_logger("refactor")


class RefactorError(RuntimeError):
    """Raised when refactoring is unavailable or the service call fails."""


def clean_code_response(raw_text: str) -> str:
    """Strip a markdown fence the model wrapped around the code, if any."""
    trimmed = raw_text.strip()
    match = _CODE_FENCE.match(trimmed)
    if match and match.group(1):
        return match.group(1).strip()
    return trimmed


def refactor_code(
    code: str,
    prompt_template: str = CODE_REFACTORING_PROMPT,
    credential: str | None = None,
    *,
    gateway_factory: GatewayFactory = get_gateway,
) -> str:
    """Return the refactored version of ``code``.

    Unlike the workflow steps this raises :class:`RefactorError`, since the
    caller is an interactive edit that must report the failure.
    """
    gateway = gateway_factory(credential)
    if gateway is None:
        raise RefactorError("Refactoring service unavailable: no API key configured.")
    if not code.strip():
        return code

    prompt = fill_placeholder(prompt_template, CODE_PLACEHOLDER, code)
    try:
        response = gateway.generate_text(prompt)
    except Exception as exc:
        logger.warning("Refactor request failed: %s", exc)
        raise RefactorError(f"Code refactoring failed. Reason: {exc}") from exc
    return clean_code_response(response)


__all__ = ["RefactorError", "clean_code_response", "refactor_code"]
