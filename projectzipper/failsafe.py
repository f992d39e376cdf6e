"""Fallback content used when AI-assisted steps cannot produce output."""

from __future__ import annotations

from jinja2 import Environment, StrictUndefined

DOCS_FAILURE_PREFIX = "[projectzipper] Documentation extraction failed"

_ENV = Environment(
    autoescape=False,
    keep_trailing_newline=False,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=StrictUndefined,
)

_SKIPPED_README = _ENV.from_string(
    """# README Generation Skipped

The README could not be generated because no API key is configured.
Provide one with `--api-key`, the `llm.api_key` setting in `.projectzipper.yml`, or the `PROJECTZIPPER_API_KEY` environment variable, then run the workflow again."""
)

_ERROR_README = _ENV.from_string(
    """# Project Documentation

**Warning: README.md could not be generated automatically because of an error.**

This is a placeholder file. Review the project's source files to understand its structure and purpose.

**Error details:**
```
{{ reason }}
```"""
)

_UNKNOWN_ERROR = "An unknown model service error occurred."


def build_skipped_readme() -> str:
    """Return the README used when no credential is available."""
    return _SKIPPED_README.render()


def build_error_readme(reason: str | None) -> str:
    """Return a placeholder README that embeds the failure reason."""
    return _ERROR_README.render(reason=_format_reason(reason) or _UNKNOWN_ERROR)


def documentation_failure_note(reason: str | None) -> str:
    """Return the in-band diagnostic recorded when notes extraction fails."""
    cleaned = _format_reason(reason)
    if cleaned:
        return f"{DOCS_FAILURE_PREFIX}. Error: {cleaned}"
    return f"{DOCS_FAILURE_PREFIX}."


def append_note(existing: str, note: str) -> str:
    """Append ``note`` on its own line, keeping whatever notes already exist."""
    if existing:
        return f"{existing}\n{note}"
    return note


def _format_reason(reason: str | None) -> str | None:
    if not reason:
        return None
    cleaned = " ".join(reason.strip().split())
    if not cleaned:
        return None
    return cleaned[:500] + ("…" if len(cleaned) > 500 else "")


__all__ = [
    "DOCS_FAILURE_PREFIX",
    "append_note",
    "build_error_readme",
    "build_skipped_readme",
    "documentation_failure_note",
]
