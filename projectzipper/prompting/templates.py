"""Literal placeholder substitution for user-editable prompt templates."""

from __future__ import annotations

from typing import Mapping


def fill_placeholder(template: str, token: str, value: str) -> str:
    """Replace the first literal occurrence of ``token`` with ``value``.

    Later occurrences are left untouched and ``value`` is inserted verbatim.
    """
    return template.replace(token, value, 1)


def fill_placeholders(template: str, values: Mapping[str, str]) -> str:
    """Apply :func:`fill_placeholder` for each token, in mapping order."""
    result = template
    for token, value in values.items():
        result = fill_placeholder(result, token, value)
    return result


__all__ = ["fill_placeholder", "fill_placeholders"]
